from fastapi import APIRouter

from epharmacy.core.exceptions import ErrorResponse
from epharmacy.api.v1.auth import routes as auth
from epharmacy.api.v1.catalog import routes as catalog
from epharmacy.api.v1.prescriptions import routes as prescriptions
from epharmacy.api.v1.orders import routes as orders
from epharmacy.api.v1.system import routes as system

error_responses = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

api_router = APIRouter(responses=error_responses)
api_router.include_router(auth.router)
api_router.include_router(auth.users_router)
api_router.include_router(catalog.router)
api_router.include_router(prescriptions.router)
api_router.include_router(orders.router)
api_router.include_router(system.router)
