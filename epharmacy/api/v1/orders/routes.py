from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.api import deps
from epharmacy.domain.auth.models import User
from epharmacy.domain.orders.service import OrderService
from epharmacy.infrastructure.database import get_db
from epharmacy.api.v1.orders.schemas import OrderCreate, OrderResponse, OrderStatusUpdate

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService(db).create_order(
        current_user,
        [item.model_dump() for item in order_in.items],
        prescription_id=order_in.prescription_id,
    )
    return OrderResponse.model_validate(order)


@router.post(
    "/from-prescription/{prescription_id}",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order_from_prescription(
    prescription_id: int,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Order every medication line of a prescription"""
    order = await OrderService(db).create_from_prescription(current_user, prescription_id)
    return OrderResponse.model_validate(order)


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    orders = await OrderService(db).list_for_user(current_user.id)
    return [OrderResponse.model_validate(o) for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
async def read_order(
    order_id: int,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService(db).get_for_user(order_id, current_user)
    return OrderResponse.model_validate(order)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    status_in: OrderStatusUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService(db).update_status(order_id, current_user, status_in.status)
    return OrderResponse.model_validate(order)
