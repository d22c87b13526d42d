from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.infrastructure.database import get_db
from epharmacy.services import deployment

router = APIRouter(prefix="/system", tags=["System"])


class DeploymentStats(BaseModel):
    medications: int
    symptoms: int


class DeploymentCheckResponse(BaseModel):
    success: bool
    message: str
    stats: DeploymentStats


@router.get("/deployment-check", response_model=DeploymentCheckResponse)
async def deployment_check(db: AsyncSession = Depends(get_db)):
    return await deployment.prepare_for_deployment(db)
