from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.api import deps
from epharmacy.domain.auth.models import User
from epharmacy.domain.prescriptions.service import PrescriptionService
from epharmacy.infrastructure.database import get_db
from epharmacy.api.v1.prescriptions.schemas import (
    GeneratedPrescriptionResponse,
    PrescriptionResponse,
    PrescriptionStatusUpdate,
    SymptomCheckRequest,
)

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=List[PrescriptionResponse])
async def list_prescriptions(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Current user's prescriptions, newest first"""
    prescriptions = await PrescriptionService(db).list_for_user(current_user.id)
    return [PrescriptionResponse.model_validate(p) for p in prescriptions]


@router.post("/generate", response_model=GeneratedPrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def generate_prescription(
    request: SymptomCheckRequest,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Turn a symptom report into a stored prescription"""
    prescription, diagnosis = await PrescriptionService(db).generate(current_user.id, request.to_report())
    response = GeneratedPrescriptionResponse.model_validate(prescription)
    response.unresolved_recommendations = diagnosis.unresolved_count
    return response


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def read_prescription(
    prescription_id: int,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    prescription = await PrescriptionService(db).get_for_user(prescription_id, current_user)
    return PrescriptionResponse.model_validate(prescription)


@router.patch("/{prescription_id}/status", response_model=PrescriptionResponse)
async def update_prescription_status(
    prescription_id: int,
    status_in: PrescriptionStatusUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db),
):
    prescription = await PrescriptionService(db).update_status(
        prescription_id, current_user, status_in.status
    )
    return PrescriptionResponse.model_validate(prescription)
