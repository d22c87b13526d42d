from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.api import deps
from epharmacy.domain.auth.models import User
from epharmacy.domain.catalog.service import CatalogService
from epharmacy.infrastructure.database import get_db
from epharmacy.api.v1.catalog.schemas import (
    MedicationCreate, MedicationResponse, SymptomCreate, SymptomResponse
)

router = APIRouter(tags=["Catalog"])


@router.get("/symptoms", response_model=List[SymptomResponse])
async def list_symptoms(db: AsyncSession = Depends(get_db)):
    symptoms = await CatalogService(db).list_symptoms()
    return [SymptomResponse.model_validate(s) for s in symptoms]


@router.post("/symptoms", response_model=SymptomResponse, status_code=status.HTTP_201_CREATED)
async def create_symptom(
    symptom_in: SymptomCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(deps.get_current_admin),
):
    symptom = await CatalogService(db).create_symptom(symptom_in.model_dump())
    return SymptomResponse.model_validate(symptom)


@router.get("/medications", response_model=List[MedicationResponse])
async def list_medications(db: AsyncSession = Depends(get_db)):
    medications = await CatalogService(db).list_medications()
    return [MedicationResponse.model_validate(m) for m in medications]


@router.get("/medications/{medication_id}", response_model=MedicationResponse)
async def read_medication(medication_id: int, db: AsyncSession = Depends(get_db)):
    medication = await CatalogService(db).get_medication(medication_id)
    return MedicationResponse.model_validate(medication)


@router.post("/medications", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_in: MedicationCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(deps.get_current_admin),
):
    medication = await CatalogService(db).create_medication(medication_in.model_dump())
    return MedicationResponse.model_validate(medication)
