from typing import List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.core.exceptions import ConflictError, NotFoundError
from epharmacy.domain.catalog.models import Medication, Symptom
from epharmacy.domain.catalog.repository import MedicationRepository, SymptomRepository
from epharmacy.domain.catalog.seed import COMMON_MEDICATIONS, COMMON_SYMPTOMS


class CatalogService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.symptom_repo = SymptomRepository(db)
        self.medication_repo = MedicationRepository(db)

    async def list_symptoms(self) -> List[Symptom]:
        return await self.symptom_repo.list_all()

    async def create_symptom(self, symptom_in: dict) -> Symptom:
        if await self.symptom_repo.get_by_name(symptom_in["name"]):
            raise ConflictError(f"Symptom '{symptom_in['name']}' already exists")
        return await self.symptom_repo.create(symptom_in)

    async def list_medications(self) -> List[Medication]:
        return await self.medication_repo.list_all()

    async def get_medication(self, medication_id: int) -> Medication:
        medication = await self.medication_repo.get(medication_id)
        if not medication:
            raise NotFoundError("Medication not found")
        return medication

    async def create_medication(self, medication_in: dict) -> Medication:
        return await self.medication_repo.create(medication_in)

    async def seed_catalog(self) -> dict:
        """Load the reference symptoms and medications into empty tables"""
        seeded = {"symptoms": 0, "medications": 0}

        if await self.symptom_repo.count() == 0:
            await self.symptom_repo.bulk_create(COMMON_SYMPTOMS)
            seeded["symptoms"] = len(COMMON_SYMPTOMS)

        if await self.medication_repo.count() == 0:
            await self.medication_repo.bulk_create([dict(m) for m in COMMON_MEDICATIONS])
            seeded["medications"] = len(COMMON_MEDICATIONS)

        if any(seeded.values()):
            logger.info(f"Seeded catalog: {seeded}")
        return seeded
