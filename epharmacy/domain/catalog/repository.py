from typing import Optional, List, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.domain.catalog.models import Medication, Symptom


class SymptomRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict) -> Symptom:
        symptom = Symptom(**data)
        self.db.add(symptom)
        await self.db.commit()
        await self.db.refresh(symptom)
        return symptom

    async def get_by_name(self, name: str) -> Optional[Symptom]:
        result = await self.db.execute(select(Symptom).where(Symptom.name == name))
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Symptom]:
        result = await self.db.execute(select(Symptom).order_by(Symptom.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Symptom.id)))
        return result.scalar_one()

    async def bulk_create(self, names: List[str]) -> None:
        self.db.add_all([Symptom(name=name) for name in names])
        await self.db.commit()


class MedicationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict) -> Medication:
        medication = Medication(**data)
        self.db.add(medication)
        await self.db.commit()
        await self.db.refresh(medication)
        return medication

    async def get(self, medication_id: int) -> Optional[Medication]:
        result = await self.db.execute(select(Medication).where(Medication.id == medication_id))
        return result.scalar_one_or_none()

    async def get_many(self, medication_ids: Sequence[int]) -> dict:
        """Map of id -> Medication for the ids that exist"""
        if not medication_ids:
            return {}
        result = await self.db.execute(
            select(Medication).where(Medication.id.in_(set(medication_ids)))
        )
        return {m.id: m for m in result.scalars().all()}

    async def list_all(self) -> List[Medication]:
        # id order is the catalog order the recommendation engine searches in
        result = await self.db.execute(select(Medication).order_by(Medication.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Medication.id)))
        return result.scalar_one()

    async def bulk_create(self, items: List[dict]) -> None:
        self.db.add_all([Medication(**it) for it in items])
        await self.db.commit()
