from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from epharmacy.domain.prescriptions.models import (
    Prescription, PrescriptionMedication, PrescriptionStatus
)


class PrescriptionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _query(self):
        return select(Prescription).options(
            selectinload(Prescription.medications).selectinload(PrescriptionMedication.medication)
        )

    async def create_with_medications(self, prescription_data: dict, items: List[dict]) -> Prescription:
        """Write a prescription and its medication lines in one transaction"""
        prescription = Prescription(**prescription_data)
        self.db.add(prescription)
        await self.db.flush()

        for it in items:
            self.db.add(PrescriptionMedication(prescription_id=prescription.id, **it))

        await self.db.commit()
        return await self.get(prescription.id, refresh=True)

    async def get(self, prescription_id: int, refresh: bool = False) -> Optional[Prescription]:
        query = self._query().where(Prescription.id == prescription_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> List[Prescription]:
        result = await self.db.execute(
            self._query()
            .where(Prescription.user_id == user_id)
            .order_by(Prescription.created_at.desc(), Prescription.id.desc())
        )
        return list(result.scalars().all())

    async def set_status(self, prescription: Prescription, status: PrescriptionStatus) -> Prescription:
        prescription.status = status
        await self.db.commit()
        return await self.get(prescription.id, refresh=True)
