from typing import List, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.core.config import settings
from epharmacy.core.exceptions import (
    AuthorizationError,
    BusinessLogicError,
    NotFoundError,
    handle_external_service_error
)
from epharmacy.domain.auth.models import User
from epharmacy.domain.catalog.repository import MedicationRepository
from epharmacy.domain.prescriptions.engine import (
    CatalogSnapshot, Diagnosis, SymptomReport, recommend
)
from epharmacy.domain.prescriptions.models import Prescription, PrescriptionStatus
from epharmacy.domain.prescriptions.repository import PrescriptionRepository
from epharmacy.services import ai_service

ALLOWED_TRANSITIONS = {
    PrescriptionStatus.ACTIVE: {PrescriptionStatus.COMPLETED, PrescriptionStatus.CANCELLED},
    PrescriptionStatus.COMPLETED: set(),
    PrescriptionStatus.CANCELLED: set(),
}


class PrescriptionService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = PrescriptionRepository(db)
        self.medication_repo = MedicationRepository(db)

    async def generate(self, user_id: int, report: SymptomReport) -> Tuple[Prescription, Diagnosis]:
        """Run the rule engine (and the AI collaborator when enabled) and persist the result"""
        catalog = CatalogSnapshot(await self.medication_repo.list_all())
        diagnosis = recommend(report, catalog)

        if diagnosis.unresolved:
            logger.warning(
                f"{diagnosis.unresolved_count} medication recommendation(s) had no catalog match "
                f"for user {user_id}: {[r.name_contains for r in diagnosis.unresolved]}"
            )

        diagnosis_text = diagnosis.text
        recommendations = diagnosis.additional_recommendations
        is_ai_generated = False

        if settings.AI_ENABLED:
            ai_result = await ai_service.generate_ai_prescription(report)
            if ai_result.ok:
                diagnosis_text = ai_result.diagnosis
                recommendations = ai_result.recommendations
                is_ai_generated = True
            elif not settings.AI_FALLBACK_TO_RULES:
                raise handle_external_service_error(
                    RuntimeError(ai_result.error), settings.AI_PROVIDER, "generate_prescription"
                )
            else:
                logger.info(f"Falling back to rule-based prescription: {ai_result.error}")

        prescription = await self.repo.create_with_medications(
            {
                "user_id": user_id,
                "diagnosis": diagnosis_text,
                "additional_recommendations": recommendations,
                "is_ai_generated": is_ai_generated,
                "status": PrescriptionStatus.ACTIVE,
            },
            [
                {
                    "medication_id": rec.medication.id,
                    "instructions": rec.instructions,
                    "quantity": rec.quantity,
                }
                for rec in diagnosis.medications
            ],
        )
        logger.info(
            f"Prescription {prescription.id} generated for user {user_id}: "
            f"{prescription.diagnosis!r} with {len(prescription.medications)} medication(s)"
        )
        return prescription, diagnosis

    async def list_for_user(self, user_id: int) -> List[Prescription]:
        return await self.repo.list_for_user(user_id)

    async def get_for_user(self, prescription_id: int, user: User) -> Prescription:
        prescription = await self.repo.get(prescription_id)
        if not prescription:
            raise NotFoundError("Prescription not found")
        if prescription.user_id != user.id and not user.is_admin:
            raise AuthorizationError("Forbidden: You cannot access this prescription")
        return prescription

    async def update_status(
        self, prescription_id: int, user: User, status: PrescriptionStatus
    ) -> Prescription:
        prescription = await self.get_for_user(prescription_id, user)
        if status not in ALLOWED_TRANSITIONS[prescription.status]:
            raise BusinessLogicError(
                f"Cannot change prescription status from {prescription.status.value} to {status.value}"
            )
        return await self.repo.set_status(prescription, status)
