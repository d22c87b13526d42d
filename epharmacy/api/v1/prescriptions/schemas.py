from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from epharmacy.api.v1.catalog.schemas import MedicationResponse
from epharmacy.domain.prescriptions.engine import SymptomReport
from epharmacy.domain.prescriptions.models import PrescriptionStatus


class SymptomCheckRequest(BaseModel):
    """Symptom checker form"""
    main_symptom: str = Field(..., min_length=1, description="Primary symptom, e.g. 'Headache'")
    additional_symptoms: List[str] = Field(default_factory=list)
    duration: str = Field(..., min_length=1, description="e.g. 'Less than 24 hours', 'More than 2 weeks'")
    severity: int = Field(..., ge=1, le=10)
    details: Optional[str] = None

    def to_report(self) -> SymptomReport:
        return SymptomReport(
            main_symptom=self.main_symptom,
            duration=self.duration,
            severity=self.severity,
            additional_symptoms=tuple(self.additional_symptoms),
            details=self.details,
        )


class PrescriptionMedicationResponse(BaseModel):
    id: int
    prescription_id: int
    medication_id: int
    instructions: str
    quantity: int
    medication: MedicationResponse

    class Config:
        from_attributes = True


class PrescriptionResponse(BaseModel):
    id: int
    user_id: int
    diagnosis: str
    additional_recommendations: str
    created_at: datetime
    is_ai_generated: bool
    status: PrescriptionStatus
    medications: List[PrescriptionMedicationResponse] = []

    class Config:
        from_attributes = True


class GeneratedPrescriptionResponse(PrescriptionResponse):
    # recommended medications that had no catalog match and were left out
    unresolved_recommendations: int = 0


class PrescriptionStatusUpdate(BaseModel):
    status: PrescriptionStatus
