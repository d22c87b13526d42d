import enum

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Text, func
)
from sqlalchemy.orm import relationship

from epharmacy.infrastructure.database import Base
from epharmacy.domain.catalog.models import Medication  # noqa: F401


class PrescriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    diagnosis = Column(Text, nullable=False)
    # advice sentences joined with ". "
    additional_recommendations = Column(Text, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    is_ai_generated = Column(Boolean, default=False, nullable=False)
    status = Column(Enum(PrescriptionStatus), default=PrescriptionStatus.ACTIVE, nullable=False)

    medications = relationship(
        "PrescriptionMedication",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionMedication.id",
        lazy="selectin",
    )


class PrescriptionMedication(Base):
    __tablename__ = "prescription_medications"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_prescription_medications_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    prescription_id = Column(
        Integer, ForeignKey("prescriptions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)
    instructions = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    prescription = relationship("Prescription", back_populates="medications")
    medication = relationship("Medication", lazy="selectin")
