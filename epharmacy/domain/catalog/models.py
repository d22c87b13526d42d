from sqlalchemy import Column, String, Integer, Text, CheckConstraint

from epharmacy.infrastructure.database import Base


class Symptom(Base):
    __tablename__ = "symptoms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)


class Medication(Base):
    __tablename__ = "medications"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_medications_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_medications_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    dosage = Column(Text, nullable=False)
    # cents
    price = Column(Integer, nullable=False)
    # informational only, never decremented
    stock = Column(Integer, nullable=False, default=100)
