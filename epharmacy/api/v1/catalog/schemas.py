from pydantic import BaseModel, Field


class SymptomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class SymptomResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class MedicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    price: int = Field(..., ge=0, description="Price in cents")
    stock: int = Field(100, ge=0)


class MedicationResponse(BaseModel):
    id: int
    name: str
    description: str
    dosage: str
    price: int
    stock: int

    class Config:
        from_attributes = True
