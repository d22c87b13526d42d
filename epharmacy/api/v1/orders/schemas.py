from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from epharmacy.api.v1.catalog.schemas import MedicationResponse
from epharmacy.domain.orders.models import OrderStatus


class OrderItemCreate(BaseModel):
    medication_id: int
    quantity: int = Field(..., gt=0)


class OrderCreate(BaseModel):
    prescription_id: Optional[int] = None
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    medication_id: int
    quantity: int
    price: int
    medication: MedicationResponse

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: int
    prescription_id: Optional[int]
    total: int
    status: OrderStatus
    created_at: datetime
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
