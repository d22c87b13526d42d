from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.core.exceptions import AuthorizationError, BusinessLogicError, NotFoundError
from epharmacy.domain.auth.models import User
from epharmacy.domain.catalog.repository import MedicationRepository
from epharmacy.domain.orders.models import Order, OrderStatus
from epharmacy.domain.orders.repository import OrderRepository
from epharmacy.domain.prescriptions.repository import PrescriptionRepository

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def order_total(items: List[dict]) -> int:
    return sum(it["price"] * it["quantity"] for it in items)


class OrderService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = OrderRepository(db)
        self.medication_repo = MedicationRepository(db)
        self.prescription_repo = PrescriptionRepository(db)

    async def create_order(
        self, user: User, items: List[dict], prescription_id: Optional[int] = None
    ) -> Order:
        """Price each line from the catalog and write the order with its items"""
        if not items:
            raise BusinessLogicError("An order needs at least one item")
        for it in items:
            if it.get("quantity", 0) <= 0:
                raise BusinessLogicError("Quantity must be greater than zero")

        if prescription_id is not None:
            prescription = await self.prescription_repo.get(prescription_id)
            if not prescription:
                raise NotFoundError("Prescription not found")
            if prescription.user_id != user.id and not user.is_admin:
                raise AuthorizationError("Forbidden: You cannot order against this prescription")

        medications = await self.medication_repo.get_many([it["medication_id"] for it in items])
        missing = sorted({it["medication_id"] for it in items} - medications.keys())
        if missing:
            raise NotFoundError("Medication not found", details={"medication_ids": missing})

        priced = [
            {
                "medication_id": it["medication_id"],
                "quantity": it["quantity"],
                "price": medications[it["medication_id"]].price,
            }
            for it in items
        ]

        order = await self.repo.create_with_items(
            {
                "user_id": user.id,
                "prescription_id": prescription_id,
                "total": order_total(priced),
                "status": OrderStatus.PENDING,
            },
            priced,
        )
        logger.info(f"Order {order.id} placed by user {user.id}: {len(priced)} item(s), total {order.total}")
        return order

    async def create_from_prescription(self, user: User, prescription_id: int) -> Order:
        prescription = await self.prescription_repo.get(prescription_id)
        if not prescription:
            raise NotFoundError("Prescription not found")
        if not prescription.medications:
            raise BusinessLogicError("Prescription has no medications to order")

        items = [
            {"medication_id": pm.medication_id, "quantity": pm.quantity}
            for pm in prescription.medications
        ]
        return await self.create_order(user, items, prescription_id=prescription_id)

    async def list_for_user(self, user_id: int) -> List[Order]:
        return await self.repo.list_for_user(user_id)

    async def get_for_user(self, order_id: int, user: User) -> Order:
        order = await self.repo.get(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.user_id != user.id and not user.is_admin:
            raise AuthorizationError("Forbidden: You cannot access this order")
        return order

    async def update_status(self, order_id: int, user: User, status: OrderStatus) -> Order:
        """Owners may cancel; admins may move an order along any allowed transition"""
        order = await self.get_for_user(order_id, user)

        if not user.is_admin and status != OrderStatus.CANCELLED:
            raise AuthorizationError("Only administrators can advance an order")
        if status not in ALLOWED_TRANSITIONS[order.status]:
            raise BusinessLogicError(
                f"Cannot change order status from {order.status.value} to {status.value}"
            )

        logger.info(f"Order {order.id}: {order.status.value} -> {status.value} by user {user.id}")
        return await self.repo.set_status(order, status)
