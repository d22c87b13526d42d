from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from epharmacy.domain.orders.models import Order, OrderItem, OrderStatus


class OrderRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _query(self):
        return select(Order).options(
            selectinload(Order.items).selectinload(OrderItem.medication)
        )

    async def create_with_items(self, order_data: dict, items: List[dict]) -> Order:
        order = Order(**order_data)
        self.db.add(order)
        await self.db.flush()

        for it in items:
            self.db.add(OrderItem(order_id=order.id, **it))

        await self.db.commit()
        return await self.get(order.id, refresh=True)

    async def get(self, order_id: int, refresh: bool = False) -> Optional[Order]:
        query = self._query().where(Order.id == order_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> List[Order]:
        result = await self.db.execute(
            self._query()
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())

    async def set_status(self, order: Order, status: OrderStatus) -> Order:
        order.status = status
        await self.db.commit()
        return await self.get(order.id, refresh=True)
