"""Order repository. Interface methods return application DTOs."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.dtos.order import OrderResult
from lms.infrastructure.persistence.models.order import Order
from lms.infrastructure.persistence.repositories.base import BaseRepository


def _order_to_result(o: Order) -> OrderResult:
    return OrderResult(
        id=o.id,
        course_id=o.course_id,
        user_id=o.user_id,
        payment_info=dict(o.payment_info or {}),
        created_at=o.created_at,
        updated_at=o.updated_at,
    )


class OrderRepository(BaseRepository[Order]):
    """Order repository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Order)

    async def create(
        self, user_id: str, course_id: str, payment_info: dict[str, Any]
    ) -> OrderResult:
        order = Order(user_id=user_id, course_id=course_id, payment_info=payment_info)
        return _order_to_result(await self._add(order))

    async def list_all(self) -> list[OrderResult]:
        return [_order_to_result(o) for o in await self._list_newest_first()]

    async def delete_by_user(self, user_id: str) -> int:
        result = await self.db.execute(delete(Order).where(Order.user_id == user_id))
        return int(result.rowcount or 0)
