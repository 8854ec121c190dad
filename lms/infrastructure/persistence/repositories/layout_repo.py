"""Layout repository. Interface methods return application DTOs."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.dtos.layout import LayoutResult
from lms.domain.enums import LayoutType
from lms.domain.exceptions import LayoutAlreadyExistsException
from lms.infrastructure.persistence.models.layout import Layout
from lms.infrastructure.persistence.repositories.base import BaseRepository

_UPDATABLE = frozenset({"faq", "categories", "banner"})


def _layout_to_result(layout: Layout) -> LayoutResult:
    return LayoutResult(
        id=layout.id,
        type=LayoutType(layout.type),
        faq=list(layout.faq or []),
        categories=list(layout.categories or []),
        banner=dict(layout.banner) if layout.banner else None,
        created_at=layout.created_at,
        updated_at=layout.updated_at,
    )


class LayoutRepository(BaseRepository[Layout]):
    """Layout repository: one document per LayoutType."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Layout)

    async def get_by_type(self, layout_type: LayoutType) -> LayoutResult | None:
        result = await self.db.execute(
            select(Layout).where(Layout.type == layout_type.value)
        )
        layout = result.scalar_one_or_none()
        return _layout_to_result(layout) if layout else None

    async def get_by_id(self, layout_id: str) -> LayoutResult | None:
        layout = await self._get(layout_id)
        return _layout_to_result(layout) if layout else None

    async def create(
        self,
        layout_type: LayoutType,
        *,
        faq: list[dict[str, Any]] | None = None,
        categories: list[dict[str, Any]] | None = None,
        banner: dict[str, Any] | None = None,
    ) -> LayoutResult:
        """Create layout; raise LayoutAlreadyExistsException on unique type violation."""
        layout = Layout(
            type=layout_type.value,
            faq=faq or [],
            categories=categories or [],
            banner=banner,
        )
        try:
            return _layout_to_result(await self._add(layout))
        except IntegrityError as e:
            raise LayoutAlreadyExistsException(layout_type.value) from e

    async def update_fields(
        self, layout_id: str, fields: dict[str, Any]
    ) -> LayoutResult | None:
        layout = await self._get(layout_id)
        if layout is None:
            return None
        return _layout_to_result(await self._assign(layout, fields, _UPDATABLE))
