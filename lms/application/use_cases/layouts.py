"""Site layout use cases: home banner, FAQ and course categories.

Layout documents are small and read rarely, so they are not cached.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lms.application.dtos.layout import BannerContent, LayoutResult
from lms.core.constants import FOLDER_BANNER
from lms.domain.enums import LayoutType
from lms.domain.exceptions import (
    DuplicateCategoryException,
    ResourceNotFoundException,
    ValidationException,
)
from lms.shared.telemetry.logging import get_logger
from lms.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from lms.application.dtos.media import ImageUpload
    from lms.application.interfaces.repositories import ILayoutRepository
    from lms.application.interfaces.services import IImageStorage, IUnitOfWork

logger = get_logger(__name__)


def merge_items(
    current: list[dict[str, Any]],
    items: list[dict[str, Any]],
    deleted: list[str],
    fields: tuple[str, ...],
) -> tuple[list[dict[str, Any]], int]:
    """Apply an edit batch to a list of id'd items.

    Items carrying an id update the matching entry's fields, items without
    one are appended with a new id, and ids in deleted are removed.

    Returns:
        (merged list, number of entries removed)
    """
    updates = {item["id"]: item for item in items if item.get("id")}
    merged = []
    for entry in current:
        change = updates.get(entry.get("id"))
        if change is not None:
            entry = {**entry, **{f: change[f] for f in fields if f in change}}
        merged.append(entry)
    for item in items:
        if not item.get("id"):
            merged.append({"id": generate_cuid(), **{f: item.get(f) for f in fields}})
    drop = set(deleted)
    kept = [entry for entry in merged if entry.get("id") not in drop]
    return kept, len(merged) - len(kept)


class LayoutService:
    def __init__(
        self,
        layout_repo: ILayoutRepository,
        uow: IUnitOfWork,
        storage: IImageStorage,
    ) -> None:
        self.layout_repo = layout_repo
        self.uow = uow
        self.storage = storage

    async def _require(self, layout_id: str, layout_type: LayoutType) -> LayoutResult:
        layout = await self.layout_repo.get_by_id(layout_id)
        if layout is None or layout.type is not layout_type:
            raise ResourceNotFoundException(layout_type.value, layout_id)
        return layout

    async def create(
        self,
        layout_type: LayoutType,
        *,
        faq: list[dict[str, Any]] | None = None,
        categories: list[dict[str, Any]] | None = None,
        banner: BannerContent | None = None,
        image: ImageUpload | None = None,
    ) -> LayoutResult:
        """Create the single document of layout_type (409 if it exists)."""
        fields: dict[str, Any] = {}
        if layout_type is LayoutType.FAQ:
            fields["faq"], _ = merge_items([], faq or [], [], ("question", "answer"))
        elif layout_type is LayoutType.CATEGORIES:
            titles = [c.get("title", "") for c in categories or []]
            _check_unique_titles([], titles)
            fields["categories"], _ = merge_items([], categories or [], [], ("title",))
        else:
            if banner is None:
                raise ValidationException("Banner title and subtitle are required", "banner")
            stored = (
                await self.storage.upload(image, FOLDER_BANNER) if image is not None else None
            )
            fields["banner"] = {
                "image": stored.as_dict() if stored else None,
                "title": banner.title,
                "subtitle": banner.subtitle,
            }
        async with self.uow:
            layout = await self.layout_repo.create(layout_type, **fields)
        logger.info("Created %s layout %s", layout_type.value, layout.id)
        return layout

    async def update_faq(
        self, layout_id: str, items: list[dict[str, Any]], deleted: list[str] | None = None
    ) -> LayoutResult:
        layout = await self._require(layout_id, LayoutType.FAQ)
        faq, removed = merge_items(layout.faq, items, deleted or [], ("question", "answer"))
        if deleted and removed == 0:
            raise ResourceNotFoundException("faq", ", ".join(deleted))
        async with self.uow:
            updated = await self.layout_repo.update_fields(layout_id, {"faq": faq})
        return updated or layout

    async def update_categories(
        self, layout_id: str, items: list[dict[str, Any]], deleted: list[str] | None = None
    ) -> LayoutResult:
        """Edit categories; titles must stay unique ignoring case."""
        layout = await self._require(layout_id, LayoutType.CATEGORIES)
        edited_ids = {item.get("id") for item in items if item.get("id")}
        _check_unique_titles(
            [c.get("title", "") for c in layout.categories if c.get("id") not in edited_ids],
            [item.get("title", "") for item in items],
        )
        categories, removed = merge_items(
            layout.categories, items, deleted or [], ("title",)
        )
        if deleted and removed == 0:
            raise ResourceNotFoundException("category", ", ".join(deleted))
        async with self.uow:
            updated = await self.layout_repo.update_fields(
                layout_id, {"categories": categories}
            )
        return updated or layout

    async def update_banner(
        self,
        layout_id: str,
        *,
        title: str | None = None,
        subtitle: str | None = None,
        image: ImageUpload | None = None,
    ) -> LayoutResult:
        layout = await self._require(layout_id, LayoutType.BANNER)
        banner = dict(layout.banner or {})
        if image is not None:
            previous = (banner.get("image") or {}).get("public_id")
            if previous:
                await self.storage.destroy(previous)
            banner["image"] = (await self.storage.upload(image, FOLDER_BANNER)).as_dict()
        if title:
            banner["title"] = title
        if subtitle:
            banner["subtitle"] = subtitle
        async with self.uow:
            updated = await self.layout_repo.update_fields(layout_id, {"banner": banner})
        return updated or layout

    async def get_by_type(self, layout_type: LayoutType) -> LayoutResult:
        layout = await self.layout_repo.get_by_type(layout_type)
        if layout is None:
            raise ResourceNotFoundException("layout", layout_type.value)
        return layout


def _check_unique_titles(existing: list[str], incoming: list[str]) -> None:
    seen = {t.lower() for t in existing}
    clashes = []
    for title in incoming:
        key = title.lower()
        if key in seen:
            clashes.append(title)
        seen.add(key)
    if clashes:
        raise DuplicateCategoryException(clashes)
