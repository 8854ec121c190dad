"""LayoutService: one document per type, FAQ/category edits, banner image replacement."""

import pytest

from lms.application.dtos.layout import BannerContent
from lms.application.dtos.media import ImageUpload
from lms.application.use_cases import LayoutService
from lms.application.use_cases.layouts import merge_items
from lms.domain.enums import LayoutType
from lms.domain.exceptions import (
    DuplicateCategoryException,
    LayoutAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)


@pytest.fixture
def service(layout_repo, uow, storage) -> LayoutService:
    return LayoutService(layout_repo, uow, storage)


def _image() -> ImageUpload:
    return ImageUpload(content=b"img", filename="banner.png", content_type="image/png")


def test_merge_items_updates_appends_and_deletes() -> None:
    current = [{"id": "1", "title": "Web"}, {"id": "2", "title": "Data"}]
    merged, removed = merge_items(
        current,
        [{"id": "1", "title": "Web Dev", "extra": "x"}, {"title": "AI"}],
        ["2"],
        ("title",),
    )
    assert removed == 1
    assert merged[0] == {"id": "1", "title": "Web Dev"}
    assert merged[1]["title"] == "AI"
    assert merged[1]["id"]
    assert len(merged) == 2


async def test_create_faq_once(service) -> None:
    layout = await service.create(LayoutType.FAQ, faq=[{"question": "Q?", "answer": "A."}])
    assert layout.faq[0]["id"]
    assert layout.faq[0]["question"] == "Q?"
    with pytest.raises(LayoutAlreadyExistsException):
        await service.create(LayoutType.FAQ, faq=[])


async def test_create_categories_rejects_case_insensitive_duplicates(service) -> None:
    with pytest.raises(DuplicateCategoryException) as exc_info:
        await service.create(
            LayoutType.CATEGORIES, categories=[{"title": "Web"}, {"title": "web"}]
        )
    assert exc_info.value.details == {"titles": ["web"]}


async def test_update_categories(service) -> None:
    layout = await service.create(
        LayoutType.CATEGORIES, categories=[{"title": "Web"}, {"title": "Data"}]
    )
    web_id, data_id = (c["id"] for c in layout.categories)
    with pytest.raises(DuplicateCategoryException):
        await service.update_categories(layout.id, [{"title": "DATA"}])
    renamed = await service.update_categories(layout.id, [{"id": web_id, "title": "Web"}])
    assert [c["title"] for c in renamed.categories] == ["Web", "Data"]
    trimmed = await service.update_categories(layout.id, [], deleted=[data_id])
    assert [c["id"] for c in trimmed.categories] == [web_id]


async def test_update_faq_unknown_delete_is_404(service) -> None:
    layout = await service.create(LayoutType.FAQ, faq=[{"question": "Q", "answer": "A"}])
    with pytest.raises(ResourceNotFoundException):
        await service.update_faq(layout.id, [], deleted=["nope"])


async def test_update_with_wrong_type_is_404(service) -> None:
    layout = await service.create(LayoutType.FAQ, faq=[])
    with pytest.raises(ResourceNotFoundException):
        await service.update_categories(layout.id, [{"title": "x"}])


async def test_banner_requires_text(service) -> None:
    with pytest.raises(ValidationException):
        await service.create(LayoutType.BANNER)


async def test_banner_image_replaced(service, storage) -> None:
    layout = await service.create(
        LayoutType.BANNER,
        banner=BannerContent(title="Learn", subtitle="Anything"),
        image=_image(),
    )
    old_id = layout.banner["image"]["public_id"]
    updated = await service.update_banner(layout.id, subtitle="Everything", image=_image())
    assert storage.destroyed == [old_id]
    assert updated.banner["title"] == "Learn"
    assert updated.banner["subtitle"] == "Everything"
    assert updated.banner["image"]["public_id"] != old_id


async def test_get_by_type(service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.get_by_type(LayoutType.BANNER)
    await service.create(LayoutType.FAQ, faq=[])
    assert (await service.get_by_type(LayoutType.FAQ)).type is LayoutType.FAQ
