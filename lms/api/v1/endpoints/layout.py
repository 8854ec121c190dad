"""Layout API: home banner, FAQ and categories (admin edits, public reads)."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form, Request
from fastapi.exceptions import RequestValidationError
from pydantic import TypeAdapter, ValidationError

from lms.api.v1.dependencies import AdminUser, OptionalImage, get_layout_service
from lms.application.dtos.layout import BannerContent
from lms.application.use_cases import LayoutService
from lms.core.limiter import limit_upload, limit_writes
from lms.domain.enums import LayoutType
from lms.domain.exceptions import ValidationException
from lms.schemas.common import ApiResponse, envelope
from lms.schemas.layout import (
    CategoriesUpdateRequest,
    CategoryItem,
    FaqItem,
    FaqUpdateRequest,
)

router = APIRouter()

Layouts = Annotated[LayoutService, Depends(get_layout_service)]
Document = ApiResponse[dict[str, Any]]

_faq_list = TypeAdapter(list[FaqItem])
_category_list = TypeAdapter(list[CategoryItem])


def _items(adapter: TypeAdapter, raw: str | None) -> list[dict[str, Any]]:
    """Validate a JSON-encoded form field holding a list of items."""
    if not raw:
        return []
    try:
        items = adapter.validate_json(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return [item.model_dump(exclude_none=True) for item in items]


@router.post("/create", response_model=Document, status_code=201)
@limit_upload
async def create_layout(
    request: Request,
    admin: AdminUser,
    layouts: Layouts,
    image: OptionalImage,
    type: LayoutType = Form(...),
    faq: str | None = Form(default=None, description="JSON list of {question, answer}"),
    categories: str | None = Form(default=None, description="JSON list of {title}"),
    title: str | None = Form(default=None),
    subtitle: str | None = Form(default=None),
):
    """Create the layout document of a type (one per type)."""
    banner = None
    if type is LayoutType.BANNER:
        if not title or not subtitle:
            raise ValidationException("Banner title and subtitle are required", "title")
        banner = BannerContent(title=title, subtitle=subtitle)
    layout = await layouts.create(
        type,
        faq=_items(_faq_list, faq),
        categories=_items(_category_list, categories),
        banner=banner,
        image=image,
    )
    return envelope("Layout created successfully", layout)


@router.put("/update-faq/{layout_id}", response_model=Document)
@limit_writes
async def update_faq(
    request: Request,
    layout_id: str,
    body: FaqUpdateRequest,
    admin: AdminUser,
    layouts: Layouts,
):
    layout = await layouts.update_faq(
        layout_id,
        [item.model_dump(exclude_none=True) for item in body.faq],
        body.deleted,
    )
    return envelope("FAQ updated successfully", layout)


@router.put("/update-categories/{layout_id}", response_model=Document)
@limit_writes
async def update_categories(
    request: Request,
    layout_id: str,
    body: CategoriesUpdateRequest,
    admin: AdminUser,
    layouts: Layouts,
):
    layout = await layouts.update_categories(
        layout_id,
        [item.model_dump(exclude_none=True) for item in body.categories],
        body.deleted,
    )
    return envelope("Categories updated successfully", layout)


@router.put("/update-banner/{layout_id}", response_model=Document)
@limit_upload
async def update_banner(
    request: Request,
    layout_id: str,
    admin: AdminUser,
    layouts: Layouts,
    image: OptionalImage,
    title: str | None = Form(default=None),
    subtitle: str | None = Form(default=None),
):
    layout = await layouts.update_banner(
        layout_id, title=title, subtitle=subtitle, image=image
    )
    return envelope("Banner updated successfully", layout)


@router.get("/get-layout/{layout_type}", response_model=Document)
async def get_layout(layout_type: LayoutType, layouts: Layouts):
    return envelope("Layout retrieved successfully", await layouts.get_by_type(layout_type))
