"""Layout API schemas (FAQ and category edit batches)."""

from pydantic import BaseModel, Field


class FaqItem(BaseModel):
    """FAQ entry; id present = update that entry, absent = append."""

    id: str | None = None
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class CategoryItem(BaseModel):
    """Category entry; id present = rename that entry, absent = append."""

    id: str | None = None
    title: str = Field(..., min_length=1)


class FaqUpdateRequest(BaseModel):
    faq: list[FaqItem] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list, description="FAQ ids to remove")


class CategoriesUpdateRequest(BaseModel):
    categories: list[CategoryItem] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list, description="Category ids to remove")
