from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from .base import APIModel


class ReviewCreate(APIModel):
    product_id: str | None = None
    collection_name: str | None = None
    rating: int = Field(default=5, ge=1, le=5)
    title: str | None = None
    author_name: str
    author_initial: str | None = None
    text: str
    keywords: list[str] = []
    is_verified: bool = True
    is_featured: bool = False
    is_active: bool = True
    sort_order: int | None = None

    @model_validator(mode="after")
    def _require_owner(self):
        if not self.product_id and not self.collection_name:
            raise ValueError("productId or collectionName is required")
        return self


class ReviewUpdate(APIModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = None
    author_name: str | None = None
    author_initial: str | None = None
    text: str | None = None
    keywords: list[str] | None = None
    is_verified: bool | None = None
    is_featured: bool | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class Review(APIModel):
    id: str
    product_id: str | None = None
    collection_name: str | None = None
    rating: int
    title: str | None = None
    author_name: str
    author_initial: str | None = None
    text: str
    keywords: list[str] = []
    is_verified: bool | None = True
    is_featured: bool | None = False
    is_active: bool | None = True
    sort_order: int | None = 0
    created_at: datetime | None = None


class ReviewKeywordCreate(APIModel):
    product_id: str | None = None
    collection_name: str | None = None
    keyword: str
    count: int = 0
    sort_order: int | None = None


class ReviewKeywordUpdate(APIModel):
    keyword: str | None = None
    count: int | None = None
    sort_order: int | None = None


class ReviewKeyword(ReviewKeywordCreate):
    id: str


class ReviewImportRequest(APIModel):
    csv_data: list[dict[str, Any]]
    product_id: str | None = None
    collection_name: str | None = None
    mode: Literal['append', 'replace'] = 'append'

    @model_validator(mode="after")
    def _require_owner(self):
        if not self.product_id and not self.collection_name:
            raise ValueError("productId or collectionName is required")
        return self
