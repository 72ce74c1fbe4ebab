"""
Review CSV import.

Rows arrive already split into dicts by the admin upload form. Column names
are matched loosely ("First Name", "first_name", "firstname" ...), ratings
default to 5, and tags are tallied into the owner's keyword chips.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from storefront.db import schemas
from storefront.db.repositories import reviews as reviews_repo

logger = logging.getLogger(__name__)

FIRST_NAME_COLUMNS = ("first_name", "firstname", "first", "name")
LAST_NAME_COLUMNS = ("last_name", "lastname", "last")
RATING_COLUMNS = ("rating", "stars", "star_rating", "score")
TITLE_COLUMNS = ("title", "headline", "subject")
TEXT_COLUMNS = ("text", "review_text", "review", "body", "content", "message")
TAG_COLUMNS = ("tags", "keywords", "labels")
VERIFIED_COLUMNS = ("verified", "is_verified")

_TRUTHY = {"true", "yes", "1", "verified"}


@dataclass
class ParsedReview:
    first_name: str = ""
    last_name: str = ""
    rating: int = 5
    title: str = ""
    text: str = ""
    tags: List[str] = field(default_factory=list)
    is_verified: bool = True
    errors: List[str] = field(default_factory=list)


def _normalize_key(key: str) -> str:
    return str(key).strip().lower().replace(" ", "_")


def get_field(row: Mapping[str, Any], names: Sequence[str]) -> Any:
    """First value whose column matches one of ``names`` (case and space-insensitive)."""
    normalized = {_normalize_key(k): v for k, v in row.items()}
    for name in names:
        if name in normalized and normalized[name] is not None:
            return normalized[name]
    return None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def parse_verified(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in _TRUTHY


def parse_tags(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if str(t).strip()]
    return []


def parse_review_row(row: Mapping[str, Any]) -> ParsedReview:
    parsed = ParsedReview(
        first_name=_as_text(get_field(row, FIRST_NAME_COLUMNS)),
        last_name=_as_text(get_field(row, LAST_NAME_COLUMNS)),
        title=_as_text(get_field(row, TITLE_COLUMNS)),
        text=_as_text(get_field(row, TEXT_COLUMNS)),
        tags=parse_tags(get_field(row, TAG_COLUMNS)),
        is_verified=parse_verified(get_field(row, VERIFIED_COLUMNS)),
    )
    if not parsed.first_name and not parsed.last_name:
        parsed.errors.append("Missing name")
    if not parsed.text:
        parsed.errors.append("Missing review text")

    rating_raw = get_field(row, RATING_COLUMNS)
    if rating_raw not in (None, ""):
        try:
            rating = float(rating_raw)
        except (TypeError, ValueError):
            rating = None
        if rating is None or not 1 <= rating <= 5:
            parsed.errors.append("Invalid rating (must be 1-5)")
        else:
            # Half-star ratings round up
            parsed.rating = min(5, max(1, math.floor(rating + 0.5)))
    return parsed


@dataclass
class ReviewImportResult:
    imported: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": True, "imported": self.imported}
        if self.errors:
            body["errors"] = self.errors
        return body


def import_reviews(db: Session, request: schemas.ReviewImportRequest) -> ReviewImportResult:
    product_id: Optional[str] = request.product_id
    # A product owner takes precedence over a collection name
    collection_name: Optional[str] = None if product_id else request.collection_name
    replace = request.mode == "replace"

    if replace:
        reviews_repo.delete_reviews_for_owner(db, product_id=product_id, collection_name=collection_name)
        start_order = 0
    else:
        start_order = len(reviews_repo.get_reviews(db, product_id=product_id, collection_name=collection_name))

    result = ReviewImportResult()
    keyword_counts: Dict[str, int] = {}
    rows: List[dict] = []
    for index, raw in enumerate(request.csv_data):
        parsed = parse_review_row(raw)
        if parsed.errors:
            result.errors.append({"row": index + 1, "errors": parsed.errors})
            continue
        for tag in parsed.tags:
            keyword_counts[tag] = keyword_counts.get(tag, 0) + 1
        rows.append({
            "product_id": product_id,
            "collection_name": collection_name,
            "rating": parsed.rating,
            "title": parsed.title or None,
            "author_name": f"{parsed.first_name} {parsed.last_name}".strip(),
            "author_initial": reviews_repo.derive_author_initial(parsed.first_name, parsed.last_name),
            "text": parsed.text,
            "keywords": parsed.tags,
            "is_verified": parsed.is_verified,
            "is_featured": False,
            "is_active": True,
            "sort_order": start_order + index,
        })

    result.imported = reviews_repo.add_reviews(db, rows)
    if keyword_counts or replace:
        reviews_repo.merge_keyword_counts(
            db, keyword_counts, product_id=product_id, collection_name=collection_name, replace=replace,
        )
    logger.info(
        "reviews_import: product_id=%s collection=%s imported=%d errors=%d",
        product_id, collection_name, result.imported, len(result.errors),
    )
    return result
