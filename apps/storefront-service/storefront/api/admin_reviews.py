"""Admin review, keyword and review-import endpoints."""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import reviews as reviews_repo
from storefront.services.review_import import import_reviews
from storefront.utils.cache import invalidate_site_content

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/reviews", tags=["admin-reviews"], dependencies=[Depends(get_current_admin)])


def _dump(rows, schema):
    return [schema.model_validate(r).model_dump(by_alias=True, mode="json") for r in rows]


@router.get("")
def list_reviews(
    product_id: Optional[str] = Query(None, alias="productId"),
    collection_name: Optional[str] = Query(None, alias="collection"),
    db: Session = Depends(get_db),
):
    reviews = reviews_repo.get_reviews(db, product_id=product_id, collection_name=collection_name)
    keywords = reviews_repo.get_keywords(db, product_id=product_id, collection_name=collection_name)
    return {"reviews": _dump(reviews, schemas.Review), "keywords": _dump(keywords, schemas.ReviewKeyword)}


@router.post("", response_model=schemas.Review, status_code=status.HTTP_201_CREATED)
def create_review(review: schemas.ReviewCreate, db: Session = Depends(get_db)):
    created = reviews_repo.create_review(db, review)
    invalidate_site_content()
    return created


@router.get("/collections")
def list_collections(db: Session = Depends(get_db)):
    return {"collections": reviews_repo.get_collection_names(db)}


@router.post("/import")
def import_reviews_endpoint(body: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    try:
        request = schemas.ReviewImportRequest.model_validate(body)
    except ValidationError as exc:
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid CSV data") if errors else "Invalid CSV data"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message.removeprefix("Value error, "))
    result = import_reviews(db, request)
    invalidate_site_content()
    logger.info("reviews_import: imported=%d errors=%d mode=%s", result.imported, len(result.errors), request.mode)
    return result.to_response()


# Keywords
@router.get("/keywords", response_model=list[schemas.ReviewKeyword])
def list_keywords(
    product_id: Optional[str] = Query(None, alias="productId"),
    collection_name: Optional[str] = Query(None, alias="collection"),
    db: Session = Depends(get_db),
):
    return reviews_repo.get_keywords(db, product_id=product_id, collection_name=collection_name)


@router.post("/keywords", response_model=schemas.ReviewKeyword, status_code=status.HTTP_201_CREATED)
def create_keyword(keyword: schemas.ReviewKeywordCreate, db: Session = Depends(get_db)):
    if not keyword.product_id and not keyword.collection_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="productId or collectionName is required")
    created = reviews_repo.create_keyword(db, keyword)
    invalidate_site_content()
    return created


@router.put("/keywords/{keyword_id}", response_model=schemas.ReviewKeyword)
def update_keyword(keyword_id: str, keyword: schemas.ReviewKeywordUpdate, db: Session = Depends(get_db)):
    updated = reviews_repo.update_keyword(db, keyword_id, keyword)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Keyword not found")
    invalidate_site_content()
    return updated


@router.delete("/keywords/{keyword_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_keyword(keyword_id: str, db: Session = Depends(get_db)):
    if not reviews_repo.delete_keyword(db, keyword_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Keyword not found")
    invalidate_site_content()


@router.get("/{review_id}", response_model=schemas.Review)
def get_review(review_id: str, db: Session = Depends(get_db)):
    review = reviews_repo.get_review(db, review_id)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review


@router.put("/{review_id}", response_model=schemas.Review)
def update_review(review_id: str, review: schemas.ReviewUpdate, db: Session = Depends(get_db)):
    updated = reviews_repo.update_review(db, review_id, review)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    invalidate_site_content()
    return updated


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: str, db: Session = Depends(get_db)):
    if not reviews_repo.delete_review(db, review_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    invalidate_site_content()
