"""Admin product endpoints (nested variants, images and benefits replace on write)."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import catalog as catalog_repo
from storefront.utils.cache import invalidate_site_content
from storefront.utils.text import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/products", tags=["admin-products"], dependencies=[Depends(get_current_admin)])


def _ensure_slug_free(db: Session, slug: str, product_id: str | None = None) -> None:
    existing = catalog_repo.get_product_by_slug(db, slug)
    if existing is not None and existing.id != product_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A product with this slug already exists")


@router.get("", response_model=list[schemas.Product])
def list_products(db: Session = Depends(get_db)):
    return catalog_repo.get_products(db)


@router.post("", response_model=schemas.Product, status_code=status.HTTP_201_CREATED)
def create_product(product: schemas.ProductCreate, db: Session = Depends(get_db)):
    slug = slugify(product.slug or product.name)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")
    _ensure_slug_free(db, slug)
    created = catalog_repo.create_product(db, product)
    invalidate_site_content()
    logger.info("product_created: id=%s slug=%s", created.id, created.slug)
    return created


@router.post("/reorder")
def reorder_products(payload: schemas.ReorderRequest, db: Session = Depends(get_db)):
    catalog_repo.reorder_products(db, payload.ids)
    invalidate_site_content()
    return {"success": True}


@router.get("/{product_id}", response_model=schemas.Product)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = catalog_repo.get_product(db, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.put("/{product_id}", response_model=schemas.Product)
def update_product(product_id: str, product: schemas.ProductUpdate, db: Session = Depends(get_db)):
    if product.slug:
        _ensure_slug_free(db, slugify(product.slug), product_id)
    updated = catalog_repo.update_product(db, product_id, product)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    invalidate_site_content()
    return updated


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    if not catalog_repo.delete_product(db, product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    invalidate_site_content()
