"""
Product repository functions.

Nested variants, images and benefits are replaced wholesale on write, the way
the admin product editor submits them.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.db import models, schemas
from storefront.utils.text import slugify


def _build_children(items, model_cls):
    children = []
    for index, item in enumerate(items):
        data = item.model_dump()
        if data.get("sort_order") is None:
            data["sort_order"] = index
        children.append(model_cls(**data))
    return children


def get_products(db: Session, *, active_only: bool = False) -> List[models.Product]:
    q = db.query(models.Product)
    if active_only:
        q = q.filter(models.Product.is_active.is_(True))
    return q.order_by(models.Product.sort_order, models.Product.name).all()


def get_product(db: Session, product_id: str) -> Optional[models.Product]:
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def get_product_by_slug(db: Session, slug: str) -> Optional[models.Product]:
    return db.query(models.Product).filter(models.Product.slug == slug).first()


def create_product(db: Session, product: schemas.ProductCreate) -> models.Product:
    data = product.model_dump(exclude={"variants", "images", "benefits"})
    data["slug"] = slugify(data.get("slug") or product.name)
    if data.get("sort_order") is None:
        data["sort_order"] = 0
    db_product = models.Product(**data)
    db_product.variants = _build_children(product.variants, models.ProductVariant)
    db_product.images = _build_children(product.images, models.ProductImage)
    db_product.benefits = _build_children(product.benefits, models.ProductBenefit)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def update_product(db: Session, product_id: str, product: schemas.ProductUpdate) -> Optional[models.Product]:
    db_product = get_product(db, product_id)
    if not db_product:
        return None
    data = product.model_dump(exclude_unset=True, exclude={"variants", "images", "benefits"})
    if "slug" in data and data["slug"]:
        data["slug"] = slugify(data["slug"])
    for key, value in data.items():
        setattr(db_product, key, value)
    if product.variants is not None:
        db_product.variants = _build_children(product.variants, models.ProductVariant)
    if product.images is not None:
        db_product.images = _build_children(product.images, models.ProductImage)
    if product.benefits is not None:
        db_product.benefits = _build_children(product.benefits, models.ProductBenefit)
    db.commit()
    db.refresh(db_product)
    return db_product


def delete_product(db: Session, product_id: str) -> bool:
    try:
        db_product = get_product(db, product_id)
        if not db_product:
            return False
        db.delete(db_product)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete product {product_id}: {str(e)}")


def reorder_products(db: Session, ids: List[str]) -> None:
    for index, product_id in enumerate(ids):
        db.query(models.Product).filter(models.Product.id == product_id).update(
            {models.Product.sort_order: index}, synchronize_session=False
        )
    db.commit()
