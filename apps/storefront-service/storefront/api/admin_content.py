"""
Admin endpoints for the globally managed content lists.

Hero slides, testimonials, video testimonials, Instagram posts, FAQs,
navigation items and footer links share one CRUD + reorder shape, so their
routes are registered from a single table.
"""
import logging
from dataclasses import dataclass
from typing import Type

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import content as content_repo
from storefront.utils.cache import invalidate_site_content

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-content"], dependencies=[Depends(get_current_admin)])


@dataclass(frozen=True)
class ContentResource:
    path: str
    label: str
    model: Type[models.Base]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    read_schema: Type[BaseModel]


CONTENT_RESOURCES = (
    ContentResource("hero-slides", "Hero slide", models.HeroSlide,
                    schemas.HeroSlideCreate, schemas.HeroSlideUpdate, schemas.HeroSlide),
    ContentResource("testimonials", "Testimonial", models.Testimonial,
                    schemas.TestimonialCreate, schemas.TestimonialUpdate, schemas.Testimonial),
    ContentResource("video-testimonials", "Video testimonial", models.VideoTestimonial,
                    schemas.VideoTestimonialCreate, schemas.VideoTestimonialUpdate, schemas.VideoTestimonial),
    ContentResource("instagram", "Instagram post", models.InstagramPost,
                    schemas.InstagramPostCreate, schemas.InstagramPostUpdate, schemas.InstagramPost),
    ContentResource("faqs", "FAQ", models.Faq, schemas.FaqCreate, schemas.FaqUpdate, schemas.Faq),
    ContentResource("navigation", "Navigation item", models.NavigationItem,
                    schemas.NavigationItemCreate, schemas.NavigationItemUpdate, schemas.NavigationItem),
    ContentResource("footer-links", "Footer link", models.FooterLink,
                    schemas.FooterLinkCreate, schemas.FooterLinkUpdate, schemas.FooterLink),
)


def _register(resource: ContentResource) -> None:
    model = resource.model
    base = f"/{resource.path}"
    not_found = f"{resource.label} not found"
    name = resource.path.replace("-", "_")

    def list_endpoint(db: Session = Depends(get_db)):
        return content_repo.list_items(db, model)

    def create_endpoint(payload: resource.create_schema, db: Session = Depends(get_db)):
        item = content_repo.create_item(db, model, payload)
        invalidate_site_content()
        logger.info("content_created: table=%s id=%s", model.__tablename__, item.id)
        return item

    def reorder_endpoint(payload: schemas.ReorderRequest, db: Session = Depends(get_db)):
        content_repo.reorder_items(db, model, payload.ids)
        invalidate_site_content()
        return {"success": True}

    def get_endpoint(item_id: str, db: Session = Depends(get_db)):
        item = content_repo.get_item(db, model, item_id)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return item

    def update_endpoint(item_id: str, payload: resource.update_schema, db: Session = Depends(get_db)):
        item = content_repo.update_item(db, model, item_id, payload)
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        invalidate_site_content()
        return item

    def delete_endpoint(item_id: str, db: Session = Depends(get_db)):
        if not content_repo.delete_item(db, model, item_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        invalidate_site_content()

    read = resource.read_schema
    router.add_api_route(base, list_endpoint, methods=["GET"], response_model=list[read], name=f"list_{name}")
    router.add_api_route(
        base, create_endpoint, methods=["POST"], response_model=read,
        status_code=status.HTTP_201_CREATED, name=f"create_{name}",
    )
    router.add_api_route(f"{base}/reorder", reorder_endpoint, methods=["POST"], name=f"reorder_{name}")
    router.add_api_route(f"{base}/{{item_id}}", get_endpoint, methods=["GET"], response_model=read, name=f"get_{name}")
    router.add_api_route(
        f"{base}/{{item_id}}", update_endpoint, methods=["PUT"], response_model=read, name=f"update_{name}",
    )
    router.add_api_route(
        f"{base}/{{item_id}}", delete_endpoint, methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT, name=f"delete_{name}",
    )


for _resource in CONTENT_RESOURCES:
    _register(_resource)
