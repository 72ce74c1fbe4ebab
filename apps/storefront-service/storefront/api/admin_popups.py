"""Admin custom popup endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import popups as popups_repo
from storefront.utils.cache import invalidate_site_content

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/popups", tags=["admin-popups"], dependencies=[Depends(get_current_admin)])


def _get_or_404(db: Session, popup_id: str):
    popup = popups_repo.get_popup(db, popup_id)
    if popup is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Popup not found")
    return popup


@router.get("", response_model=list[schemas.CustomPopup])
def list_popups(db: Session = Depends(get_db)):
    return popups_repo.get_popups(db)


@router.post("", response_model=schemas.CustomPopup, status_code=status.HTTP_201_CREATED)
def create_popup(popup: schemas.CustomPopupCreate, db: Session = Depends(get_db)):
    if not (popup.name or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")
    created = popups_repo.create_popup(db, popup)
    invalidate_site_content()
    logger.info("popup_created: id=%s status=%s", created.id, created.status)
    return created


@router.get("/{popup_id}", response_model=schemas.CustomPopup)
def get_popup(popup_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, popup_id)


@router.put("/{popup_id}", response_model=schemas.CustomPopup)
def update_popup(popup_id: str, popup: schemas.CustomPopupUpdate, db: Session = Depends(get_db)):
    updated = popups_repo.update_popup(db, popup_id, popup)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Popup not found")
    invalidate_site_content()
    return updated


@router.patch("/{popup_id}", response_model=schemas.CustomPopup)
def patch_popup(popup_id: str, patch: schemas.CustomPopupPatch, db: Session = Depends(get_db)):
    _get_or_404(db, popup_id)
    if patch.status is not None:
        popups_repo.update_popup(db, popup_id, schemas.CustomPopupUpdate(status=patch.status))
        invalidate_site_content()
        logger.info("popup_status_changed: id=%s status=%s", popup_id, patch.status)
    if patch.increment_views:
        popups_repo.increment_counter(db, popup_id, "view_count")
    if patch.increment_conversions:
        popups_repo.increment_counter(db, popup_id, "conversion_count")
    popup = popups_repo.get_popup(db, popup_id)
    db.refresh(popup)
    return popup


@router.delete("/{popup_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_popup(popup_id: str, db: Session = Depends(get_db)):
    if not popups_repo.delete_popup(db, popup_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Popup not found")
    invalidate_site_content()
