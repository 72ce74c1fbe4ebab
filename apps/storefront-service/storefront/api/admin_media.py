"""
Admin media library endpoints.

Large files go from the browser straight to Cloudinary using a signature
issued here and are registered afterwards. Smaller files can be posted to
`/upload` and are sent on to Cloudinary by the service.
"""
import logging
from typing import Optional

from cloudinary.exceptions import Error as CloudinaryError
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_admin
from storefront.db import schemas
from storefront.db.database import get_db
from storefront.db.repositories import media as media_repo
from storefront.services import get_media_storage
from storefront.services.media_storage import MediaStorageNotConfigured, registration_values, resource_type_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-media"], dependencies=[Depends(get_current_admin)])

MAX_UPLOAD_BYTES = 100 * 1024 * 1024


@router.get("/media", response_model=schemas.MediaList)
def list_media(
    folder: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    files, total = media_repo.list_media(db, folder=folder, search=search, page=page, limit=limit)
    return {
        "files": files,
        "total": total,
        "page": page,
        "limit": limit,
        "folder_counts": media_repo.folder_counts(db),
    }


@router.post("/upload/signature")
def upload_signature(request: schemas.UploadSignatureRequest):
    try:
        return get_media_storage().upload_signature(request.folder)
    except MediaStorageNotConfigured as exc:
        logger.error("upload_signature_failed: error=%s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Media storage is not configured")


@router.post("/upload", status_code=status.HTTP_201_CREATED)
def upload_media(
    file: UploadFile = File(...),
    folder: str = Form("general"),
    alt_text: Optional[str] = Form(None, alias="altText"),
    db: Session = Depends(get_db),
):
    storage = get_media_storage()
    if not storage.config.is_configured:
        logger.error("media_upload_failed: error=storage not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Media storage is not configured")
    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)}MB.",
        )
    try:
        result = storage.upload(file.file, folder, resource_type_for(file.content_type))
    except CloudinaryError as exc:
        logger.error("media_upload_failed: filename=%s error=%s", file.filename, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Upload to cloud storage failed: {exc}")

    values = registration_values({
        **result,
        "original_filename": file.filename,
        "folder": folder,
        "alt_text": alt_text,
    })
    if file.content_type:
        values["mime_type"] = file.content_type
    created = media_repo.create_media(db, values)
    logger.info("media_uploaded: id=%s mime_type=%s", created.id, created.mime_type)
    return {"success": True, "file": schemas.MediaFile.model_validate(created).model_dump(by_alias=True, mode="json")}


@router.post("/upload/register", response_model=schemas.MediaFile, status_code=status.HTTP_201_CREATED)
def register_upload(payload: schemas.MediaRegister, db: Session = Depends(get_db)):
    if not payload.secure_url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="secureUrl is required")
    created = media_repo.create_media(db, registration_values(payload.model_dump()))
    logger.info("media_registered: id=%s mime_type=%s", created.id, created.mime_type)
    return created


@router.put("/media/{media_id}", response_model=schemas.MediaFile)
def update_media(media_id: str, update: schemas.MediaUpdate, db: Session = Depends(get_db)):
    updated = media_repo.update_media(db, media_id, update)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Media file not found")
    return updated


@router.delete("/media/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_media(media_id: str, db: Session = Depends(get_db)):
    media = media_repo.get_media(db, media_id)
    if media is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Media file not found")
    get_media_storage().destroy_quietly(media.cloudinary_public_id, media.mime_type)
    media_repo.delete_media(db, media_id)
