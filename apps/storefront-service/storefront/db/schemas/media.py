from datetime import datetime

from .base import APIModel


class MediaFile(APIModel):
    id: str
    filename: str
    url: str
    thumbnail_url: str | None = None
    mime_type: str | None = None
    file_size: int | None = None
    width: int | None = None
    height: int | None = None
    alt_text: str | None = None
    folder: str | None = None
    tags: list[str] = []
    cloudinary_public_id: str | None = None
    created_at: datetime | None = None


class MediaList(APIModel):
    files: list[MediaFile]
    total: int
    page: int
    limit: int
    folder_counts: dict[str, int] = {}


class MediaRegister(APIModel):
    """Payload posted after a direct browser upload to Cloudinary."""
    public_id: str | None = None
    secure_url: str | None = None
    resource_type: str | None = 'image'
    format: str | None = None
    bytes: int | None = None
    width: int | None = None
    height: int | None = None
    original_filename: str | None = None
    folder: str | None = 'general'
    alt_text: str | None = None


class MediaUpdate(APIModel):
    filename: str | None = None
    alt_text: str | None = None
    folder: str | None = None
    tags: list[str] | None = None


class UploadSignatureRequest(APIModel):
    folder: str | None = 'general'
