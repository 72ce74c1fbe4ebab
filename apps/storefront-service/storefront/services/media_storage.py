"""
Cloudinary media host integration.

Browsers upload straight to Cloudinary with a signature minted here, or post
the file to the service for a server-side upload. Either way the asset is
registered in the media library and destroyed on delete.
"""
from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Mapping, Optional, Union

import cloudinary
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError

from storefront.utils.media import video_thumbnail_url

logger = logging.getLogger(__name__)

_UPLOAD_TIMEOUT = 120
# Applied to server-side uploads
_UPLOAD_TRANSFORMATION = [{"quality": "auto"}, {"fetch_format": "auto"}]

_IMAGE_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "avif": "image/avif",
}
_VIDEO_MIME_TYPES = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
    "ogv": "video/ogg",
    "m4v": "video/x-m4v",
}


class MediaStorageNotConfigured(RuntimeError):
    pass


@dataclass
class CloudinaryConfig:
    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    root_folder: str = "archies-remedies"

    @classmethod
    def from_env(cls) -> "CloudinaryConfig":
        return cls(
            cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME") or None,
            api_key=os.getenv("CLOUDINARY_API_KEY") or None,
            api_secret=os.getenv("CLOUDINARY_API_SECRET") or None,
            root_folder=(os.getenv("CLOUDINARY_ROOT_FOLDER") or "archies-remedies").strip("/"),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """Signature Cloudinary expects for the given upload parameters."""
    return cloudinary.utils.api_sign_request(dict(params), api_secret)


def guess_mime_type(resource_type: Optional[str], fmt: Optional[str]) -> Optional[str]:
    fmt = (fmt or "").lower()
    if resource_type == "video":
        return _VIDEO_MIME_TYPES.get(fmt, f"video/{fmt}" if fmt else "video/mp4")
    if resource_type == "raw":
        return "application/pdf" if fmt == "pdf" else "application/octet-stream"
    if fmt in _IMAGE_MIME_TYPES:
        return _IMAGE_MIME_TYPES[fmt]
    return f"image/{fmt}" if fmt else None


def resource_type_for(mime_type: Optional[str]) -> str:
    mime_type = mime_type or ""
    if mime_type.startswith("image/"):
        return "image"
    if mime_type.startswith("video/"):
        return "video"
    return "auto"


class CloudinaryStorage:
    def __init__(self, config: CloudinaryConfig) -> None:
        self.config = config
        if config.is_configured:
            cloudinary.config(
                cloud_name=config.cloud_name,
                api_key=config.api_key,
                api_secret=config.api_secret,
                secure=True,
            )

    def _require_config(self) -> None:
        if not self.config.is_configured:
            raise MediaStorageNotConfigured("Cloudinary is not configured")

    def folder_path(self, folder: Optional[str]) -> str:
        folder = (folder or "").strip("/")
        return f"{self.config.root_folder}/{folder}" if folder else self.config.root_folder

    def upload_signature(self, folder: Optional[str] = None, timestamp: Optional[int] = None) -> Dict[str, Any]:
        """Parameters the browser posts along with a signed direct upload."""
        self._require_config()
        params = {"folder": self.folder_path(folder), "timestamp": timestamp or int(time.time())}
        return {
            "signature": sign_params(params, self.config.api_secret),
            "timestamp": params["timestamp"],
            "folder": params["folder"],
            "apiKey": self.config.api_key,
            "cloudName": self.config.cloud_name,
        }

    def upload(
        self,
        file: Union[bytes, str, BinaryIO],
        folder: Optional[str] = None,
        resource_type: str = "auto",
    ) -> Dict[str, Any]:
        """Server-side upload; returns Cloudinary's upload response."""
        self._require_config()
        result = cloudinary.uploader.upload(
            file,
            folder=self.folder_path(folder),
            resource_type=resource_type,
            transformation=_UPLOAD_TRANSFORMATION,
            timeout=_UPLOAD_TIMEOUT,
        )
        logger.info("media_uploaded: public_id=%s bytes=%s", result.get("public_id"), result.get("bytes"))
        return result

    def destroy(self, public_id: str, resource_type: str = "image") -> bool:
        self._require_config()
        result = cloudinary.uploader.destroy(public_id, resource_type=resource_type, invalidate=True)
        return result.get("result") in ("ok", "not found")

    def destroy_quietly(self, public_id: Optional[str], mime_type: Optional[str] = None) -> bool:
        """Best-effort delete; failures are logged and reported as False."""
        if not public_id or not self.config.is_configured:
            return False
        resource_type = "video" if (mime_type or "").startswith("video/") else "image"
        try:
            return self.destroy(public_id, resource_type)
        except CloudinaryError as e:
            logger.warning("media_destroy_failed: public_id=%s error=%s", public_id, e)
            return False


def registration_values(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """MediaFile column values for an asset reported by a direct upload."""
    url = payload.get("secure_url") or ""
    resource_type = payload.get("resource_type") or "image"
    mime_type = guess_mime_type(resource_type, payload.get("format"))
    filename = payload.get("original_filename") or (payload.get("public_id") or "").rsplit("/", 1)[-1]
    if payload.get("format") and filename and "." not in filename:
        filename = f"{filename}.{payload['format']}"
    return {
        "filename": filename or "upload",
        "url": url,
        "thumbnail_url": video_thumbnail_url(url) if resource_type == "video" else url,
        "mime_type": mime_type,
        "file_size": payload.get("bytes"),
        "width": payload.get("width"),
        "height": payload.get("height"),
        "alt_text": payload.get("alt_text"),
        "folder": payload.get("folder") or "general",
        "cloudinary_public_id": payload.get("public_id"),
    }


_storage: Optional[CloudinaryStorage] = None
_storage_lock = threading.Lock()


def get_media_storage() -> CloudinaryStorage:
    global _storage
    if _storage is None:
        with _storage_lock:
            if _storage is None:
                _storage = CloudinaryStorage(CloudinaryConfig.from_env())
    return _storage


def reset_media_storage_for_tests() -> None:
    global _storage
    with _storage_lock:
        _storage = None
