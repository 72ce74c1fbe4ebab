"""Business logic services package with public service helpers."""

from .media_storage import (
    CloudinaryConfig,
    CloudinaryStorage,
    get_media_storage,
    reset_media_storage_for_tests,
)

__all__ = [
    "CloudinaryConfig",
    "CloudinaryStorage",
    "get_media_storage",
    "reset_media_storage_for_tests",
]
