import hashlib

import pytest
from cloudinary.exceptions import Error as CloudinaryError

from storefront.services import media_storage
from storefront.services.media_storage import (
    CloudinaryConfig,
    CloudinaryStorage,
    MediaStorageNotConfigured,
    guess_mime_type,
    registration_values,
    resource_type_for,
    sign_params,
)

CONFIG = CloudinaryConfig(cloud_name="archies", api_key="key123", api_secret="shh", root_folder="archies-remedies")


def test_sign_params_sorts_and_skips_empty_values():
    expected = hashlib.sha1(b"folder=a/b&timestamp=100shh").hexdigest()
    assert sign_params({"timestamp": 100, "folder": "a/b", "eager": ""}, "shh") == expected


def test_sign_params_joins_list_values_with_commas():
    expected = hashlib.sha1(b"tags=x,y&timestamp=100shh").hexdigest()
    assert sign_params({"tags": ["x", "y"], "timestamp": 100}, "shh") == expected


def test_upload_signature_scopes_folder_under_root():
    signed = CloudinaryStorage(CONFIG).upload_signature("products/", timestamp=100)
    assert signed["folder"] == "archies-remedies/products"
    assert signed["apiKey"] == "key123"
    assert signed["cloudName"] == "archies"
    assert signed["signature"] == sign_params({"folder": "archies-remedies/products", "timestamp": 100}, "shh")


def test_unconfigured_storage_refuses_to_sign_or_upload():
    storage = CloudinaryStorage(CloudinaryConfig())
    with pytest.raises(MediaStorageNotConfigured):
        storage.upload_signature()
    with pytest.raises(MediaStorageNotConfigured):
        storage.upload(b"bytes")


def test_upload_goes_through_the_sdk(monkeypatch):
    captured = {}

    def fake_upload(file, **options):
        captured["file"] = file
        captured.update(options)
        return {"public_id": "archies-remedies/products/hero", "bytes": 10}

    monkeypatch.setattr(media_storage.cloudinary.uploader, "upload", fake_upload)
    result = CloudinaryStorage(CONFIG).upload(b"image-bytes", "products", "image")
    assert result["public_id"] == "archies-remedies/products/hero"
    assert captured["file"] == b"image-bytes"
    assert captured["folder"] == "archies-remedies/products"
    assert captured["resource_type"] == "image"
    assert {"quality": "auto"} in captured["transformation"]


def test_destroy_uses_the_sdk(monkeypatch):
    captured = {}

    def fake_destroy(public_id, **options):
        captured["public_id"] = public_id
        captured.update(options)
        return {"result": "ok"}

    monkeypatch.setattr(media_storage.cloudinary.uploader, "destroy", fake_destroy)
    assert CloudinaryStorage(CONFIG).destroy("archies-remedies/clip", "video") is True
    assert captured["public_id"] == "archies-remedies/clip"
    assert captured["resource_type"] == "video"


def test_destroy_quietly_logs_sdk_errors(monkeypatch):
    def failing_destroy(public_id, **options):
        raise CloudinaryError("Server returned unexpected status code - 500")

    monkeypatch.setattr(media_storage.cloudinary.uploader, "destroy", failing_destroy)
    storage = CloudinaryStorage(CONFIG)
    assert storage.destroy_quietly("x", "image/png") is False
    assert storage.destroy_quietly(None) is False
    assert CloudinaryStorage(CloudinaryConfig()).destroy_quietly("x") is False


@pytest.mark.parametrize(
    "mime_type,expected",
    [("image/png", "image"), ("video/mp4", "video"), ("application/pdf", "auto"), (None, "auto")],
)
def test_resource_type_for(mime_type, expected):
    assert resource_type_for(mime_type) == expected


@pytest.mark.parametrize(
    "resource_type,fmt,expected",
    [
        ("image", "jpg", "image/jpeg"),
        ("image", "webp", "image/webp"),
        ("video", "mp4", "video/mp4"),
        ("raw", "pdf", "application/pdf"),
        ("raw", "zip", "application/octet-stream"),
        ("image", None, None),
    ],
)
def test_guess_mime_type(resource_type, fmt, expected):
    assert guess_mime_type(resource_type, fmt) == expected


def test_registration_values_for_video_upload():
    values = registration_values({
        "secure_url": "https://res.cloudinary.com/archies/video/upload/v1/clip.mp4",
        "public_id": "archies-remedies/videos/clip",
        "resource_type": "video",
        "format": "mp4",
        "bytes": 2048,
        "folder": "videos",
    })
    assert values["filename"] == "clip.mp4"
    assert values["thumbnail_url"].endswith("/clip.jpg")
    assert values["mime_type"] == "video/mp4"
    assert values["file_size"] == 2048
    assert values["cloudinary_public_id"] == "archies-remedies/videos/clip"


def test_get_media_storage_reads_env(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "archies")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "k")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "s")
    media_storage.reset_media_storage_for_tests()
    try:
        assert media_storage.get_media_storage().config.is_configured
    finally:
        media_storage.reset_media_storage_for_tests()
