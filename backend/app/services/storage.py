"""
Object storage for photos (S3-compatible: Cloudflare R2, AWS S3, MinIO).

Objects are addressed by key; the database stores the public URL
`{STORAGE_PUBLIC_URL}/{key}` and the key is recovered by stripping that
prefix again.

Key layout:
    {type}/{yyyy}/{mm}/{owner_id}-{uuid8}.{ext}
    e.g. avatar/2024/01/0b6c6f0e-...-a1b2c3d4.png

When no bucket is configured (local development, tests) an in-memory
client is used instead.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Literal, Optional, Protocol

import boto3
from botocore.config import Config
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger

logger = get_logger(__name__)

ObjectType = Literal["avatar", "category", "story-cover", "story-page", "audio"]

IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"})
AUDIO_CONTENT_TYPES = frozenset({"audio/mpeg", "audio/mp3", "audio/wav", "audio/ogg"})


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        ...

    def delete_object(self, key: str) -> None:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        self.objects[key] = (body, content_type)

    def delete_object(self, key: str) -> None:
        # S3 semantics: deleting a missing key is not an error
        self.objects.pop(key, None)


@dataclass
class S3StorageClient:
    """S3-compatible storage client backed by boto3."""

    bucket: str
    region: str
    endpoint: Optional[str]
    access_key_id: Optional[str]
    secret_access_key: Optional[str]

    def __post_init__(self):
        config = Config(signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    def delete_object(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)


@lru_cache
def get_storage_client() -> StorageClient:
    """FastAPI dependency returning the process-wide storage client."""
    if settings.storage_configured:
        return S3StorageClient(
            bucket=settings.STORAGE_BUCKET,
            region=settings.STORAGE_REGION,
            endpoint=settings.STORAGE_ENDPOINT_URL,
            access_key_id=settings.STORAGE_ACCESS_KEY_ID,
            secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        )
    logger.warning("storage_bucket_not_configured", fallback="in_memory")
    return InMemoryStorageClient()


# ================================
# Keys and URLs
# ================================

def generate_object_key(
    object_type: ObjectType,
    owner_id: str,
    filename: str,
    now: Optional[datetime] = None,
) -> str:
    """Build `{type}/{yyyy}/{mm}/{owner}-{uuid8}.{ext}` for a new object."""
    now = now or datetime.now(timezone.utc)
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    suffix = uuid.uuid4().hex[:8]
    return f"{object_type}/{now.year}/{now.month:02d}/{owner_id}-{suffix}.{ext}"


def public_url_for(key: str) -> str:
    return f"{settings.STORAGE_PUBLIC_URL}/{key}"


def key_from_public_url(url: Optional[str]) -> Optional[str]:
    """
    Recover the object key from a stored public URL.

    Returns None when the URL does not point into our bucket (for example
    a photo URL supplied by an external source).
    """
    if not url:
        return None
    prefix = f"{settings.STORAGE_PUBLIC_URL}/"
    if not url.startswith(prefix):
        return None
    key = url[len(prefix):]
    return key or None


# ================================
# Upload Validation
# ================================

def validate_upload(
    content_type: Optional[str],
    size: int,
    kind: Literal["image", "audio"] = "image",
) -> None:
    """
    Check an upload's content type and size.

    Raises:
        ValidationError: unsupported type, empty file, or too large
    """
    # "audio" limits apply to story narration files; no API route accepts
    # those yet, profile photos are always "image".
    if kind == "image":
        allowed, max_mb = IMAGE_CONTENT_TYPES, settings.MAX_IMAGE_SIZE_MB
    else:
        allowed, max_mb = AUDIO_CONTENT_TYPES, settings.MAX_AUDIO_SIZE_MB

    if content_type not in allowed:
        raise ValidationError(
            f"Invalid file type. Allowed: {', '.join(sorted(allowed))}"
        )
    if size == 0:
        raise ValidationError("Uploaded file is empty")
    if size > max_mb * 1024 * 1024:
        raise ValidationError(f"File too large. Maximum size: {max_mb}MB")


async def upload_image(
    storage: StorageClient,
    upload: UploadFile,
    object_type: ObjectType,
    owner_id: str,
) -> str:
    """
    Validate and store an uploaded image.

    Returns:
        The public URL to persist on the owning row
    """
    body = await upload.read()
    validate_upload(upload.content_type, len(body), kind="image")

    key = generate_object_key(object_type, owner_id, upload.filename or "upload.jpg")
    # boto3 is blocking
    await run_in_threadpool(storage.put_object, key, body, upload.content_type)

    logger.info("stored_asset_uploaded", key=key, size=len(body), content_type=upload.content_type)
    return public_url_for(key)
