"""
S3-compatible object storage for processed images.

Wraps a boto3 S3 client; the functions receive an ObjectStorage instance
so tests can pass a fake instead of talking to a bucket.
"""

from typing import Any, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from folio.core.config import settings

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    pass


def _get_s3_client() -> Any:
    return boto3.client(
        "s3",
        endpoint_url=settings.STORAGE_ENDPOINT or None,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY or None,
        aws_secret_access_key=settings.STORAGE_SECRET_KEY or None,
        region_name=settings.STORAGE_REGION,
    )


class ObjectStorage:
    def __init__(self, bucket: str, public_base_url: str, client: Optional[Any] = None):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = _get_s3_client()
        return self._client

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Upload of {key} failed: {e}") from e
        logger.info("Object uploaded", bucket=self.bucket, key=key, size=len(data))

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"


def get_storage() -> ObjectStorage:
    base = settings.STORAGE_PUBLIC_URL or settings.STORAGE_ENDPOINT
    return ObjectStorage(settings.STORAGE_BUCKET, base)
