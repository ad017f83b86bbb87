from __future__ import annotations

import logging
from typing import Any

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from daybook.core.config import AppSettings
from daybook.core.errors import StorageUnavailableError


logger = logging.getLogger(__name__)


class MediaBlobStorage:
    """Store uploaded media in S3-compatible storage and hand back its URL."""

    def __init__(self, settings: AppSettings):
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.s3_media_bucket)

    async def put(self, key: str, body: bytes, content_type: str) -> str:
        """Upload ``body`` under ``key`` and return a publicly resolvable URL."""
        bucket = self._settings.s3_media_bucket
        if not bucket:
            raise StorageUnavailableError("Media storage bucket is not configured.")

        try:
            session = aioboto3.Session()
            async with session.client("s3", **self._client_kwargs()) as client:
                await client.put_object(
                    Bucket=bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to upload media to s3://%s/%s", bucket, key, exc_info=exc)
            raise StorageUnavailableError("Media storage is unavailable.") from exc

        logger.info("Uploaded media to s3://%s/%s", bucket, key)
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        base_url = self._settings.media_public_base_url
        if base_url:
            return f"{base_url.rstrip('/')}/{key}"
        bucket = self._settings.s3_media_bucket
        region = self._settings.aws_region or "us-east-1"
        return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"

    def _client_kwargs(self) -> dict[str, Any]:
        client_kwargs: dict[str, Any] = {}
        if self._settings.aws_region:
            client_kwargs["region_name"] = self._settings.aws_region
        if self._settings.s3_endpoint_url:
            client_kwargs["endpoint_url"] = self._settings.s3_endpoint_url
        if self._settings.aws_access_key_id and self._settings.aws_secret_access_key:
            client_kwargs["aws_access_key_id"] = self._settings.aws_access_key_id.get_secret_value()
            client_kwargs["aws_secret_access_key"] = self._settings.aws_secret_access_key.get_secret_value()
        return client_kwargs
