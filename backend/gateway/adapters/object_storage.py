"""Object-Storage Adapter: bucket listing, upload and delete over S3.

Invariants:
    - Object keys are "<epoch millis>-<original filename>"
    - Uploads carry the configured canned ACL ("private" unless overridden)
    - Files above max_bytes are rejected before anything is sent to S3
    - Bucket existence is never pre-checked; S3's own error is surfaced
"""

import logging
import os
import time
from typing import BinaryIO, Callable

from gateway.core.errors import PayloadTooLargeError
from gateway.infrastructure.object_storage import (
    ObjectStorageClient, translate_errors,
)

logger = logging.getLogger(__name__)


def _stream_size(stream: BinaryIO) -> int:
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


class ObjectStorageAdapter:
    """Bucket and object operations."""

    def __init__(
        self,
        storage: ObjectStorageClient,
        acl: str = "private",
        max_bytes: int = 50 * 1024 * 1024,
        clock: Callable[[], float] = time.time,
    ):
        self._storage = storage
        self._acl = acl
        self._max_bytes = max_bytes
        self._clock = clock

    async def list_buckets(self) -> list[dict]:
        async with translate_errors("Erro ao listar buckets"):
            response = await self._storage.client.list_buckets()
        return response.get("Buckets", [])

    async def list_objects(self, bucket: str) -> list[dict]:
        async with translate_errors("Erro ao listar objetos do bucket"):
            response = await self._storage.client.list_objects_v2(Bucket=bucket)
        return response.get("Contents", [])

    def object_key(self, filename: str) -> str:
        return f"{int(self._clock() * 1000)}-{filename}"

    async def upload(
        self,
        bucket: str,
        filename: str,
        stream: BinaryIO,
        content_type: str | None = None,
        size: int | None = None,
    ) -> dict:
        """Store the stream under a timestamped key. Returns bucket, key and URL."""
        if size is None:
            size = _stream_size(stream)
        if size > self._max_bytes:
            raise PayloadTooLargeError(size, self._max_bytes)

        key = self.object_key(filename)
        params = {
            "Bucket": bucket,
            "Key": key,
            "Body": stream,
            "ACL": self._acl,
        }
        if content_type:
            params["ContentType"] = content_type
        async with translate_errors("Erro no upload"):
            await self._storage.client.put_object(**params)
        logger.info(f"Stored {key} in {bucket} ({size} bytes)")
        return {
            "bucket": bucket,
            "key": key,
            "fileUrl": self._storage.object_url(bucket, key),
        }

    async def delete(self, bucket: str, key: str) -> None:
        async with translate_errors("Erro ao remover o arquivo"):
            await self._storage.client.delete_object(Bucket=bucket, Key=key)
        logger.info(f"Removed {key} from {bucket}")
