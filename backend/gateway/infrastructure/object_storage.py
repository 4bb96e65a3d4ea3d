"""Object Storage Client: aiobotocore S3 client owner with error mapping.

Invariants:
    - Credentials come from Settings (static keys + optional session token)
    - One client per process, opened by start() and released by close()
    - ClientError / BotoCoreError mapped to UpstreamError with the S3 error payload as details
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import quote

from aiobotocore.session import get_session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from gateway.core.errors import UpstreamError

logger = logging.getLogger(__name__)

BACKEND = "s3"


@asynccontextmanager
async def translate_errors(message: str) -> AsyncGenerator[None, None]:
    """Map botocore failures raised inside the block to UpstreamError."""
    try:
        yield
    except ClientError as e:
        raise UpstreamError(
            message, BACKEND, details=(e.response or {}).get("Error", str(e)),
        )
    except BotoCoreError as e:
        raise UpstreamError(message, BACKEND, details=str(e))


class ObjectStorageClient:
    """Holds a single aiobotocore S3 client for the process lifetime."""

    def __init__(
        self,
        region: str,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        session_token: str | None = None,
        endpoint_url: str | None = None,
        max_pool_connections: int = 10,
    ):
        self.region = region
        self.endpoint_url = endpoint_url
        self._credentials = {
            "aws_access_key_id": access_key_id,
            "aws_secret_access_key": secret_access_key,
            "aws_session_token": session_token,
        }
        self._cfg = Config(
            region_name=region,
            max_pool_connections=max_pool_connections,
        )
        self._session = get_session()
        self._client_cm = None
        self._client = None

    async def start(self) -> None:
        self._client_cm = self._session.create_client(
            "s3",
            region_name=self.region,
            endpoint_url=self.endpoint_url,
            config=self._cfg,
            **self._credentials,
        )
        self._client = await self._client_cm.__aenter__()
        logger.info(f"S3 client started for region {self.region}")

    async def close(self) -> None:
        if self._client_cm:
            await self._client_cm.__aexit__(None, None, None)
        self._client_cm = None
        self._client = None

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError("ObjectStorageClient used before start()")
        return self._client

    def object_url(self, bucket: str, key: str) -> str:
        """Public location of an object (same shape S3 returns for uploads)."""
        quoted_key = quote(key)
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{bucket}/{quoted_key}"
        return f"https://{bucket}.s3.{self.region}.amazonaws.com/{quoted_key}"

    async def health_check(self) -> bool:
        """List buckets as a credentials and connectivity check (for readiness probes)."""
        if self._client is None:
            return False
        try:
            async with translate_errors("Erro ao listar buckets"):
                await self._client.list_buckets()
            return True
        except UpstreamError as e:
            logger.error(f"S3 health check failed: {e.details}")
            return False
