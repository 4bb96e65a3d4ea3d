"""Document Store Client: owns the shared AsyncMongoClient and maps PyMongo errors.

Invariants:
    - One shared client per process, created lazily on first use, closed on shutdown
    - probe() never touches the shared client: it opens, reads, and closes its own
    - All PyMongo exceptions mapped to UpstreamError (core/errors.py)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from gateway.core.errors import UpstreamError

logger = logging.getLogger(__name__)

BACKEND = "mongodb"


@asynccontextmanager
async def translate_errors(message: str) -> AsyncGenerator[None, None]:
    """Map PyMongo failures raised inside the block to UpstreamError."""
    try:
        yield
    except PyMongoError as e:
        raise UpstreamError(message, BACKEND, details=str(e))


class DocumentStoreClient:
    """Lazily-connected MongoDB handle shared by every document-store request."""

    def __init__(
        self,
        uri: str,
        default_database: str = "test",
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., Any] = AsyncMongoClient,
    ):
        self._uri = uri
        self._default_database = default_database
        self._timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client = None

    def _new_client(self):
        return self._client_factory(
            self._uri, serverSelectionTimeoutMS=self._timeout_ms,
        )

    def _database(self, client):
        return client.get_default_database(default=self._default_database)

    def _shared_client(self):
        if self._client is None:
            self._client = self._new_client()
        return self._client

    def collection(self, name: str):
        """Collection on the shared client (connects on first use)."""
        return self._database(self._shared_client())[name]

    async def health_check(self) -> bool:
        """Ping the server through the shared client (for readiness probes)."""
        try:
            async with translate_errors("Erro na conexão com o MongoDB"):
                await self._shared_client().admin.command("ping")
            return True
        except UpstreamError as e:
            logger.error(f"MongoDB health check failed: {e.details}")
            return False

    async def probe(self, collection_name: str) -> dict | None:
        """Open a dedicated connection, read one arbitrary document, close it."""
        async with translate_errors("Erro na conexão com o MongoDB"):
            client = self._new_client()
            try:
                return await self._database(client)[collection_name].find_one()
            finally:
                await client.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("MongoDB client closed")
