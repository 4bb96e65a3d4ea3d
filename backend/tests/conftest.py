"""Root conftest: shared fixtures and in-memory stand-ins for the three backends.

Invariants:
    - Every test gets a fresh SQLite database file (tmp_path) behind the real
      DatabaseSessionManager / ProductAdapter
    - MongoDB is replaced at the client_factory seam of DocumentStoreClient
    - S3 is replaced at the aiobotocore client seam of ObjectStorageClient
    - app fixture wires all three adapters into app.state (lifespan is not run)
"""

import os
from collections import defaultdict
from datetime import datetime, timezone
from types import SimpleNamespace

# Never talk to real backends from tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MONGO_URI", "mongodb://fake:27017/test")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
import pytest_asyncio
from bson import ObjectId
from botocore.exceptions import ClientError
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

from gateway.adapters.document import UserAdapter
from gateway.adapters.object_storage import ObjectStorageAdapter
from gateway.adapters.relational import ProductAdapter
from gateway.config import Settings
from gateway.db.base import Base
from gateway.infrastructure.database import DatabaseSessionManager
from gateway.infrastructure.document_store import DocumentStoreClient
from gateway.infrastructure.object_storage import ObjectStorageClient
from gateway.main import create_app

FIXED_CLOCK = 1_700_000_000.5


# -- MongoDB stand-in ----------------------------------------------------------


def _matches(doc: dict, query: dict | None) -> bool:
    return all(doc.get(k) == v for k, v in (query or {}).items())


class FakeCursor:
    def __init__(self, docs: list[dict]):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Just enough of AsyncCollection for UserAdapter."""

    def __init__(self):
        self.docs: list[dict] = []
        self.fail_with: Exception | None = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def insert_one(self, doc):
        self._check()
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query=None):
        self._check()
        return FakeCursor([dict(d) for d in self.docs if _matches(d, query)])

    async def find_one(self, query=None):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                return dict(d)
        return None

    async def find_one_and_update(
        self, query, update, return_document=ReturnDocument.BEFORE,
    ):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                before = dict(d)
                d.update(update.get("$set", {}))
                return dict(d) if return_document == ReturnDocument.AFTER else before
        return None

    async def delete_one(self, query):
        self._check()
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeMongoClient:
    def __init__(self, collections, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.database_name = None
        self._collections = collections
        self.ping_error: Exception | None = None
        self.admin = SimpleNamespace(command=self._command)

    async def _command(self, name):
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}

    def get_default_database(self, default=None):
        self.database_name = default
        return self._collections

    async def close(self):
        self.closed = True


# -- S3 stand-in ---------------------------------------------------------------


class FakeS3Client:
    """In-memory buckets with the response shapes of the S3 API."""

    CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __init__(self, buckets=("my-bucket",)):
        self.buckets: dict[str, dict[str, dict]] = {name: {} for name in buckets}

    def _bucket(self, name: str, operation: str) -> dict:
        if name not in self.buckets:
            raise ClientError(
                {
                    "Error": {
                        "Code": "NoSuchBucket",
                        "Message": "The specified bucket does not exist",
                    },
                    "ResponseMetadata": {"HTTPStatusCode": 404},
                },
                operation,
            )
        return self.buckets[name]

    async def list_buckets(self):
        return {
            "Buckets": [
                {"Name": name, "CreationDate": self.CREATED}
                for name in self.buckets
            ],
        }

    async def list_objects_v2(self, Bucket):
        objects = self._bucket(Bucket, "ListObjectsV2")
        if not objects:
            return {"KeyCount": 0}
        return {
            "Contents": [
                {
                    "Key": key,
                    "LastModified": obj["LastModified"],
                    "ETag": '"d41d8cd98f00b204e9800998ecf8427e"',
                    "Size": len(obj["Body"]),
                    "StorageClass": "STANDARD",
                }
                for key, obj in objects.items()
            ],
        }

    async def put_object(self, Bucket, Key, Body, ACL, ContentType=None):
        objects = self._bucket(Bucket, "PutObject")
        objects[Key] = {
            "Body": Body.read() if hasattr(Body, "read") else Body,
            "ACL": ACL,
            "ContentType": ContentType,
            "LastModified": self.CREATED,
        }
        return {"ETag": '"d41d8cd98f00b204e9800998ecf8427e"'}

    async def delete_object(self, Bucket, Key):
        self._bucket(Bucket, "DeleteObject").pop(Key, None)
        return {}


# -- Fixtures ------------------------------------------------------------------


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        mongo_uri="mongodb://fake:27017/test",
        region="us-east-1",
        log_format="text",
    )


@pytest_asyncio.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'products.db'}",
    )
    await manager.create_tables(Base.metadata)
    yield manager
    await manager.dispose()


@pytest.fixture
def product_adapter(db_manager):
    return ProductAdapter(db_manager)


@pytest.fixture
def mongo_collections():
    return defaultdict(FakeCollection)


@pytest.fixture
def mongo_clients():
    """Every FakeMongoClient the DocumentStoreClient created, in order."""
    return []


@pytest.fixture
def document_store(mongo_collections, mongo_clients):
    def factory(uri, **kwargs):
        client = FakeMongoClient(mongo_collections, uri, **kwargs)
        mongo_clients.append(client)
        return client

    return DocumentStoreClient(
        "mongodb://fake:27017/test", client_factory=factory,
    )


@pytest.fixture
def user_adapter(document_store):
    return UserAdapter(document_store)


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def storage_client(fake_s3):
    storage = ObjectStorageClient("us-east-1")
    storage._client = fake_s3
    return storage


@pytest.fixture
def object_adapter(storage_client):
    return ObjectStorageAdapter(storage_client, clock=lambda: FIXED_CLOCK)


@pytest.fixture
def app(
    settings, db_manager, document_store, storage_client,
    product_adapter, user_adapter, object_adapter,
):
    application = create_app(settings)
    application.state.db = db_manager
    application.state.documents = document_store
    application.state.storage = storage_client
    application.state.products = product_adapter
    application.state.users = user_adapter
    application.state.objects = object_adapter
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
