"""Storegate API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Backend clients are built once in the lifespan from app.state.settings and
      handed to the adapters; routes reach adapters only through api/deps.py
    - Every request passes through the diagnostics middleware
    - Upload bodies are size-limited while streaming (api/upload_limit.py)
    - The API description is generated when the app is constructed

Design Decisions:
    - create_app(settings) factory: tests build apps with their own Settings and
      populate app.state directly (ASGITransport does not run the lifespan)
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gateway.adapters.document import UserAdapter
from gateway.adapters.object_storage import ObjectStorageAdapter
from gateway.adapters.relational import ProductAdapter
from gateway.api.docs import (
    API_DESCRIPTION, API_TITLE, API_VERSION, DOCS_URL, OPENAPI_TAGS,
    OPENAPI_URL, publish_api_description,
)
from gateway.api.error_handlers import register_error_handlers
from gateway.api.middleware import log_requests
from gateway.api.upload_limit import UploadSizeLimit
from gateway.api.routes import buckets, health, products, users
from gateway.config import Settings, get_settings
from gateway.infrastructure.database import DatabaseSessionManager
from gateway.infrastructure.document_store import DocumentStoreClient
from gateway.infrastructure.object_storage import ObjectStorageClient
from gateway.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: owns every backend client."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)

    db = DatabaseSessionManager(
        settings.relational_url(),
        server_url=settings.relational_server_url(),
        database_name=settings.db_name,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
    )
    documents = DocumentStoreClient(
        settings.mongo_uri,
        default_database=settings.mongo_default_database,
        server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
    )
    storage = ObjectStorageClient(
        settings.region,
        access_key_id=settings.access_key_id,
        secret_access_key=settings.secret_access_key,
        session_token=settings.session_token,
        endpoint_url=settings.s3_endpoint_url,
        max_pool_connections=settings.s3_max_pool_connections,
    )
    await storage.start()

    app.state.db = db
    app.state.documents = documents
    app.state.storage = storage
    app.state.products = ProductAdapter(db)
    app.state.users = UserAdapter(
        documents, collection_name=settings.mongo_users_collection,
    )
    app.state.objects = ObjectStorageAdapter(
        storage, acl=settings.upload_acl, max_bytes=settings.upload_max_bytes,
    )
    logger.info(f"Storegate API started, docs at {DOCS_URL}")
    try:
        yield
    finally:
        logger.info("Storegate API shutting down")
        await storage.close()
        await documents.close()
        await db.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        description=API_DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        docs_url=DOCS_URL,
        openapi_url=OPENAPI_URL,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        UploadSizeLimit,
        max_bytes=settings.upload_max_bytes,
        overhead=settings.upload_multipart_overhead,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    # Added last, so it wraps CORS and sees every response
    app.middleware("http")(log_requests)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(buckets.router)

    publish_api_description(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on settings.port."""
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
