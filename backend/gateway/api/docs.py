"""Documentation Publisher: OpenAPI description built from the route decorators.

Invariants:
    - The description is generated once, when the app is constructed
    - Served as Swagger UI at /swagger and raw JSON at /swagger.json
    - Routes, schemas and `responses=` tables are its only inputs
"""

import logging

from fastapi import FastAPI

logger = logging.getLogger(__name__)

API_TITLE = "API AWS"
API_VERSION = "0.0.1"
API_DESCRIPTION = (
    "API que vai interagir com CRUD MySQL e CRUD MongoDB em ambiente de nuvem"
)
DOCS_URL = "/swagger"
OPENAPI_URL = "/swagger.json"

OPENAPI_TAGS = [
    {
        "name": "CRUD MySQL",
        "description": "Operações de CRUD para product no MySQL",
    },
    {
        "name": "CRUD MongoDb",
        "description": "Operações de CRUD para usuários no MongoDb.",
    },
    {
        "name": "Buckets",
        "description": (
            "Operações de Listar buckets, upload e remoção de arquivo "
            "para um bucket S3."
        ),
    },
    {"name": "health", "description": "Liveness and readiness probes."},
]


def publish_api_description(app: FastAPI) -> dict:
    """Build (or rebuild) the OpenAPI document and cache it on the app."""
    app.openapi_schema = None
    schema = app.openapi()
    logger.info(
        f"API description published at {DOCS_URL} "
        f"({len(schema.get('paths', {}))} paths)",
    )
    return schema
