"""Health probes: liveness always up, readiness requires every backend."""

import pytest
from botocore.exceptions import EndpointConnectionError
from pymongo.errors import ServerSelectionTimeoutError


@pytest.mark.asyncio
async def test_liveness(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_readiness_with_every_backend_reachable(client):
    res = await client.get("/health/ready")
    assert res.status_code == 200
    assert res.json() == {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "document_store": "healthy",
            "object_storage": "healthy",
        },
    }


@pytest.mark.asyncio
async def test_readiness_without_database_is_503(client, app):
    app.state.db = None
    res = await client.get("/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"


@pytest.mark.asyncio
async def test_readiness_with_unreachable_mongodb_is_503(
    client, document_store, mongo_clients,
):
    assert await document_store.health_check() is True
    mongo_clients[0].ping_error = ServerSelectionTimeoutError("no servers")

    res = await client.get("/health/ready")

    assert res.status_code == 503
    body = res.json()
    assert body["reason"] == "document_store_unavailable"
    assert body["checks"]["database"] == "healthy"
    assert body["checks"]["document_store"] == "unhealthy"


@pytest.mark.asyncio
async def test_readiness_with_unreachable_s3_is_503(client, fake_s3, monkeypatch):
    async def unreachable():
        raise EndpointConnectionError(endpoint_url="https://s3.us-east-1.amazonaws.com")

    monkeypatch.setattr(fake_s3, "list_buckets", unreachable)

    res = await client.get("/health/ready")

    assert res.status_code == 503
    assert res.json()["reason"] == "object_storage_unavailable"
    assert res.json()["checks"]["object_storage"] == "unhealthy"
