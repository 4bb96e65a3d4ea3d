"""ObjectStorageAdapter: listing, timestamped private uploads, size limit, delete."""

import io
import logging

import pytest

from gateway.adapters.object_storage import ObjectStorageAdapter
from gateway.core.errors import PayloadTooLargeError, UpstreamError


@pytest.mark.asyncio
async def test_list_buckets(object_adapter):
    buckets = await object_adapter.list_buckets()
    assert [b["Name"] for b in buckets] == ["my-bucket"]


@pytest.mark.asyncio
async def test_list_objects_of_empty_bucket_is_empty_list(object_adapter):
    assert await object_adapter.list_objects("my-bucket") == []


@pytest.mark.asyncio
async def test_list_objects_unknown_bucket_maps_to_upstream(object_adapter):
    with pytest.raises(UpstreamError) as exc_info:
        await object_adapter.list_objects("nope")
    assert exc_info.value.details["Code"] == "NoSuchBucket"


def test_object_key_is_millis_prefixed(object_adapter):
    assert object_adapter.object_key("notas.pdf") == "1700000000500-notas.pdf"


@pytest.mark.asyncio
async def test_upload_stores_private_object(object_adapter, fake_s3):
    stored = await object_adapter.upload(
        "my-bucket", "notas.pdf", io.BytesIO(b"%PDF"), content_type="application/pdf",
    )

    assert stored["key"] == "1700000000500-notas.pdf"
    assert stored["fileUrl"] == (
        "https://my-bucket.s3.us-east-1.amazonaws.com/1700000000500-notas.pdf"
    )
    obj = fake_s3.buckets["my-bucket"]["1700000000500-notas.pdf"]
    assert obj["Body"] == b"%PDF"
    assert obj["ACL"] == "private"
    assert obj["ContentType"] == "application/pdf"


@pytest.mark.asyncio
async def test_upload_respects_configured_acl(storage_client, fake_s3):
    adapter = ObjectStorageAdapter(storage_client, acl="public-read", clock=lambda: 1.0)
    await adapter.upload("my-bucket", "a.txt", io.BytesIO(b"x"))
    assert fake_s3.buckets["my-bucket"]["1000-a.txt"]["ACL"] == "public-read"


@pytest.mark.asyncio
async def test_upload_over_limit_is_rejected_before_s3(storage_client, fake_s3):
    adapter = ObjectStorageAdapter(storage_client, max_bytes=4)
    with pytest.raises(PayloadTooLargeError):
        await adapter.upload("my-bucket", "big.bin", io.BytesIO(b"0123456789"))
    assert fake_s3.buckets["my-bucket"] == {}


@pytest.mark.asyncio
async def test_upload_measures_stream_without_consuming_it(storage_client, fake_s3):
    adapter = ObjectStorageAdapter(storage_client, max_bytes=100, clock=lambda: 2.0)
    await adapter.upload("my-bucket", "a.txt", io.BytesIO(b"hello"))
    assert fake_s3.buckets["my-bucket"]["2000-a.txt"]["Body"] == b"hello"


@pytest.mark.asyncio
async def test_upload_to_unknown_bucket_maps_to_upstream(object_adapter):
    with pytest.raises(UpstreamError) as exc_info:
        await object_adapter.upload("nope", "a.txt", io.BytesIO(b"x"))
    assert exc_info.value.message == "Erro no upload"


@pytest.mark.asyncio
async def test_delete_removes_object(object_adapter, fake_s3):
    fake_s3.buckets["my-bucket"]["k.txt"] = {"Body": b"x"}
    await object_adapter.delete("my-bucket", "k.txt")
    assert "k.txt" not in fake_s3.buckets["my-bucket"]


@pytest.mark.asyncio
async def test_upload_and_delete_are_logged(object_adapter, caplog):
    caplog.set_level(logging.INFO, logger="gateway.adapters.object_storage")

    stored = await object_adapter.upload("my-bucket", "a.txt", io.BytesIO(b"abc"))
    await object_adapter.delete("my-bucket", stored["key"])

    messages = [r.getMessage() for r in caplog.records]
    assert f"Stored {stored['key']} in my-bucket (3 bytes)" in messages
    assert f"Removed {stored['key']} from my-bucket" in messages
