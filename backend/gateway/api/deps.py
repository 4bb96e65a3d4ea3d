"""FastAPI dependencies: hand out the adapters owned by the app lifespan."""

from fastapi import Request

from gateway.adapters.document import UserAdapter
from gateway.adapters.object_storage import ObjectStorageAdapter
from gateway.adapters.relational import ProductAdapter


def _state_attr(request: Request, name: str):
    adapter = getattr(request.app.state, name, None)
    if adapter is None:
        raise RuntimeError(f"{name} adapter not initialized")
    return adapter


def get_product_adapter(request: Request) -> ProductAdapter:
    return _state_attr(request, "products")


def get_user_adapter(request: Request) -> UserAdapter:
    return _state_attr(request, "users")


def get_object_storage_adapter(request: Request) -> ObjectStorageAdapter:
    return _state_attr(request, "objects")
