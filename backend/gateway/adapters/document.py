"""Document Adapter: User CRUD over the shared MongoDB collection.

Invariants:
    - Identifiers that are not valid ObjectIds are treated as not found
    - update replaces name and email and returns the post-update document
    - delete matching zero documents raises ResourceNotFoundError
"""

import logging

from bson import ObjectId
from pymongo import ReturnDocument

from gateway.core.errors import ResourceNotFoundError
from gateway.infrastructure.document_store import (
    DocumentStoreClient, translate_errors,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Usuário não encontrado"


def _object_id_or_404(user_id: str) -> ObjectId:
    if not ObjectId.is_valid(user_id):
        raise ResourceNotFoundError("User", user_id, NOT_FOUND_MESSAGE)
    return ObjectId(user_id)


class UserAdapter:
    """CRUD operations for the usuarios collection."""

    def __init__(
        self, store: DocumentStoreClient, collection_name: str = "usuarios",
    ):
        self._store = store
        self._collection_name = collection_name

    def _collection(self):
        return self._store.collection(self._collection_name)

    async def health_check(self) -> bool:
        """Round-trip on a dedicated connection. True if any user exists."""
        return await self._store.probe(self._collection_name) is not None

    async def create(self, data: dict) -> dict:
        doc = dict(data)
        async with translate_errors("Erro ao criar usuário"):
            result = await self._collection().insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"User {result.inserted_id} created")
        return doc

    async def list_all(self) -> list[dict]:
        async with translate_errors("Erro ao buscar usuários"):
            return await self._collection().find().to_list(None)

    async def get(self, user_id: str) -> dict:
        oid = _object_id_or_404(user_id)
        async with translate_errors("Erro ao buscar usuário"):
            doc = await self._collection().find_one({"_id": oid})
        if doc is None:
            raise ResourceNotFoundError("User", user_id, NOT_FOUND_MESSAGE)
        return doc

    async def update(self, user_id: str, data: dict) -> dict:
        oid = _object_id_or_404(user_id)
        async with translate_errors("Erro ao atualizar usuário"):
            doc = await self._collection().find_one_and_update(
                {"_id": oid},
                {"$set": data},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise ResourceNotFoundError("User", user_id, NOT_FOUND_MESSAGE)
        return doc

    async def delete(self, user_id: str) -> None:
        oid = _object_id_or_404(user_id)
        async with translate_errors("Erro ao remover usuário"):
            result = await self._collection().delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise ResourceNotFoundError("User", user_id, NOT_FOUND_MESSAGE)
        logger.info(f"User {user_id} deleted")
