"""Base repository implementation over a motor collection."""

from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """Provide shared persistence helpers for repositories."""

    def __init__(self, collection: AsyncIOMotorCollection, model_type: type[ModelType]) -> None:
        self._collection = collection
        self._model_type = model_type

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """Return the collection associated with the repository."""
        return self._collection

    def _to_model(self, document: Mapping[str, Any] | None) -> ModelType | None:
        if document is None:
            return None
        return self._model_type.model_validate(document)

    async def get(self, entity_id: ObjectId) -> ModelType | None:
        """Retrieve a document by its ``_id``."""
        return await self.find_one({"_id": entity_id})

    async def find_one(self, filter_: Mapping[str, Any]) -> ModelType | None:
        return self._to_model(await self._collection.find_one(filter_))

    async def find_many(self, filter_: Mapping[str, Any]) -> list[ModelType]:
        cursor = self._collection.find(filter_, sort=[("_id", 1)])
        return [self._model_type.model_validate(document) async for document in cursor]

    async def add(self, instance: ModelType) -> ModelType:
        """Insert a new document and return the instance carrying its generated id."""
        document = instance.to_document()  # type: ignore[attr-defined]
        result = await self._collection.insert_one(document)
        instance.id = result.inserted_id  # type: ignore[attr-defined]
        return instance
