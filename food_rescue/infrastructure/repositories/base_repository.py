"""
Key-value store implementation of the Base Repository.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as SchemaValidationError

from food_rescue.core.exceptions import NotFoundError
from food_rescue.domain.repositories.base import BaseRepository
from food_rescue.domain.repositories.store import KeyValueStore

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class StoreBackedRepository(BaseRepository[ModelType], Generic[ModelType]):
    """In-memory collection loaded from one store namespace.

    Every mutation writes the full collection first and only then swaps it
    in, so a failed write leaves the repository untouched.
    """

    def __init__(self, store: KeyValueStore, key: str, model: Type[ModelType]):
        self.store = store
        self.key = key
        self.model = model
        self._items: List[ModelType] = self._load()

    def _load(self) -> List[ModelType]:
        raw = self.store.read(self.key, [])
        if not isinstance(raw, list):
            logger.warning("Expected a list under %s, got %s", self.key, type(raw).__name__)
            return []

        items = []
        for entry in raw:
            try:
                items.append(self.model.model_validate(entry))
            except SchemaValidationError:
                logger.warning("Skipping malformed %s record under %s", self.model.__name__, self.key)
        return items

    def reload(self) -> None:
        self._items = self._load()

    def _persist(self, items: List[ModelType]) -> None:
        self.store.write(self.key, [i.model_dump(mode="json", by_alias=True) for i in items])
        self._items = items

    def _not_found(self, id: str) -> NotFoundError:
        return NotFoundError(f"{self.model.__name__} not found", details={"id": id})

    def get_by_id(self, id: str) -> Optional[ModelType]:
        return next((i for i in self._items if i.id == id), None)

    def list(self) -> List[ModelType]:
        return list(self._items)

    def update(self, obj: ModelType) -> ModelType:
        if self.get_by_id(obj.id) is None:
            raise self._not_found(obj.id)
        self._persist([obj if i.id == obj.id else i for i in self._items])
        return obj
