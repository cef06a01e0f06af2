"""
Key-value store implementations of the User and Session repositories.
"""

import logging
from typing import Optional

from pydantic import ValidationError as SchemaValidationError

from food_rescue.config import get_settings
from food_rescue.domain.repositories.store import KeyValueStore
from food_rescue.domain.repositories.user_repository import SessionRepository, UserRepository
from food_rescue.domain.schemas.user import User
from food_rescue.infrastructure.repositories.base_repository import StoreBackedRepository

settings = get_settings()
logger = logging.getLogger(__name__)


class StoreUserRepository(StoreBackedRepository[User], UserRepository):
    """User registry persisted under the users namespace."""

    def __init__(self, store: KeyValueStore, key: str = settings.USERS_KEY):
        super().__init__(store, key, User)

    def find_by_identity(self, name: str, contact: str, credential: str) -> Optional[User]:
        return next((u for u in self._items if u.has_identity(name, contact, credential)), None)

    def add(self, user: User) -> User:
        self._persist(self._items + [user])
        return user


class StoreSessionRepository(SessionRepository):
    """The single active session, persisted under the session namespace."""

    def __init__(self, store: KeyValueStore, key: str = settings.SESSION_KEY):
        self.store = store
        self.key = key
        self._user = self._load()

    def _load(self) -> Optional[User]:
        raw = self.store.read(self.key, None)
        if not isinstance(raw, dict) or not raw.get("id"):
            return None
        try:
            return User.model_validate(raw)
        except SchemaValidationError:
            logger.warning("Discarding malformed session under %s", self.key)
            return None

    def reload(self) -> None:
        self._user = self._load()

    def get(self) -> Optional[User]:
        return self._user

    def set(self, user: Optional[User]) -> None:
        self.store.write(self.key, user.model_dump(mode="json", by_alias=True) if user else None)
        self._user = user
