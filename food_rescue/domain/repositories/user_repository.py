"""
User and Session Repository Interfaces.
"""

from typing import Optional, Protocol

from food_rescue.domain.repositories.base import BaseRepository
from food_rescue.domain.schemas.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def find_by_identity(self, name: str, contact: str, credential: str) -> Optional[User]:
        """Find the user whose (name, contact, credential) match exactly."""
        ...

    def add(self, user: User) -> User:
        """Append a new user, then persist."""
        ...


class SessionRepository(Protocol):
    """Interface for the single active session."""

    def get(self) -> Optional[User]:
        """Return the session user, if any."""
        ...

    def set(self, user: Optional[User]) -> None:
        """Replace (or clear, with None) the session user, then persist."""
        ...

    def reload(self) -> None:
        """Re-read the session from the store."""
        ...
