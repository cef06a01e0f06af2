"""
Base Repository Interface.
Defines the contract shared by the in-memory collections backed by the store.
"""

from typing import TypeVar, List, Optional, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for a persisted collection of records keyed by string id."""

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single record by ID."""
        ...

    def list(self) -> List[T]:
        """List all records, in no particular order."""
        ...

    def update(self, obj: T) -> T:
        """Replace the stored record that has the same ID, then persist."""
        ...

    def reload(self) -> None:
        """Re-read the collection from the store, dropping the in-memory copy."""
        ...
