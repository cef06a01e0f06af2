"""
Key-Value Store Interface.
Each namespace (listings, users, session) is read and written as one blob.
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Interface for the persistent store."""

    def read(self, key: str, default: Any) -> Any:
        """Return the decoded value, or `default` when missing or malformed."""
        ...

    def write(self, key: str, value: Any) -> None:
        """Serialize and persist `value`; `None` removes the key."""
        ...
