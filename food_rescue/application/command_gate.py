"""Coordination shared by every request that changes the store."""

import functools
import threading
from contextlib import contextmanager
from typing import Iterator, Set

from food_rescue.core.exceptions import PreconditionError


class CommandGate:
    """App-scoped gate for state-changing commands.

    `lock` is held across one command's re-read, checks and write, so two
    requests never apply their changes to the same snapshot. `submission`
    tracks donors whose create request is still reading its image upload.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._pending: Set[str] = set()
        self._pending_guard = threading.Lock()

    def is_pending(self, user_id: str) -> bool:
        with self._pending_guard:
            return user_id in self._pending

    @contextmanager
    def submission(self, user_id: str) -> Iterator[None]:
        with self._pending_guard:
            if user_id in self._pending:
                raise PreconditionError("A listing submission is already in progress")
            self._pending.add(user_id)
        try:
            yield
        finally:
            with self._pending_guard:
                self._pending.discard(user_id)


def command(method):
    """Run a service method under `self.lock`, after `self.refresh()` re-reads the store."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            self.refresh()
            return method(self, *args, **kwargs)

    return wrapper
