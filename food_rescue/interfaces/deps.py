"""
API Dependencies.
"""

from datetime import datetime
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from food_rescue.application.app_state import AppState
from food_rescue.application.command_gate import CommandGate
from food_rescue.application.services.lifecycle_service import default_clock
from food_rescue.domain.repositories.store import KeyValueStore
from food_rescue.infrastructure.database import get_db
from food_rescue.infrastructure.store import SQLAlchemyKeyValueStore


def get_store(db: Session = Depends(get_db)) -> KeyValueStore:
    """Get the key-value store bound to this request's DB session."""
    return SQLAlchemyKeyValueStore(db)


def get_clock() -> Callable[[], datetime]:
    return default_clock


def get_command_gate(request: Request) -> CommandGate:
    """The gate shared by every request to this app."""
    return request.app.state.command_gate


def get_app_state(
    store: KeyValueStore = Depends(get_store),
    clock: Callable[[], datetime] = Depends(get_clock),
    gate: CommandGate = Depends(get_command_gate),
) -> AppState:
    """Load the application state from the store for this request."""
    return AppState.load(store, clock=clock, lock=gate.lock)
