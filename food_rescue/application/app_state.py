"""Application state — the repositories and services for one store, built explicitly."""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from food_rescue.application.services.identity_service import IdentityRegistry
from food_rescue.application.services.lifecycle_service import ListingLifecycleEngine
from food_rescue.domain.repositories.listing_repository import ListingRepository
from food_rescue.domain.repositories.store import KeyValueStore
from food_rescue.domain.repositories.user_repository import SessionRepository, UserRepository
from food_rescue.infrastructure.repositories.listing_repository import StoreListingRepository
from food_rescue.infrastructure.repositories.user_repository import (
    StoreSessionRepository,
    StoreUserRepository,
)


@dataclass
class AppState:
    store: KeyValueStore
    users: UserRepository
    session: SessionRepository
    listings: ListingRepository
    identity: IdentityRegistry
    engine: ListingLifecycleEngine

    @classmethod
    def load(cls, store: KeyValueStore, clock: Optional[Callable[[], datetime]] = None, lock=None) -> "AppState":
        """Read all three namespaces from the store and wire the services.

        Pass the same `lock` to every state built over one store so their
        commands run one at a time.
        """
        lock = lock or threading.RLock()
        users = StoreUserRepository(store)
        session = StoreSessionRepository(store)
        listings = StoreListingRepository(store)
        return cls(
            store=store,
            users=users,
            session=session,
            listings=listings,
            identity=IdentityRegistry(users, session, lock=lock),
            engine=ListingLifecycleEngine(listings, clock=clock, lock=lock),
        )
