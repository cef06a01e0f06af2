"""
Key-value store implementation of the Listing Repository.
"""

from datetime import datetime

from food_rescue.config import get_settings
from food_rescue.core.ids import LISTING_PREFIX, generate_id
from food_rescue.domain.repositories.listing_repository import ListingRepository
from food_rescue.domain.repositories.store import KeyValueStore
from food_rescue.domain.schemas.listing import Listing, ListingCreate, ListingStatus
from food_rescue.infrastructure.repositories.base_repository import StoreBackedRepository

settings = get_settings()


class StoreListingRepository(StoreBackedRepository[Listing], ListingRepository):
    """Listing repository persisted under the listings namespace."""

    def __init__(self, store: KeyValueStore, key: str = settings.LISTINGS_KEY):
        super().__init__(store, key, Listing)

    def _new_id(self) -> str:
        # Ids are never reused, even if the generator collides
        listing_id = generate_id(LISTING_PREFIX)
        while self.get_by_id(listing_id) is not None:
            listing_id = generate_id(LISTING_PREFIX)
        return listing_id

    def create(self, spec: ListingCreate, donor_id: str, donor_name: str, now: datetime) -> Listing:
        listing = Listing(
            id=self._new_id(),
            donor_name=donor_name,
            donor_type=spec.donor_type,
            donor_user_id=donor_id,
            food_description=spec.food_description,
            quantity=spec.quantity,
            expiry_date=spec.expiry_date,
            pickup_window=spec.pickup_window,
            location=spec.location,
            notes=spec.notes,
            image_ref=spec.image_ref,
            created_by_user_id=donor_id,
            status=ListingStatus.AVAILABLE,
            created_at=now,
        )
        self._persist(self._items + [listing])
        return listing

    def delete(self, id: str) -> None:
        if self.get_by_id(id) is None:
            raise self._not_found(id)
        self._persist([i for i in self._items if i.id != id])
