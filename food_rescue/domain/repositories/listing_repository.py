"""
Listing Repository Interface.
"""

from datetime import datetime

from food_rescue.domain.repositories.base import BaseRepository
from food_rescue.domain.schemas.listing import Listing, ListingCreate


class ListingRepository(BaseRepository[Listing]):
    """Interface for Listing-specific operations."""

    def create(self, spec: ListingCreate, donor_id: str, donor_name: str, now: datetime) -> Listing:
        """Create an Available listing owned by the donor, then persist."""
        ...

    def delete(self, id: str) -> None:
        """Remove a listing by ID, then persist."""
        ...
