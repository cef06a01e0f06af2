"""Projection service — read-only views over the listing repository."""

from typing import List

from food_rescue.domain.repositories.listing_repository import ListingRepository
from food_rescue.domain.schemas.listing import Listing, ListingStats, ListingStatus


def donor_history(repo: ListingRepository, donor_id: str) -> List[Listing]:
    """Everything the donor has created, newest first."""
    items = [l for l in repo.list() if l.created_by_user_id == donor_id]
    return sorted(items, key=lambda l: l.created_at, reverse=True)


def donor_marketplace(repo: ListingRepository, donor_id: str) -> List[Listing]:
    """Other donors' Available listings, soonest expiry first."""
    items = [
        l for l in repo.list()
        if l.status == ListingStatus.AVAILABLE and l.created_by_user_id != donor_id
    ]
    return sorted(items, key=lambda l: l.expiry_date)


def charity_available(repo: ListingRepository, search_text: str = "") -> List[Listing]:
    """Available listings, optionally narrowed by a case-insensitive substring."""
    query = (search_text or "").strip().lower()
    items = [l for l in repo.list() if l.status == ListingStatus.AVAILABLE]
    if query:
        items = [l for l in items if query in l.search_text()]
    return sorted(items, key=lambda l: l.expiry_date)


def charity_claimed(repo: ListingRepository, charity_id: str) -> List[Listing]:
    """Listings claimed by the charity, most recent claim first."""
    items = [l for l in repo.list() if l.charity_user_id == charity_id]
    return sorted(items, key=lambda l: l.claimed_at or l.created_at, reverse=True)


def listing_stats(repo: ListingRepository) -> ListingStats:
    items = repo.list()
    available = sum(1 for l in items if l.status == ListingStatus.AVAILABLE)
    claimed = sum(1 for l in items if l.status == ListingStatus.CLAIMED)
    return ListingStats(available=available, claimed=claimed, total=len(items))
