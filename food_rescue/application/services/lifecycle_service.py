"""Listing lifecycle engine — the Available -> Claimed state machine.

Rules enforced here:
- only donors create listings; only charities claim them
- a listing may be deleted by its creator while Available and within the
  deletion window measured from `created_at`
- claims are first-come; a Claimed listing never returns to Available
- acknowledgments are per-side latches, set only by that side's participant
- any logged-in user may post a chat message

Every command runs under the shared lock against a fresh read of the store,
validates, and then performs a single repository mutation, so a failure
leaves both memory and the store unchanged.
"""

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytz
import structlog

from food_rescue.application.command_gate import command
from food_rescue.config import get_settings
from food_rescue.core.exceptions import (
    AppError,
    AuthorizationError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from food_rescue.core.ids import MESSAGE_PREFIX, generate_id
from food_rescue.domain.repositories.listing_repository import ListingRepository
from food_rescue.domain.schemas.listing import ChatMessage, Listing, ListingCreate, ListingStatus
from food_rescue.domain.schemas.user import Role, User

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

REQUIRED_FIELDS = ("donor_type", "food_description", "quantity", "expiry_date", "pickup_window", "location")
TEXT_FIELDS = REQUIRED_FIELDS + ("notes",)


def default_clock() -> datetime:
    return datetime.now(tz)


class ListingLifecycleEngine:
    def __init__(
        self,
        listings: ListingRepository,
        clock: Optional[Callable[[], datetime]] = None,
        delete_window: timedelta = timedelta(minutes=settings.DELETE_WINDOW_MINUTES),
        lock=None,
    ):
        self.listings = listings
        self.clock = clock or default_clock
        self.delete_window = delete_window
        self.lock = lock or threading.RLock()

    def refresh(self) -> None:
        self.listings.reload()

    def _get(self, listing_id: str) -> Listing:
        listing = self.listings.get_by_id(listing_id)
        if listing is None:
            raise NotFoundError("Listing not found", details={"id": listing_id})
        return listing

    @staticmethod
    def _require_role(actor: Optional[User], role: Role, message: str) -> User:
        if actor is None or actor.role != role:
            raise AuthorizationError(message, details={"required_role": role.value})
        return actor

    @command
    def create_listing(self, donor: Optional[User], spec: ListingCreate) -> Listing:
        donor = self._require_role(donor, Role.DONOR, "Login as a donor to create listings.")

        cleaned = spec.model_copy(update={f: (getattr(spec, f) or "").strip() for f in TEXT_FIELDS})
        missing = [f for f in REQUIRED_FIELDS if not getattr(cleaned, f)]
        if missing:
            raise ValidationError("Please fill in all required fields.", details={"missing": missing})

        listing = self.listings.create(cleaned, donor.id, donor.name, self.clock())
        logger.info("Listing created", listing_id=listing.id, donor_id=donor.id)
        return listing

    def _deletion_problem(self, actor: Optional[User], listing: Listing) -> Optional[AppError]:
        if actor is None or actor.role != Role.DONOR or listing.created_by_user_id != actor.id:
            return AuthorizationError("Only the donor who created this listing can delete it.")
        if listing.status != ListingStatus.AVAILABLE:
            return PreconditionError("Claimed listings can no longer be deleted.", details={"status": listing.status.value})
        if self.clock() - listing.created_at > self.delete_window:
            return PreconditionError(
                "The deletion window has expired.",
                details={"window_minutes": self.delete_window.total_seconds() / 60},
            )
        return None

    def can_delete(self, actor: Optional[User], listing: Listing) -> bool:
        """Whether `delete_listing` would currently succeed for this actor."""
        return self._deletion_problem(actor, listing) is None

    @command
    def delete_listing(self, actor: Optional[User], listing_id: str) -> None:
        listing = self._get(listing_id)
        problem = self._deletion_problem(actor, listing)
        if problem is not None:
            raise problem

        self.listings.delete(listing_id)
        logger.info("Listing deleted", listing_id=listing_id, donor_id=actor.id)

    @command
    def claim_listing(self, actor: Optional[User], listing_id: str) -> Listing:
        charity = self._require_role(actor, Role.CHARITY, "Login as a charity to claim listings.")
        listing = self._get(listing_id)
        if listing.status != ListingStatus.AVAILABLE:
            raise PreconditionError("This listing has already been claimed.", details={"id": listing_id})

        claimed = listing.model_copy(
            update={
                "status": ListingStatus.CLAIMED,
                "charity_user_id": charity.id,
                "charity_name": charity.name,
                "claimed_at": self.clock(),
            }
        )
        self.listings.update(claimed)
        logger.info("Listing claimed", listing_id=listing_id, charity_id=charity.id)
        return claimed

    @command
    def acknowledge_claim(self, actor: Optional[User], listing_id: str, side: Role) -> Listing:
        """Latch the donor or charity acknowledgment. Repeating it is a no-op."""
        try:
            side = Role(side)
        except ValueError:
            raise ValidationError("Unknown acknowledgment side", details={"side": str(side)}) from None

        listing = self._get(listing_id)
        if listing.status != ListingStatus.CLAIMED:
            raise PreconditionError("Only claimed listings can be acknowledged.", details={"id": listing_id})

        participant_id = listing.donor_user_id if side == Role.DONOR else listing.charity_user_id
        if actor is None or actor.id != participant_id:
            raise AuthorizationError("Only the listing's participant can acknowledge this side.", details={"side": side.value})

        field = "donor_ack" if side == Role.DONOR else "charity_ack"
        if getattr(listing, field):
            return listing

        acked = listing.model_copy(update={field: True})
        self.listings.update(acked)
        logger.info(
            "Claim acknowledged",
            listing_id=listing_id,
            side=side.value,
            fully_confirmed=acked.fully_confirmed,
        )
        return acked

    def _new_message_id(self) -> str:
        taken = {m.id for l in self.listings.list() for m in l.chat}
        message_id = generate_id(MESSAGE_PREFIX)
        while message_id in taken:
            message_id = generate_id(MESSAGE_PREFIX)
        return message_id

    @command
    def post_chat_message(self, actor: Optional[User], listing_id: str, text: str) -> ChatMessage:
        if actor is None:
            raise AuthorizationError("Login to send messages.")
        text = (text or "").strip()
        if not text:
            raise ValidationError("Message text cannot be empty.")

        listing = self._get(listing_id)
        message = ChatMessage(
            id=self._new_message_id(),
            sender_user_id=actor.id,
            sender_name=actor.name,
            sender_role=actor.role,
            text=text,
            timestamp=self.clock(),
        )
        self.listings.update(listing.model_copy(update={"chat": listing.chat + [message]}))
        logger.info("Chat message posted", listing_id=listing_id, sender_id=actor.id)
        return message
