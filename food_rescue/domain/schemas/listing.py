"""Pydantic schemas for Listing, ChatMessage and the derived views."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field, model_validator
from pydantic.alias_generators import to_camel

from food_rescue.domain.schemas.user import Role

_record_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ListingStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    CLAIMED = "CLAIMED"


class ChatMessage(BaseModel):
    id: str
    sender_user_id: str
    sender_name: str
    sender_role: Optional[Role] = None
    text: str
    timestamp: datetime

    model_config = _record_config


class ListingCreate(BaseModel):
    """Donor-supplied fields. Emptiness is checked by the lifecycle engine."""

    donor_type: str = ""
    food_description: str = ""
    quantity: str = ""
    expiry_date: str = ""  # ISO date, sorts lexicographically
    pickup_window: str = ""
    location: str = ""
    notes: str = ""
    image_ref: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Listing(BaseModel):
    id: str

    # Donor-supplied, immutable after creation
    donor_name: str
    donor_type: str
    donor_user_id: str
    food_description: str
    quantity: str
    expiry_date: str
    pickup_window: str
    location: str
    notes: str = ""
    image_ref: Optional[str] = None

    # Ownership
    created_by_user_id: str

    # Lifecycle
    status: ListingStatus = ListingStatus.AVAILABLE
    created_at: datetime
    charity_user_id: Optional[str] = None
    charity_name: str = ""
    claimed_at: Optional[datetime] = None
    donor_ack: bool = False
    charity_ack: bool = False

    chat: List[ChatMessage] = []

    model_config = _record_config

    @model_validator(mode="after")
    def check_claim_fields(self) -> "Listing":
        claimed = self.status == ListingStatus.CLAIMED
        if claimed != (self.charity_user_id is not None and self.claimed_at is not None):
            raise ValueError("charityUserId and claimedAt must be set exactly when the listing is CLAIMED")
        return self

    @property
    def fully_confirmed(self) -> bool:
        return self.donor_ack and self.charity_ack

    def search_text(self) -> str:
        return f"{self.food_description} {self.donor_name} {self.location} {self.notes}".lower()


class ListingRead(Listing):
    """Listing as handed to a front end, with the derived flags it renders."""

    can_delete: bool = False

    @computed_field(alias="fullyConfirmed")
    @property
    def is_fully_confirmed(self) -> bool:
        return self.fully_confirmed


class AckRequest(BaseModel):
    side: Role


class ChatRequest(BaseModel):
    text: str


class ListingStats(BaseModel):
    available: int
    claimed: int
    total: int
