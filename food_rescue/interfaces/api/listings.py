"""Listings API routes — lifecycle commands and the role-specific views."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from food_rescue.application.app_state import AppState
from food_rescue.application.command_gate import CommandGate
from food_rescue.application.services import projection_service
from food_rescue.application.services.image_service import image_to_data_url
from food_rescue.core.exceptions import AuthorizationError
from food_rescue.domain.schemas.listing import (
    AckRequest,
    ChatMessage,
    ChatRequest,
    Listing,
    ListingCreate,
    ListingRead,
    ListingStats,
)
from food_rescue.domain.schemas.user import Role, User
from food_rescue.interfaces.api.deps import get_current_user
from food_rescue.interfaces.deps import get_app_state, get_command_gate

router = APIRouter(prefix="/api/listings", tags=["Listings"])


def _present(state: AppState, user: User, listing: Listing) -> ListingRead:
    return ListingRead(
        **listing.model_dump(),
        can_delete=state.engine.can_delete(user, listing),
    )


def _require_role(user: User, role: Role) -> None:
    if user.role != role:
        raise AuthorizationError(f"Only {role.value.lower()} accounts can open this view")


@router.post("", response_model=ListingRead, status_code=status.HTTP_201_CREATED)
async def create_listing(
    donor_type: str = Form(""),
    food_description: str = Form(""),
    quantity: str = Form(""),
    expiry_date: str = Form(""),
    pickup_window: str = Form(""),
    location: str = Form(""),
    notes: str = Form(""),
    image: Optional[UploadFile] = File(None),
    state: AppState = Depends(get_app_state),
    gate: CommandGate = Depends(get_command_gate),
    user: User = Depends(get_current_user),
):
    with gate.submission(user.id):
        image_ref = await image_to_data_url(image)
        spec = ListingCreate(
            donor_type=donor_type,
            food_description=food_description,
            quantity=quantity,
            expiry_date=expiry_date,
            pickup_window=pickup_window,
            location=location,
            notes=notes,
            image_ref=image_ref,
        )
        listing = state.engine.create_listing(user, spec)

    return _present(state, user, listing)


@router.get("/stats", response_model=ListingStats)
def stats(state: AppState = Depends(get_app_state)):
    return projection_service.listing_stats(state.listings)


@router.get("/donor/history", response_model=List[ListingRead])
def donor_history(
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    _require_role(user, Role.DONOR)
    return [_present(state, user, l) for l in projection_service.donor_history(state.listings, user.id)]


@router.get("/donor/marketplace", response_model=List[ListingRead])
def donor_marketplace(
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    _require_role(user, Role.DONOR)
    return [_present(state, user, l) for l in projection_service.donor_marketplace(state.listings, user.id)]


@router.get("/charity/available", response_model=List[ListingRead])
def charity_available(
    q: str = "",
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    _require_role(user, Role.CHARITY)
    return [_present(state, user, l) for l in projection_service.charity_available(state.listings, q)]


@router.get("/charity/claimed", response_model=List[ListingRead])
def charity_claimed(
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    _require_role(user, Role.CHARITY)
    return [_present(state, user, l) for l in projection_service.charity_claimed(state.listings, user.id)]


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_listing(
    listing_id: str,
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    state.engine.delete_listing(user, listing_id)


@router.post("/{listing_id}/claim", response_model=ListingRead)
def claim_listing(
    listing_id: str,
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    return _present(state, user, state.engine.claim_listing(user, listing_id))


@router.post("/{listing_id}/ack", response_model=ListingRead)
def acknowledge_claim(
    listing_id: str,
    body: AckRequest,
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    return _present(state, user, state.engine.acknowledge_claim(user, listing_id, body.side))


@router.post("/{listing_id}/chat", response_model=ChatMessage, status_code=status.HTTP_201_CREATED)
def post_chat_message(
    listing_id: str,
    body: ChatRequest,
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    return state.engine.post_chat_message(user, listing_id, body.text)
