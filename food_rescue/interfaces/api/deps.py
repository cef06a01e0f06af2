"""FastAPI dependency — the acting user is whoever holds the session."""

from fastapi import Depends

from food_rescue.application.app_state import AppState
from food_rescue.core.exceptions import AuthorizationError
from food_rescue.domain.schemas.user import User
from food_rescue.interfaces.deps import get_app_state


def get_current_user(state: AppState = Depends(get_app_state)) -> User:
    """Return the session user, or fail when nobody is logged in."""
    user = state.identity.current_user()
    if user is None:
        raise AuthorizationError("Login required")
    return user
