"""Auth API routes — login, role selection, logout, me."""

from fastapi import APIRouter, Depends, status

from food_rescue.application.app_state import AppState
from food_rescue.domain.schemas.user import LoginRequest, RoleRequest, User, UserRead
from food_rescue.interfaces.api.deps import get_current_user
from food_rescue.interfaces.deps import get_app_state

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=UserRead)
def login(body: LoginRequest, state: AppState = Depends(get_app_state)):
    state.identity.login(body.name, body.contact, body.credential)
    # The session copy, which has no role until one is chosen
    return UserRead.model_validate(state.identity.current_user())


@router.post("/role", response_model=UserRead)
def choose_role(
    body: RoleRequest,
    state: AppState = Depends(get_app_state),
    user: User = Depends(get_current_user),
):
    return UserRead.model_validate(state.identity.assign_role(user.id, body.role))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(state: AppState = Depends(get_app_state)):
    state.identity.logout()


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
