"""Identity registry — login by (name, contact, credential), role selection, session.

Credentials are plain shared secrets compared as-is; this is not a security
boundary.
"""

import threading
from typing import Optional

import structlog

from food_rescue.application.command_gate import command
from food_rescue.config import get_settings
from food_rescue.core.exceptions import NotFoundError, ValidationError
from food_rescue.core.ids import USER_PREFIX, generate_id
from food_rescue.domain.repositories.user_repository import SessionRepository, UserRepository
from food_rescue.domain.schemas.user import Role, User

settings = get_settings()
logger = structlog.get_logger(__name__)


class IdentityRegistry:
    def __init__(
        self,
        users: UserRepository,
        session: SessionRepository,
        min_credential_length: int = settings.MIN_CREDENTIAL_LENGTH,
        lock=None,
    ):
        self.users = users
        self.session = session
        self.min_credential_length = min_credential_length
        self.lock = lock or threading.RLock()

    def refresh(self) -> None:
        self.users.reload()
        self.session.reload()

    def _new_id(self) -> str:
        user_id = generate_id(USER_PREFIX)
        while self.users.get_by_id(user_id) is not None:
            user_id = generate_id(USER_PREFIX)
        return user_id

    @command
    def login(self, name: str, contact: str, credential: str) -> User:
        """Return the user matching all three fields, registering one if none does.

        The session is (re)started with no role, so the caller must pick a
        role before acting as a donor or charity.
        """
        name = (name or "").strip()
        contact = (contact or "").strip()
        credential = (credential or "").strip()

        if not name or len(credential) < self.min_credential_length:
            raise ValidationError(
                f"Please enter your name and a credential of at least {self.min_credential_length} characters.",
                details={"name_missing": not name, "min_credential_length": self.min_credential_length},
            )

        user = self.users.find_by_identity(name, contact, credential)
        if user is None:
            user = self.users.add(User(id=self._new_id(), name=name, contact=contact, credential=credential))
            logger.info("User registered", user_id=user.id)

        self.session.set(user.model_copy(update={"role": None}))
        logger.info("Session started", user_id=user.id)
        return user

    @command
    def assign_role(self, user_id: str, role: Role) -> User:
        """Set the user's role. Re-choosing a role simply overwrites it."""
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", details={"id": user_id})

        updated = self.users.update(user.model_copy(update={"role": Role(role)}))

        current = self.session.get()
        if current is not None and current.id == user_id:
            self.session.set(updated)

        logger.info("Role assigned", user_id=user_id, role=updated.role.value)
        return updated

    def current_user(self) -> Optional[User]:
        return self.session.get()

    @command
    def logout(self) -> None:
        current = self.session.get()
        self.session.set(None)
        if current is not None:
            logger.info("Session ended", user_id=current.id)
