from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login.

    Controllers rebuild it per request and pass it down explicitly.
    """

    user_id: int
    full_name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Failed login for %r", username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: self sign-up and admin promotion."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, full_name: str, username: str, password: str) -> int:
        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", 6)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user_id = self._users.create_user(
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=Role.USER,
        )
        logger.info("Registered user %s (id=%s)", username, user_id)
        return user_id

    def make_admin(self, username: str) -> int:
        user = self._users.get_by_username(require_non_empty(username, "Username"))
        if not user:
            raise ValidationError("User does not exist")
        if user.role != Role.ADMIN and not self._users.set_role(user.user_id, role=Role.ADMIN):
            raise ValidationError("Could not update role")
        logger.info("User %s is now admin", user.username)
        return user.user_id

    def is_admin(self, user_id: int) -> bool:
        user = self._users.get_by_id(int(user_id))
        return bool(user and user.is_active and user.role == Role.ADMIN)
