"""Password hashing and access token helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import bcrypt
import jwt

from timesheet_tracker.config import Settings
from timesheet_tracker.exceptions import AuthenticationError
from timesheet_tracker.models.user import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller attached to a request."""

    user_id: int
    role: Role

    @property
    def is_manager(self) -> bool:
        return self.role is Role.MANAGER


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    identity: Identity,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """Sign a time-limited token carrying the identity."""
    issued_at = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "user": {"id": identity.user_id, "role": identity.role.value},
        "iat": issued_at,
        "exp": issued_at + settings.token_lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """Verify signature and expiry and return the embedded identity.

    Raises AuthenticationError for anything short of a valid, unexpired
    token with a well-formed payload.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        logger.warning("Rejected invalid access token")
        raise AuthenticationError("Token is not valid")

    user = payload.get("user")
    if not isinstance(user, dict):
        raise AuthenticationError("Token is not valid")
    try:
        return Identity(user_id=int(user["id"]), role=Role(user["role"]))
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Token is not valid")
