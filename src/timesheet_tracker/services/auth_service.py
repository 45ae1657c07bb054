"""Registration, login and user directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.config import Settings
from timesheet_tracker.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from timesheet_tracker.models import Role, User
from timesheet_tracker.security import (
    Identity,
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful register or login."""

    token: str
    user: User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Service for user accounts and credentials."""

    def __init__(self, session: AsyncSession, settings: Settings):
        self.session = session
        self.settings = settings

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> User:
        """Load a user by id, raising NotFoundError if absent."""
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role = Role.EMPLOYEE,
        manager_id: int | None = None,
    ) -> AuthResult:
        """Create a user account and issue a token for it.

        Rejects a taken email and any manager reference that would break the
        two-level reporting tree.
        """
        email = normalize_email(email)
        full_name = full_name.strip()
        missing = [
            name
            for name, value in (("email", email), ("password", password), ("fullName", full_name))
            if not value
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes", fields=["password"]
            )

        if await self.get_by_email(email) is not None:
            raise ValidationError("User already exists", fields=["email"])

        if manager_id is not None:
            if role is Role.MANAGER:
                raise ValidationError("Managers cannot report to a manager", fields=["managerId"])
            manager = await self.session.get(User, manager_id)
            if manager is None or not manager.is_manager:
                raise ValidationError("managerId must reference a manager", fields=["managerId"])

        user = User(
            email=email,
            password_hash=hash_password(password, rounds=self.settings.bcrypt_rounds),
            full_name=full_name,
            role=role.value,
            manager_id=manager_id,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.session.rollback()
            raise ValidationError("User already exists", fields=["email"])
        await self.session.refresh(user)

        logger.info("Registered user %s as %s", user.id, user.role)
        return AuthResult(token=self._issue_token(user), user=user)

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and issue a token."""
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return AuthResult(token=self._issue_token(user), user=user)

    async def list_managers(self) -> list[User]:
        """Managers an employee can choose at registration."""
        result = await self.session.execute(
            select(User)
            .where(User.role == Role.MANAGER.value)
            .order_by(User.full_name.asc(), User.id.asc())
        )
        return list(result.scalars().all())

    def _issue_token(self, user: User) -> str:
        identity = Identity(user_id=user.id, role=Role(user.role))
        return create_access_token(identity, self.settings)
