"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.config import Settings
from timesheet_tracker.database import session_scope
from timesheet_tracker.exceptions import AuthenticationError, AuthorizationError
from timesheet_tracker.models import Role
from timesheet_tracker.security import Identity, decode_access_token


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with session_scope(request.app.state.session_factory) as session:
        yield session


AppSettings = Annotated[Settings, Depends(get_settings)]


async def get_identity(
    settings: AppSettings,
    x_auth_token: Annotated[str | None, Header()] = None,
) -> Identity:
    """Authenticate the request from its x-auth-token header."""
    if not x_auth_token:
        raise AuthenticationError("No token, authorization denied")
    return decode_access_token(x_auth_token, settings)


def require_role(role: Role) -> Callable[..., Coroutine[Any, Any, Identity]]:
    """Build a dependency that admits only identities holding exactly ``role``."""

    async def check_role(identity: Annotated[Identity, Depends(get_identity)]) -> Identity:
        if identity.role is not role:
            raise AuthorizationError(f"Access denied. {role.value}s only.")
        return identity

    return check_role


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentIdentity = Annotated[Identity, Depends(get_identity)]
ManagerIdentity = Annotated[Identity, Depends(require_role(Role.MANAGER))]
