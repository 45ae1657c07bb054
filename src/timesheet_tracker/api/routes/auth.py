"""Authentication and user directory endpoints."""

from fastapi import APIRouter, status

from timesheet_tracker.api.dependencies import AppSettings, CurrentIdentity, DbSession
from timesheet_tracker.api.schemas import (
    ErrorResponse,
    LoginRequest,
    ManagerResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from timesheet_tracker.services.auth_service import AuthResult, AuthService

router = APIRouter(tags=["auth"])


def _token_response(result: AuthResult) -> TokenResponse:
    return TokenResponse(token=result.token, user=UserResponse.model_validate(result.user))


@router.post(
    "/auth/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register(
    db: DbSession,
    settings: AppSettings,
    payload: RegisterRequest,
) -> TokenResponse:
    """Register a new user and return a token for it."""
    service = AuthService(db, settings)
    result = await service.register(
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role,
        manager_id=payload.manager_id,
    )
    return _token_response(result)


@router.post(
    "/auth/login",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse}},
)
async def login(
    db: DbSession,
    settings: AppSettings,
    payload: LoginRequest,
) -> TokenResponse:
    """Authenticate a user and return a token."""
    service = AuthService(db, settings)
    result = await service.login(payload.email, payload.password)
    return _token_response(result)


@router.get(
    "/auth/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
)
async def current_user(
    db: DbSession,
    settings: AppSettings,
    identity: CurrentIdentity,
) -> UserResponse:
    """Profile of the authenticated user, including the role clients should trust."""
    user = await AuthService(db, settings).get_user(identity.user_id)
    return UserResponse.model_validate(user)


@router.get("/managers", response_model=list[ManagerResponse])
async def list_managers(db: DbSession, settings: AppSettings) -> list[ManagerResponse]:
    """Managers available for selection at registration."""
    managers = await AuthService(db, settings).list_managers()
    return [ManagerResponse.model_validate(m) for m in managers]
