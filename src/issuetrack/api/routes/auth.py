"""Authentication endpoints."""
import logging

from fastapi import APIRouter, Depends, status

from issuetrack.api.auth import create_access_token, get_current_user
from issuetrack.api.deps import get_user_service
from issuetrack.api.models import (
    DataResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from issuetrack.api.state import get_app_settings
from issuetrack.config import Settings
from issuetrack.models.user import User
from issuetrack.services import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, settings: Settings) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, user.email, settings=settings),
        expires_in=settings.jwt_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=DataResponse[TokenResponse],
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Email already registered"}},
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[TokenResponse]:
    """Register a user and return an access token for it."""
    user = await users.register(body.email, body.password, body.name)
    return DataResponse(data=_token_response(user, settings))


@router.post(
    "/login",
    response_model=DataResponse[TokenResponse],
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Login and get JWT token",
)
async def login(
    body: LoginRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[TokenResponse]:
    """Authenticate with email and password."""
    user = await users.authenticate(body.email, body.password)
    logger.info(f"User logged in: {user.id}")
    return DataResponse(data=_token_response(user, settings))


@router.get("/me", response_model=DataResponse[UserResponse], summary="Current user")
async def me(user: User = Depends(get_current_user)) -> DataResponse[UserResponse]:
    return DataResponse(data=UserResponse.model_validate(user))
