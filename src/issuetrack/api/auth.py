"""Authentication utilities for the API."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from issuetrack.api.state import get_app_settings, get_database
from issuetrack.config import Settings, get_settings
from issuetrack.errors import forbidden, unauthorized
from issuetrack.models.base import Database
from issuetrack.models.user import User
from issuetrack.repositories.user import UserRepository

logger = logging.getLogger(__name__)

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str  # User ID
    email: str
    exp: Optional[datetime] = None
    iat: Optional[datetime] = None
    type: str = "access"


def create_access_token(
    user_id: UUID,
    email: str,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a new JWT access token.

    Args:
        user_id: User identifier
        email: User email
        expires_delta: Optional custom expiration time
        settings: Settings holding the signing key (default: from the environment)

    Returns:
        Encoded JWT token string
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)

    payload = TokenPayload(
        sub=str(user_id),
        email=email,
        exp=now + expires_delta,
        iat=now,
        type="access",
    )

    return jwt.encode(
        payload.model_dump(),
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str, settings: Optional[Settings] = None) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string
        settings: Settings holding the signing key (default: from the environment)

    Returns:
        Decoded token payload

    Raises:
        AppError: Unauthorized if the token is invalid or expired
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise unauthorized("Invalid or expired authentication token")

    try:
        data = TokenPayload.model_validate(payload)
    except ValidationError:
        raise unauthorized("Invalid authentication token")
    if data.type != "access":
        raise unauthorized("Invalid token type")
    return data


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        AppError: Unauthorized when the token is missing, invalid or names
            an unknown user; Forbidden when the account is inactive
    """
    if not credentials:
        raise unauthorized("Authentication required")

    token_data = decode_token(credentials.credentials, settings)
    try:
        user_id = UUID(token_data.sub)
    except ValueError:
        raise unauthorized("Invalid authentication token")

    async with db.session() as session:
        user = await UserRepository(session).get_by_id(user_id)

    if user is None:
        raise unauthorized("User no longer exists")
    if not user.is_active:
        raise forbidden("User account is inactive")

    logger.debug(f"Authenticated user via JWT: {user.id}")
    return user
