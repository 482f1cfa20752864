"""User registration and credential checks."""

import logging

from sqlalchemy.exc import IntegrityError

from issuetrack.api.auth import get_password_hash, verify_password
from issuetrack.errors import conflict, forbidden, unauthorized
from issuetrack.models.base import Database
from issuetrack.models.user import User
from issuetrack.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts."""

    def __init__(self, db: Database):
        self.db = db

    async def register(self, email: str, password: str, name: str) -> User:
        """
        Create a user account with a bcrypt-hashed password.

        Raises:
            AppError: Conflict if the email is already registered
        """
        email = email.lower()
        try:
            async with self.db.session() as session:
                repo = UserRepository(session)
                if await repo.get_by_email(email) is not None:
                    raise conflict("Email is already registered")
                user = await repo.create(
                    email=email,
                    hashed_password=get_password_hash(password),
                    name=name,
                )
        except IntegrityError:
            raise conflict("Email is already registered")

        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            AppError: Unauthorized for an unknown email or wrong password,
                Forbidden for an inactive account
        """
        async with self.db.session() as session:
            user = await UserRepository(session).get_by_email(email)

        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Login failed: invalid credentials")
            raise unauthorized("Invalid email or password")
        if not user.is_active:
            raise forbidden("User account is inactive")
        return user
