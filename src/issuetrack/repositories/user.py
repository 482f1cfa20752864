"""
Repository for User CRUD operations.

Password hashing happens in the caller; this layer only stores the hash.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.user import User


class UserRepository:
    """
    Repository for managing User entities.

    All methods that query by ID return None when the user is not found
    rather than raising exceptions.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the repository.

        Args:
            session: Database session of the caller's unit of work
        """
        self.session = session

    async def create(
        self,
        email: str,
        hashed_password: str,
        name: str,
        is_active: bool = True,
    ) -> User:
        """
        Create a new user.

        Args:
            email: User email address (must be unique)
            hashed_password: Bcrypt hash of the password
            name: User's display name
            is_active: Whether the account is active (default: True)

        Returns:
            The newly created user

        Raises:
            IntegrityError: If email already exists
        """
        user = User(
            email=email.lower(),
            hashed_password=hashed_password,
            name=name,
            is_active=is_active,
        )
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Retrieve a user by email address.

        Args:
            email: User email address, compared case-insensitively

        Returns:
            The user if found, None otherwise
        """
        stmt = select(User).where(User.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
