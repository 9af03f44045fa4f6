"""User repository for database operations."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.models import UserModel

PROFILE_FIELDS = frozenset({"name", "bio", "avatar"})


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user.

        The email is lower-cased before insert.

        Args:
            user: User model to create.

        Returns:
            Created user model.
        """
        user.email = user.email.lower()
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID (UUID string).

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by email, ignoring case."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> UserModel | None:
        result = await self.session.execute(
            select(UserModel).where(UserModel.username == username)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if an email is already registered (case-insensitive).

        Args:
            email: Email to check.

        Returns:
            True if the email exists, False otherwise.
        """
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.email == email.lower()).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def username_exists(self, username: str) -> bool:
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.username == username).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update_password(self, user_id: str, password_hash: str) -> bool:
        """Replace a user's password hash.

        Args:
            user_id: ID of the user to update.
            password_hash: New Argon2 hash.

        Returns:
            True if a user was updated, False if not found.
        """
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, updated_at=utcnow())
        )
        return result.rowcount > 0

    async def mark_verified(self, email: str) -> bool:
        """Mark the user owning ``email`` as verified."""
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.email == email.lower())
            .values(verified=True, updated_at=utcnow())
        )
        return result.rowcount > 0

    async def update_profile(self, user: UserModel, **changes: str | None) -> UserModel:
        """Apply profile changes to a user.

        Only ``name``, ``bio`` and ``avatar`` can be changed here; other keys
        are ignored. A value of None clears the field.

        Args:
            user: Loaded user model.
            **changes: Fields to set.

        Returns:
            The updated user model.
        """
        for field, value in changes.items():
            if field in PROFILE_FIELDS:
                setattr(user, field, value)
        user.updated_at = utcnow()
        await self.session.flush()
        return user

    async def delete(self, user_id: str) -> bool:
        """Hard-delete a user. Refresh tokens go with it via ON DELETE CASCADE."""
        result = await self.session.execute(delete(UserModel).where(UserModel.id == user_id))
        return result.rowcount > 0
