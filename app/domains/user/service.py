# app/domains/user/service.py
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models import User


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_auth_id(self, auth_user_id: str) -> User | None:
        """Get a user by identity-provider user ID."""
        result = await self.db.execute(select(User).where(User.auth_user_id == auth_user_id))
        return result.scalar_one_or_none()

    async def create_user(self, auth_user_id: str, email: str | None = None, username: str | None = None) -> User:
        """Create a new user."""
        user = User(auth_user_id=auth_user_id, email=email, username=username)

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def get_or_create_user(self, auth_user_id: str, token_payload: dict) -> User:
        """Get existing user or create new one from the token payload."""
        user = await self.get_user_by_auth_id(auth_user_id)
        if user:
            return user

        try:
            return await self.create_user(
                auth_user_id=auth_user_id,
                email=token_payload.get("email"),
                username=token_payload.get("username"),
            )
        except IntegrityError:
            # Another request created the row first
            user = await self.get_user_by_auth_id(auth_user_id)
            if not user:
                raise
            return user
