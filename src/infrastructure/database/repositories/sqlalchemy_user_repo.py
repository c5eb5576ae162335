"""SQLAlchemy implementation of the user directory repository."""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import User
from infrastructure.database.models import UserModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, organization: str, username: str) -> User | None:
        """Get a user by username."""
        stmt = select(UserModel).where(
            UserModel.organization == organization,
            UserModel.username == username,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, organization: str, usernames: Iterable[str]) -> list[User]:
        """Get every known user among the given usernames in one query."""
        wanted = list(usernames)
        if not wanted:
            return []

        stmt = (
            select(UserModel)
            .where(
                UserModel.organization == organization,
                UserModel.username.in_(wanted),
            )
            .order_by(UserModel.username)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: UserModel) -> User:
        """Convert ORM model to domain entity."""
        return User(
            username=model.username,
            organization=model.organization,
            name=model.name,
            email=model.email,
        )
