"""User directory repository protocol."""

from typing import Iterable, Protocol

from domain.entities.user import User


class IUserRepository(Protocol):
    """Repository interface for directory users."""

    async def get(self, organization: str, username: str) -> User | None:
        """Get a user by username."""
        ...

    async def get_many(self, organization: str, usernames: Iterable[str]) -> list[User]:
        """Get every known user among the given usernames."""
        ...
