"""User directory lookups for display names."""

from typing import Callable, Iterable, Optional

import structlog

from domain.entities.user import User
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.security_service import SecurityService

logger = structlog.get_logger()


class UserDirectoryService:
    """Resolves usernames of the current organization to directory users."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        security_service: SecurityService,
    ) -> None:
        self._uow_factory = uow_factory
        self._security = security_service

    async def load_user(self, username: str) -> Optional[User]:
        """Load a user, or None if the directory does not know it."""
        async with self._uow_factory() as uow:
            return await uow.users.get(self._security.organization, username)

    async def resolve_display_name(self, username: str) -> Optional[str]:
        """Return the user's name, or None when unknown or blank."""
        user = await self.load_user(username)
        if user is None or not (user.name or "").strip():
            return None
        return user.name

    async def resolve_display_names(self, usernames: Iterable[str]) -> dict[str, str]:
        """Map every username to a display name in a single lookup.

        Usernames without a directory entry, or whose name is blank,
        map to themselves.
        """
        wanted = set(usernames)
        if not wanted:
            return {}

        async with self._uow_factory() as uow:
            users = await uow.users.get_many(self._security.organization, wanted)

        names = {username: username for username in wanted}
        for user in users:
            if user.name and user.name.strip():
                names[user.username] = user.name

        logger.debug(
            "display_names_resolved",
            requested=len(wanted),
            found=len(users),
        )
        return names
