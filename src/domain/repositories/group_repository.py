"""Group repository protocol."""

from typing import Protocol

from domain.entities.group import Group


class IGroupRepository(Protocol):
    """Repository interface for Group entities."""

    async def get(self, organization: str, group_id: str) -> Group | None:
        """Get a group by identifier."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(self, group: Group) -> Group:
        """Replace name, description, roles and members of a group."""
        ...

    async def delete(self, organization: str, group_id: str) -> bool:
        """Delete a group."""
        ...
