"""Group search index protocol."""

from typing import Protocol

from domain.entities.group import Group
from domain.entities.search import GroupSearchQuery, SearchResult


class IGroupSearchIndex(Protocol):
    """Read side for groups: filtered, sorted and paged lookups.

    Implementations raise ``SearchIndexError`` when the backend fails.
    """

    async def search(self, query: GroupSearchQuery) -> SearchResult[Group]:
        """Return one page of groups matching the query."""
        ...

    async def get(self, organization: str, group_id: str) -> Group | None:
        """Get a single group by identifier."""
        ...
