"""Search query and result types for the group index."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")

DESCENDING_SUFFIX = "_DESC"


class SortField(StrEnum):
    """Fields the group list can be ordered by."""

    NAME = "NAME"
    DESCRIPTION = "DESCRIPTION"
    ROLE = "ROLE"


@dataclass(frozen=True)
class SortCriterion:
    """A single sort field with its direction."""

    field: SortField
    descending: bool = False


@dataclass
class GroupSearchQuery:
    """Criteria for a page of groups in one organization."""

    organization: str
    limit: int
    offset: int = 0
    name: str | None = None
    role: str | None = None
    text: str | None = None
    sort: SortCriterion | None = None


@dataclass
class SearchResult(Generic[T]):
    """A page of matches plus the total number of hits."""

    items: list[T] = field(default_factory=list)
    hit_count: int = 0
    offset: int = 0
    limit: int = 0
