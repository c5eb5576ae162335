"""Group domain entity."""

import re
from dataclasses import dataclass, field

GROUP_ROLE_PREFIX = "ROLE_GROUP_"

# Column widths of the group tables
GROUP_NAME_MAX_LENGTH = 128
ROLE_MAX_LENGTH = 255
USERNAME_MAX_LENGTH = 128

_NON_WORD = re.compile(r"\W", re.ASCII)


def group_id_from_name(name: str) -> str:
    """Derive a group identifier from its display name.

    ``"Course Admins 2024!"`` becomes ``"course_admins_2024_"``.
    """
    return _NON_WORD.sub("_", name.lower())


def group_role_for(group_id: str) -> str:
    """Role granted to every member of the group."""
    return f"{GROUP_ROLE_PREFIX}{group_id.upper()}"


def split_csv(value: str | None) -> set[str]:
    """Split a comma separated form value into a set of trimmed, non-blank entries."""
    if not value:
        return set()
    return {item.strip() for item in value.split(",") if item.strip()}


@dataclass
class Group:
    """Domain entity for an organization group."""

    organization: str
    identifier: str
    role: str
    name: str | None = None
    description: str | None = None
    roles: set[str] = field(default_factory=set)
    members: set[str] = field(default_factory=set)
