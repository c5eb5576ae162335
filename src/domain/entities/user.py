"""User directory entity."""

from dataclasses import dataclass, field


@dataclass
class User:
    """A user known to the directory of an organization."""

    username: str
    organization: str
    name: str | None = None
    email: str | None = None
    roles: set[str] = field(default_factory=set)
