"""Pydantic schemas for Group API."""

from pydantic import BaseModel, Field


class GroupMemberResponse(BaseModel):
    """A group member with its resolved display name."""

    username: str
    name: str


class GroupSummaryResponse(BaseModel):
    """Schema for a group in the list response."""

    id: str
    name: str | None
    description: str | None
    role: str
    users: list[GroupMemberResponse] = Field(default_factory=list)


class GroupDetailResponse(BaseModel):
    """Schema for a single group, including its additional roles."""

    id: str
    name: str | None
    description: str | None
    role: str | None
    roles: list[str] = Field(default_factory=list)
    users: list[GroupMemberResponse] = Field(default_factory=list)


class GroupListResponse(BaseModel):
    """Schema for a page of groups with pagination metadata."""

    results: list[GroupSummaryResponse]
    count: int
    offset: int
    limit: int
    total: int


class GroupCreatedResponse(BaseModel):
    """Identifier assigned to a newly created group."""

    id: str
