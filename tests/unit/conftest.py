"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.group import Group
from domain.entities.user import User
from domain.services.security_service import SecurityService


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.groups = AsyncMock()
        self.users = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def organization() -> str:
    return "test_org"


@pytest.fixture
def security_service(organization: str) -> SecurityService:
    """Security context of an administrator in the test organization."""
    return SecurityService(User(username="admin", organization=organization, name="Admin"))


@pytest.fixture
def group(organization: str) -> Group:
    return Group(
        organization=organization,
        identifier="staff",
        role="ROLE_GROUP_STAFF",
        name="Staff",
        description="All staff",
        roles={"ROLE_STUDIO"},
        members={"alice", "bob"},
    )
