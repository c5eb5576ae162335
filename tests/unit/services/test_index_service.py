"""Unit tests for IndexService."""

from unittest.mock import AsyncMock

import pytest

from core.exceptions import (
    GroupAlreadyExistsError,
    GroupNotFoundError,
    InvalidGroupEntryError,
    InvalidGroupNameError,
    InvalidSortError,
)
from domain.entities.group import Group
from domain.entities.search import GroupSearchQuery, SearchResult, SortCriterion, SortField
from domain.services.index_service import IndexService, parse_filters, parse_sort
from domain.services.security_service import SecurityService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork, security_service: SecurityService) -> IndexService:
    return IndexService(lambda: uow, security_service, default_limit=100, name_max_length=20)


@pytest.fixture
def search_index() -> AsyncMock:
    index = AsyncMock()
    index.search.return_value = SearchResult(items=[], hit_count=0)
    return index


def _passthrough(group: Group) -> Group:
    return group


# --- parse_filters / parse_sort ---


class TestParseFilters:
    def test_parses_key_value_pairs(self):
        assert parse_filters("name:Staff,textFilter:ops") == {
            "name": "Staff",
            "textfilter": "ops",
        }

    def test_value_keeps_everything_after_first_colon(self):
        assert parse_filters("role:ROLE_A:B") == {"role": "ROLE_A:B"}

    def test_skips_entries_without_value(self):
        assert parse_filters("name,role:,:x, textFilter : a ") == {"textfilter": "a"}

    def test_empty_filter(self):
        assert parse_filters(None) == {}
        assert parse_filters("") == {}


class TestParseSort:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("NAME", SortCriterion(SortField.NAME)),
            ("name_desc", SortCriterion(SortField.NAME, descending=True)),
            ("DESCRIPTION", SortCriterion(SortField.DESCRIPTION)),
            (" ROLE_DESC ", SortCriterion(SortField.ROLE, descending=True)),
        ],
    )
    def test_parses_known_fields(self, value: str, expected: SortCriterion):
        assert parse_sort(value) == expected

    def test_blank_means_default_order(self):
        assert parse_sort(None) is None
        assert parse_sort("   ") is None

    def test_unknown_field_raises(self):
        with pytest.raises(InvalidSortError) as exc_info:
            parse_sort("MEMBERS")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["allowed"] == ["NAME", "DESCRIPTION", "ROLE"]


# --- get_groups ---


class TestGetGroups:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, -100])
    async def test_limit_below_one_uses_default(
        self, service: IndexService, search_index: AsyncMock, limit: int
    ):
        await service.get_groups(None, limit, 0, None, search_index)

        query: GroupSearchQuery = search_index.search.call_args.args[0]
        assert query.limit == 100

    @pytest.mark.asyncio
    async def test_negative_offset_starts_at_zero(
        self, service: IndexService, search_index: AsyncMock
    ):
        await service.get_groups(None, 10, -5, None, search_index)

        query: GroupSearchQuery = search_index.search.call_args.args[0]
        assert query.offset == 0
        assert query.limit == 10

    @pytest.mark.asyncio
    async def test_builds_query_from_filter_and_sort(
        self,
        service: IndexService,
        search_index: AsyncMock,
        organization: str,
    ):
        await service.get_groups(
            "name:Staff,role:ROLE_GROUP_STAFF,textFilter:ops,unknown:x",
            25,
            50,
            "DESCRIPTION_DESC",
            search_index,
        )

        query: GroupSearchQuery = search_index.search.call_args.args[0]
        assert query.organization == organization
        assert query.name == "Staff"
        assert query.role == "ROLE_GROUP_STAFF"
        assert query.text == "ops"
        assert query.offset == 50
        assert query.sort == SortCriterion(SortField.DESCRIPTION, descending=True)

    @pytest.mark.asyncio
    async def test_invalid_sort_never_reaches_index(
        self, service: IndexService, search_index: AsyncMock
    ):
        with pytest.raises(InvalidSortError):
            await service.get_groups(None, 10, 0, "BOGUS", search_index)

        search_index.search.assert_not_called()


# --- get_group ---


class TestGetGroup:
    @pytest.mark.asyncio
    async def test_returns_group_of_current_organization(
        self,
        service: IndexService,
        search_index: AsyncMock,
        group: Group,
        organization: str,
    ):
        search_index.get.return_value = group

        result = await service.get_group("staff", search_index)

        assert result is group
        search_index.get.assert_awaited_once_with(organization, "staff")

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(
        self, service: IndexService, search_index: AsyncMock
    ):
        search_index.get.return_value = None

        assert await service.get_group("nope", search_index) is None


# --- create_group ---


class TestCreateGroup:
    @pytest.mark.asyncio
    async def test_creates_group_with_derived_identifier_and_role(
        self, service: IndexService, uow: FakeUnitOfWork, organization: str
    ):
        uow.groups.get.return_value = None
        uow.groups.create.side_effect = _passthrough

        created = await service.create_group(
            " Course Admins ",
            "Admins of courses",
            "ROLE_A, ROLE_B,,ROLE_A",
            "alice, bob ,",
        )

        assert created.identifier == "course_admins"
        assert created.role == "ROLE_GROUP_COURSE_ADMINS"
        assert created.name == "Course Admins"
        assert created.organization == organization
        assert created.roles == {"ROLE_A", "ROLE_B"}
        assert created.members == {"alice", "bob"}
        assert uow.committed

    @pytest.mark.asyncio
    async def test_blank_description_is_stored_as_none(
        self, service: IndexService, uow: FakeUnitOfWork
    ):
        uow.groups.get.return_value = None
        uow.groups.create.side_effect = _passthrough

        created = await service.create_group("Staff", "   ")

        assert created.description is None
        assert created.roles == set()
        assert created.members == set()

    @pytest.mark.asyncio
    async def test_raises_conflict_when_identifier_taken(
        self, service: IndexService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group

        with pytest.raises(GroupAlreadyExistsError) as exc_info:
            await service.create_group("Staff")

        assert exc_info.value.status_code == 409
        uow.groups.create.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "   ", "x" * 21])
    async def test_raises_bad_request_for_invalid_name(
        self, service: IndexService, uow: FakeUnitOfWork, name: str | None
    ):
        with pytest.raises(InvalidGroupNameError) as exc_info:
            await service.create_group(name)

        assert exc_info.value.status_code == 400
        uow.groups.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_name_at_max_length_is_accepted(
        self, service: IndexService, uow: FakeUnitOfWork
    ):
        uow.groups.get.return_value = None
        uow.groups.create.side_effect = _passthrough

        created = await service.create_group("x" * 20)

        assert created.name == "x" * 20

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("roles", "users", "field", "max_length"),
        [
            ("ROLE_A," + "R" * 256, None, "roles", 255),
            (None, "alice," + "u" * 129, "users", 128),
        ],
    )
    async def test_raises_bad_request_for_oversized_entry(
        self,
        service: IndexService,
        uow: FakeUnitOfWork,
        roles: str | None,
        users: str | None,
        field: str,
        max_length: int,
    ):
        with pytest.raises(InvalidGroupEntryError) as exc_info:
            await service.create_group("Staff", roles=roles, users=users)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": field, "max_length": max_length}
        uow.groups.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_entries_at_column_width_are_accepted(
        self, service: IndexService, uow: FakeUnitOfWork
    ):
        uow.groups.get.return_value = None
        uow.groups.create.side_effect = _passthrough

        created = await service.create_group("Staff", roles="R" * 255, users="u" * 128)

        assert created.roles == {"R" * 255}
        assert created.members == {"u" * 128}

    @pytest.mark.asyncio
    async def test_name_limit_is_capped_at_column_width(
        self, uow: FakeUnitOfWork, security_service: SecurityService
    ):
        wide = IndexService(lambda: uow, security_service, name_max_length=500)

        with pytest.raises(InvalidGroupNameError) as exc_info:
            await wide.create_group("x" * 129)

        assert exc_info.value.details == {"max_length": 128}
        uow.groups.create.assert_not_called()


# --- update_group ---


class TestUpdateGroup:
    @pytest.mark.asyncio
    async def test_replaces_fields_and_keeps_identity(
        self, service: IndexService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group
        uow.groups.update.side_effect = _passthrough

        updated = await service.update_group(
            "staff", "Faculty", "Teaching staff", "ROLE_X", "carol"
        )

        assert updated.identifier == "staff"
        assert updated.role == "ROLE_GROUP_STAFF"
        assert updated.name == "Faculty"
        assert updated.description == "Teaching staff"
        assert updated.roles == {"ROLE_X"}
        assert updated.members == {"carol"}
        assert uow.committed

    @pytest.mark.asyncio
    async def test_absent_lists_clear_roles_and_members(
        self, service: IndexService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group
        uow.groups.update.side_effect = _passthrough

        updated = await service.update_group("staff", "Staff")

        assert updated.roles == set()
        assert updated.members == set()
        assert updated.description is None

    @pytest.mark.asyncio
    async def test_raises_not_found(self, service: IndexService, uow: FakeUnitOfWork):
        uow.groups.get.return_value = None

        with pytest.raises(GroupNotFoundError) as exc_info:
            await service.update_group("missing", "Name")

        assert exc_info.value.status_code == 404
        uow.groups.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_raises_bad_request_for_long_name(
        self, service: IndexService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group

        with pytest.raises(InvalidGroupNameError):
            await service.update_group("staff", "y" * 21)

        uow.groups.update.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_raises_bad_request_for_oversized_member(
        self, service: IndexService, uow: FakeUnitOfWork, group: Group
    ):
        uow.groups.get.return_value = group

        with pytest.raises(InvalidGroupEntryError):
            await service.update_group("staff", "Staff", users="u" * 129)

        uow.groups.update.assert_not_called()
        assert not uow.committed


# --- remove_group ---


class TestRemoveGroup:
    @pytest.mark.asyncio
    async def test_removes_group(
        self, service: IndexService, uow: FakeUnitOfWork, organization: str
    ):
        uow.groups.delete.return_value = True

        await service.remove_group("staff")

        uow.groups.delete.assert_awaited_once_with(organization, "staff")
        assert uow.committed

    @pytest.mark.asyncio
    async def test_raises_not_found(self, service: IndexService, uow: FakeUnitOfWork):
        uow.groups.delete.return_value = False

        with pytest.raises(GroupNotFoundError):
            await service.remove_group("missing")

        assert not uow.committed
