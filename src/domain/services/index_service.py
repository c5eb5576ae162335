"""Group index service: queries through the search index, writes through the store."""

from typing import Callable, Optional

import structlog

from core.exceptions import (
    GroupAlreadyExistsError,
    GroupNotFoundError,
    InvalidGroupEntryError,
    InvalidGroupNameError,
    InvalidSortError,
)
from domain.entities.group import (
    GROUP_NAME_MAX_LENGTH,
    ROLE_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    Group,
    group_id_from_name,
    group_role_for,
    split_csv,
)
from domain.entities.search import (
    DESCENDING_SUFFIX,
    GroupSearchQuery,
    SearchResult,
    SortCriterion,
    SortField,
)
from domain.repositories.search_index import IGroupSearchIndex
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.security_service import SecurityService

logger = structlog.get_logger()

FILTER_NAME = "name"
FILTER_ROLE = "role"
FILTER_TEXT = "textfilter"

DEFAULT_LIMIT = 100
DEFAULT_NAME_MAX_LENGTH = GROUP_NAME_MAX_LENGTH


def parse_filters(value: Optional[str]) -> dict[str, str]:
    """Parse ``key:value,key:value`` into a dict keyed by lower-cased key.

    Entries without a value are skipped; the value is everything after
    the first colon.
    """
    filters: dict[str, str] = {}
    if not value:
        return filters

    for entry in value.split(","):
        key, sep, filter_value = entry.partition(":")
        key = key.strip().lower()
        filter_value = filter_value.strip()
        if not key or not sep or not filter_value:
            logger.debug("group_filter_skipped", entry=entry)
            continue
        filters[key] = filter_value
    return filters


def parse_sort(value: Optional[str]) -> Optional[SortCriterion]:
    """Parse ``NAME``, ``ROLE_DESC`` and the like into a sort criterion.

    Raises:
        InvalidSortError: If the field is not one of the sortable fields.
    """
    token = (value or "").strip().upper()
    if not token:
        return None

    descending = token.endswith(DESCENDING_SUFFIX)
    if descending:
        token = token[: -len(DESCENDING_SUFFIX)]

    try:
        field = SortField(token)
    except ValueError:
        raise InvalidSortError(value or "", [f.value for f in SortField]) from None
    return SortCriterion(field=field, descending=descending)


class IndexService:
    """Service layer for group management."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        security_service: SecurityService,
        default_limit: int = DEFAULT_LIMIT,
        name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
    ) -> None:
        self._uow_factory = uow_factory
        self._security = security_service
        self._default_limit = default_limit
        # Never wider than the name column
        self._name_max_length = min(name_max_length, GROUP_NAME_MAX_LENGTH)

    async def get_groups(
        self,
        filter: Optional[str],
        limit: int,
        offset: int,
        sort: Optional[str],
        search_index: IGroupSearchIndex,
    ) -> SearchResult[Group]:
        """Get one page of the organization's groups.

        A limit below 1 falls back to the default page size and a negative
        offset starts at the first group.
        """
        if limit < 1:
            limit = self._default_limit
        offset = max(offset, 0)

        query = GroupSearchQuery(
            organization=self._security.organization,
            limit=limit,
            offset=offset,
            sort=parse_sort(sort),
        )

        for key, value in parse_filters(filter).items():
            if key == FILTER_NAME:
                query.name = value
            elif key == FILTER_ROLE:
                query.role = value
            elif key == FILTER_TEXT:
                query.text = value
            else:
                logger.debug("group_filter_unknown", filter=key)

        return await search_index.search(query)

    async def get_group(
        self, group_id: str, search_index: IGroupSearchIndex
    ) -> Optional[Group]:
        """Get a group of the current organization, or None."""
        return await search_index.get(self._security.organization, group_id)

    async def create_group(
        self,
        name: Optional[str],
        description: Optional[str] = None,
        roles: Optional[str] = None,
        users: Optional[str] = None,
    ) -> Group:
        """Create a group whose identifier is derived from its name.

        Raises:
            InvalidGroupNameError: If the name is blank or too long.
            InvalidGroupEntryError: If a role or member entry is too long.
            GroupAlreadyExistsError: If the derived identifier is taken.
        """
        name = self._validate_name(name)
        organization = self._security.organization
        group_id = group_id_from_name(name)
        role = group_role_for(group_id)
        # Case mapping can lengthen non-ASCII names
        if len(group_id) > GROUP_NAME_MAX_LENGTH or len(role) > ROLE_MAX_LENGTH:
            raise InvalidGroupNameError(self._name_max_length)

        group = Group(
            organization=organization,
            identifier=group_id,
            role=role,
            name=name,
            description=_clean(description),
            roles=_entries("roles", roles, ROLE_MAX_LENGTH),
            members=_entries("users", users, USERNAME_MAX_LENGTH),
        )

        async with self._uow_factory() as uow:
            if await uow.groups.get(organization, group_id):
                raise GroupAlreadyExistsError(group_id)

            created = await uow.groups.create(group)
            await uow.commit()

        logger.info(
            "group_created",
            group_id=created.identifier,
            organization=organization,
            members=len(created.members),
        )
        return created

    async def update_group(
        self,
        group_id: str,
        name: Optional[str],
        description: Optional[str] = None,
        roles: Optional[str] = None,
        users: Optional[str] = None,
    ) -> Group:
        """Replace name, description, roles and members of a group.

        The identifier and the group role are kept.

        Raises:
            GroupNotFoundError: If the group does not exist.
            InvalidGroupNameError: If the name is blank or too long.
            InvalidGroupEntryError: If a role or member entry is too long.
        """
        organization = self._security.organization

        async with self._uow_factory() as uow:
            group = await uow.groups.get(organization, group_id)
            if not group:
                raise GroupNotFoundError(group_id)

            group.name = self._validate_name(name)
            group.description = _clean(description)
            group.roles = _entries("roles", roles, ROLE_MAX_LENGTH)
            group.members = _entries("users", users, USERNAME_MAX_LENGTH)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info("group_updated", group_id=group_id, organization=organization)
        return updated

    async def remove_group(self, group_id: str) -> None:
        """Delete a group.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        organization = self._security.organization

        async with self._uow_factory() as uow:
            deleted = await uow.groups.delete(organization, group_id)
            if not deleted:
                raise GroupNotFoundError(group_id)
            await uow.commit()

        logger.info("group_removed", group_id=group_id, organization=organization)

    def _validate_name(self, name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name or len(name) > self._name_max_length:
            raise InvalidGroupNameError(self._name_max_length)
        return name


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim a free-text form value; blank becomes None."""
    if value is None:
        return None
    return value.strip() or None


def _entries(field: str, value: Optional[str], max_length: int) -> set[str]:
    """Split a comma separated form value, rejecting entries wider than the column."""
    entries = split_csv(value)
    if any(len(entry) > max_length for entry in entries):
        raise InvalidGroupEntryError(field, max_length)
    return entries
