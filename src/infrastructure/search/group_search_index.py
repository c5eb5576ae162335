"""Group search index backed by the relational store."""

from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import SearchIndexError
from domain.entities.group import Group
from domain.entities.search import GroupSearchQuery, SearchResult, SortCriterion, SortField
from infrastructure.database.models import GroupModel
from infrastructure.database.repositories.sqlalchemy_group_repo import group_to_entity

_SORT_COLUMNS: dict[SortField, Any] = {
    SortField.NAME: func.lower(GroupModel.name),
    SortField.DESCRIPTION: func.lower(GroupModel.description),
    SortField.ROLE: GroupModel.role,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyGroupSearchIndex:
    """SQLAlchemy implementation of IGroupSearchIndex.

    Every call opens its own short-lived session, so one instance can be
    shared across requests.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def search(self, query: GroupSearchQuery) -> SearchResult[Group]:
        """Return one page of groups and the total number of matches."""
        stmt = self._filtered(query)
        count_stmt = select(func.count()).select_from(stmt.subquery())
        page_stmt = (
            stmt.order_by(*self._ordering(query.sort))
            .offset(query.offset)
            .limit(query.limit)
        )

        try:
            async with self._session_factory() as session:
                total = (await session.execute(count_stmt)).scalar_one()
                result = await session.execute(page_stmt)
                items = [group_to_entity(model) for model in result.scalars()]
        except SQLAlchemyError as exc:
            raise SearchIndexError() from exc

        return SearchResult(
            items=items,
            hit_count=total,
            offset=query.offset,
            limit=query.limit,
        )

    async def get(self, organization: str, group_id: str) -> Group | None:
        """Get a single group by identifier."""
        stmt = select(GroupModel).where(
            GroupModel.organization == organization,
            GroupModel.group_id == group_id,
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
                return group_to_entity(model) if model else None
        except SQLAlchemyError as exc:
            raise SearchIndexError() from exc

    def _filtered(self, query: GroupSearchQuery) -> Select[tuple[GroupModel]]:
        stmt = select(GroupModel).where(GroupModel.organization == query.organization)

        if query.name:
            stmt = stmt.where(GroupModel.name == query.name)
        if query.role:
            stmt = stmt.where(GroupModel.role == query.role)
        if query.text:
            pattern = f"%{_escape_like(query.text.lower())}%"
            stmt = stmt.where(
                or_(
                    func.lower(GroupModel.name).like(pattern, escape="\\"),
                    func.lower(GroupModel.description).like(pattern, escape="\\"),
                    func.lower(GroupModel.role).like(pattern, escape="\\"),
                )
            )
        return stmt

    def _ordering(self, sort: SortCriterion | None) -> list[Any]:
        if sort is None:
            return [func.lower(GroupModel.name), GroupModel.group_id]

        column = _SORT_COLUMNS[sort.field]
        primary = column.desc() if sort.descending else column.asc()
        return [primary, GroupModel.group_id]
