"""SQLAlchemy implementation of Group repository."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import GroupAlreadyExistsError
from domain.entities.group import Group
from infrastructure.database.models import GroupMemberModel, GroupModel, GroupRoleModel


def group_to_entity(model: GroupModel) -> Group:
    """Convert ORM model to domain entity."""
    return Group(
        organization=model.organization,
        identifier=model.group_id,
        role=model.role,
        name=model.name,
        description=model.description,
        roles={r.role for r in model.roles},
        members={m.username for m in model.members},
    )


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, organization: str, group_id: str) -> Group | None:
        """Get a group by identifier."""
        model = await self._get_model(organization, group_id)
        return group_to_entity(model) if model else None

    async def create(self, group: Group) -> Group:
        """Create a new group with its roles and members."""
        model = GroupModel(
            organization=group.organization,
            group_id=group.identifier,
            name=group.name,
            description=group.description,
            role=group.role,
            roles=[GroupRoleModel(role=role) for role in sorted(group.roles)],
            members=[GroupMemberModel(username=u) for u in sorted(group.members)],
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError:
            # Lost a race with a concurrent create of the same identifier
            raise GroupAlreadyExistsError(group.identifier) from None
        return group_to_entity(model)

    async def update(self, group: Group) -> Group:
        """Replace name, description, roles and members of a group."""
        model = await self._get_model(group.organization, group.identifier)

        if not model:
            raise ValueError(f"Group {group.identifier} not found")

        model.name = group.name
        model.description = group.description

        model.roles = [r for r in model.roles if r.role in group.roles]
        existing_roles = {r.role for r in model.roles}
        model.roles.extend(
            GroupRoleModel(role=role)
            for role in sorted(group.roles - existing_roles)
        )

        model.members = [m for m in model.members if m.username in group.members]
        existing_members = {m.username for m in model.members}
        model.members.extend(
            GroupMemberModel(username=username)
            for username in sorted(group.members - existing_members)
        )

        await self._session.flush()
        return group_to_entity(model)

    async def delete(self, organization: str, group_id: str) -> bool:
        """Delete a group (cascade deletes roles and members)."""
        model = await self._get_model(organization, group_id)

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _get_model(self, organization: str, group_id: str) -> GroupModel | None:
        stmt = select(GroupModel).where(
            GroupModel.organization == organization,
            GroupModel.group_id == group_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
