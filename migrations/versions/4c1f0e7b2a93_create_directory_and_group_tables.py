"""create_directory_and_group_tables

Revision ID: 4c1f0e7b2a93
Revises:
Create Date: 2026-10-19 09:12:27.418305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1f0e7b2a93'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, groups, group_roles and group_members tables."""
    op.create_table('users',
        sa.Column('organization', sa.String(length=128), nullable=False),
        sa.Column('username', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=True),
        sa.Column('email', sa.String(length=256), nullable=True),
        sa.PrimaryKeyConstraint('organization', 'username'),
    )

    op.create_table('groups',
        sa.Column('organization', sa.String(length=128), nullable=False),
        sa.Column('group_id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('role', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('organization', 'group_id'),
    )
    op.create_index('ix_groups_organization_name', 'groups', ['organization', 'name'], unique=False)

    op.create_table('group_roles',
        sa.Column('organization', sa.String(length=128), nullable=False),
        sa.Column('group_id', sa.String(length=128), nullable=False),
        sa.Column('role', sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization', 'group_id'],
            ['groups.organization', 'groups.group_id'],
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('organization', 'group_id', 'role'),
    )

    op.create_table('group_members',
        sa.Column('organization', sa.String(length=128), nullable=False),
        sa.Column('group_id', sa.String(length=128), nullable=False),
        sa.Column('username', sa.String(length=128), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization', 'group_id'],
            ['groups.organization', 'groups.group_id'],
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('organization', 'group_id', 'username'),
    )
    op.create_index(
        'ix_group_members_username', 'group_members', ['organization', 'username'], unique=False
    )


def downgrade() -> None:
    """Drop group and directory tables."""
    op.drop_index('ix_group_members_username', table_name='group_members')
    op.drop_table('group_members')
    op.drop_table('group_roles')
    op.drop_index('ix_groups_organization_name', table_name='groups')
    op.drop_table('groups')
    op.drop_table('users')
