"""SQLAlchemy ORM models."""

from sqlalchemy import ForeignKeyConstraint, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """User directory entry (composite PK on organization + username)."""

    __tablename__ = "users"

    organization: Mapped[str] = mapped_column(String(128), primary_key=True)
    username: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(256))
    email: Mapped[str | None] = mapped_column(String(256))


class GroupModel(Base):
    """Organization group model (composite PK on organization + group_id)."""

    __tablename__ = "groups"
    __table_args__ = (Index("ix_groups_organization_name", "organization", "name"),)

    organization: Mapped[str] = mapped_column(String(128), primary_key=True)
    group_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(128))
    description: Mapped[str | None] = mapped_column(Text)
    role: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    roles: Mapped[list["GroupRoleModel"]] = relationship(
        "GroupRoleModel",
        back_populates="group",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    members: Mapped[list["GroupMemberModel"]] = relationship(
        "GroupMemberModel",
        back_populates="group",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class GroupRoleModel(Base):
    """Additional role granted by a group."""

    __tablename__ = "group_roles"
    __table_args__ = (
        ForeignKeyConstraint(
            ["organization", "group_id"],
            ["groups.organization", "groups.group_id"],
            ondelete="CASCADE",
        ),
    )

    organization: Mapped[str] = mapped_column(String(128), primary_key=True)
    group_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    role: Mapped[str] = mapped_column(String(255), primary_key=True)

    group: Mapped["GroupModel"] = relationship("GroupModel", back_populates="roles")


class GroupMemberModel(Base):
    """Group membership by username."""

    __tablename__ = "group_members"
    __table_args__ = (
        ForeignKeyConstraint(
            ["organization", "group_id"],
            ["groups.organization", "groups.group_id"],
            ondelete="CASCADE",
        ),
        Index("ix_group_members_username", "organization", "username"),
    )

    organization: Mapped[str] = mapped_column(String(128), primary_key=True)
    group_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    username: Mapped[str] = mapped_column(String(128), primary_key=True)

    group: Mapped["GroupModel"] = relationship("GroupModel", back_populates="members")
