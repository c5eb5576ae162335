"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.dependencies.auth import CurrentUser
from core.config import settings
from domain.entities.user import User
from domain.services.index_service import IndexService
from domain.services.security_service import SecurityService
from domain.services.user_directory_service import UserDirectoryService
from infrastructure.database.session import get_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.search.group_search_index import SQLAlchemyGroupSearchIndex


def get_uow_factory(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@lru_cache
def _search_index_for(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLAlchemyGroupSearchIndex:
    return SQLAlchemyGroupSearchIndex(session_factory)


def get_search_index(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SQLAlchemyGroupSearchIndex:
    """Get the group search index bound to the session factory."""
    return _search_index_for(session_factory)


def get_security_service(user: CurrentUser) -> SecurityService:
    """Build the security context of the current request."""
    return SecurityService(
        User(
            username=user.username,
            organization=user.organization,
            name=user.name,
            email=user.email,
            roles=set(user.roles),
        )
    )


def get_index_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
    security_service: SecurityService = Depends(get_security_service),
) -> IndexService:
    """Get Index service instance for the current request."""
    return IndexService(
        uow_factory,
        security_service,
        default_limit=settings.default_list_limit,
        name_max_length=settings.group_name_max_length,
    )


def get_user_directory_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
    security_service: SecurityService = Depends(get_security_service),
) -> UserDirectoryService:
    """Get User directory service instance for the current request."""
    return UserDirectoryService(uow_factory, security_service)
