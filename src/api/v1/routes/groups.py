"""Group API routes."""

from typing import Iterable

from fastapi import APIRouter, Depends, Form, Query, Request, Response, status

from api.v1.dependencies import (
    get_index_service,
    get_search_index,
    get_user_directory_service,
)
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.group import (
    GroupCreatedResponse,
    GroupDetailResponse,
    GroupListResponse,
    GroupMemberResponse,
    GroupSummaryResponse,
)
from core.config import settings
from core.exceptions import GroupNotFoundError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.group import Group
from domain.services.index_service import IndexService
from domain.services.user_directory_service import UserDirectoryService
from infrastructure.search.group_search_index import SQLAlchemyGroupSearchIndex

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)


@router.get(
    "/groups.json",
    response_model=GroupListResponse,
    summary="List groups",
    responses={
        200: {"description": "The groups of the current user's organization"},
        400: {"model": ErrorResponse, "description": "Unknown sort order"},
        500: {"model": ErrorResponse, "description": "Search index unavailable"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_groups(
    request: Request,
    filter: str | None = Query(
        None,
        description="Filters formatted as 'filter1:value1,filter2:value2'",
    ),
    sort: str | None = Query(
        None,
        description="NAME, DESCRIPTION or ROLE. Add '_DESC' to reverse the order (e.g. NAME_DESC).",
    ),
    offset: int = Query(0, description="Index of the first group to return"),
    limit: int = Query(
        settings.default_list_limit,
        description="The maximum number of groups to return",
    ),
    index_service: IndexService = Depends(get_index_service),
    search_index: SQLAlchemyGroupSearchIndex = Depends(get_search_index),
    directory: UserDirectoryService = Depends(get_user_directory_service),
) -> GroupListResponse:
    """Get a page of groups of the current organization."""
    results = await index_service.get_groups(filter, limit, offset, sort, search_index)

    names = await directory.resolve_display_names(
        username for group in results.items for username in group.members
    )
    data = [
        GroupSummaryResponse(
            id=group.identifier,
            name=group.name,
            description=group.description,
            role=group.role,
            users=_members_to_response(group.members, names),
        )
        for group in results.items
    ]
    return GroupListResponse(
        results=data,
        count=len(data),
        offset=results.offset,
        limit=results.limit,
        total=results.hit_count,
    )


@router.get(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Get a single group",
    responses={
        200: {"description": "The group"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_group(
    request: Request,
    group_id: str,
    index_service: IndexService = Depends(get_index_service),
    search_index: SQLAlchemyGroupSearchIndex = Depends(get_search_index),
    directory: UserDirectoryService = Depends(get_user_directory_service),
) -> GroupDetailResponse:
    """Get a group with its roles and members."""
    group = await index_service.get_group(group_id, search_index)
    if group is None:
        raise GroupNotFoundError(group_id)

    return await _build_detail_response(group, directory)


@router.post(
    "/",
    response_model=GroupCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {"description": "Group created"},
        400: {"model": ErrorResponse, "description": "Name blank or too long"},
        409: {"model": ErrorResponse, "description": "A group with this name already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_group(
    request: Request,
    response: Response,
    name: str | None = Form(None, description="The group name"),
    description: str | None = Form(None, description="The group description"),
    roles: str | None = Form(None, description="Comma separated additional group roles"),
    users: str | None = Form(None, description="Comma separated group members"),
    index_service: IndexService = Depends(get_index_service),
) -> GroupCreatedResponse:
    """Create a group. The identifier is derived from the name."""
    group = await index_service.create_group(name, description, roles, users)
    response.headers["Location"] = str(request.url_for("get_group", group_id=group.identifier))
    return GroupCreatedResponse(id=group.identifier)


@router.put(
    "/{group_id}",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    summary="Update a group",
    responses={
        200: {"description": "Group updated"},
        400: {"model": ErrorResponse, "description": "Name blank or too long"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_group(
    request: Request,
    group_id: str,
    name: str | None = Form(None, description="The group name"),
    description: str | None = Form(None, description="The group description"),
    roles: str | None = Form(None, description="Comma separated additional group roles"),
    users: str | None = Form(None, description="Comma separated group members"),
    index_service: IndexService = Depends(get_index_service),
) -> Response:
    """Replace name, description, roles and members of a group."""
    await index_service.update_group(group_id, name, description, roles, users)
    return Response(status_code=status.HTTP_200_OK)


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    summary="Remove a group",
    responses={
        200: {"description": "Group deleted"},
        404: {"model": ErrorResponse, "description": "Group not found"},
        500: {"model": ErrorResponse, "description": "An internal server error occurred"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_group(
    request: Request,
    group_id: str,
    index_service: IndexService = Depends(get_index_service),
) -> Response:
    """Delete a group."""
    await index_service.remove_group(group_id)
    return Response(status_code=status.HTTP_200_OK)


async def _build_detail_response(
    group: Group, directory: UserDirectoryService
) -> GroupDetailResponse:
    """Convert domain entity to the detail schema."""
    names = await directory.resolve_display_names(group.members)
    return GroupDetailResponse(
        id=group.identifier,
        name=group.name,
        description=group.description,
        role=group.role,
        roles=sorted(group.roles),
        users=_members_to_response(group.members, names),
    )


def _members_to_response(
    members: Iterable[str], names: dict[str, str]
) -> list[GroupMemberResponse]:
    """Pair every username with its display name, falling back to the username."""
    return [
        GroupMemberResponse(username=username, name=names.get(username) or username)
        for username in sorted(members)
    ]
