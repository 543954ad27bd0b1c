"""API routes for managing groups."""

import re

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import field_validator

from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.server.dependencies import get_groups_store, get_ideas_store
from ideaboard.server.routes.models import (
    ApiModel,
    GroupResponse,
    GroupWithIdeasResponse,
    IdeaResponse,
    group_to_response,
    idea_to_response,
)
from ideaboard.storage.groups import GroupsStore
from ideaboard.storage.ideas import IdeasStore

app = APIRouter(prefix='/api')

COLOR_PATTERNS = [
    re.compile(r'^#[0-9A-Fa-f]{6}$'),
    re.compile(r'^#[0-9A-Fa-f]{3}$'),
    re.compile(r'^rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)$'),
    re.compile(r'^rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*[\d.]+\s*\)$'),
    re.compile(r'^hsl\(\s*\d+\s*,\s*\d+%\s*,\s*\d+%\s*\)$'),
    re.compile(r'^hsla\(\s*\d+\s*,\s*\d+%\s*,\s*\d+%\s*,\s*[\d.]+\s*\)$'),
]

NAMED_COLORS = frozenset({
    'red', 'blue', 'green', 'yellow', 'orange', 'purple', 'pink', 'cyan',
    'magenta', 'lime', 'indigo', 'violet', 'brown', 'black', 'white', 'gray',
    'grey', 'maroon', 'navy', 'olive', 'teal', 'silver', 'aqua', 'fuchsia',
    'emerald',
})


def is_valid_color(color: str) -> bool:
    """Whether color is a hex, rgb(a), hsl(a) or basic named CSS colour."""
    if color.lower() in NAMED_COLORS:
        return True
    return any(pattern.match(color) for pattern in COLOR_PATTERNS)


def _check_color(color: str) -> str:
    color = color.strip()
    if not is_valid_color(color):
        raise ValueError('Color must be a valid CSS color (hex, rgb, hsl, or named color)')
    return color


# Request/Response Models

class CreateGroupRequest(ApiModel):
    """Request model for creating a group."""
    name: str
    color: str

    @field_validator('color')
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _check_color(value)


class UpdateGroupRequest(ApiModel):
    """Request model for updating a group."""
    name: str | None = None
    color: str | None = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        return None if value is None else _check_color(value)


def _not_found(group_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f'Group {group_id} not found',
    )


# Routes

@app.get(
    '/groups',
    response_model=list[GroupResponse],
    responses={
        200: {'description': 'All groups of the current user'},
        500: {'description': 'Error loading groups'},
    },
)
async def list_groups(
    groups_store: GroupsStore = Depends(get_groups_store),
) -> list[GroupResponse]:
    try:
        groups = await groups_store.load_groups()
        return [group_to_response(group) for group in groups]
    except Exception as e:
        logger.error(f'Error loading groups: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading groups',
        )


@app.get('/groups/{group_id}', response_model=GroupResponse)
async def get_group(
    group_id: str,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> GroupResponse:
    try:
        group = await groups_store.get_group(group_id)
        if not group:
            raise _not_found(group_id)
        return group_to_response(group)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error loading group {group_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading group',
        )


@app.get('/groups/{group_id}/ideas', response_model=list[IdeaResponse])
async def list_group_ideas(
    group_id: str,
    groups_store: GroupsStore = Depends(get_groups_store),
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> list[IdeaResponse]:
    try:
        if not await groups_store.get_group(group_id):
            raise _not_found(group_id)
        ideas = await ideas_store.get_ideas_by_group(group_id)
        return [idea_to_response(idea) for idea in ideas]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error loading ideas of group {group_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading ideas',
        )


@app.get('/groups/{group_id}/with-ideas', response_model=GroupWithIdeasResponse)
async def get_group_with_ideas(
    group_id: str,
    groups_store: GroupsStore = Depends(get_groups_store),
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> GroupWithIdeasResponse:
    """Get a group together with the ideas assigned to it."""
    try:
        group = await groups_store.get_group(group_id)
        if not group:
            raise _not_found(group_id)
        ideas = await ideas_store.get_ideas_by_group(group_id)
        return GroupWithIdeasResponse(
            **group_to_response(group).model_dump(),
            ideas=[idea_to_response(idea) for idea in ideas],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error loading group {group_id} with ideas: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading group',
        )


@app.post(
    '/groups',
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Group created successfully'},
        400: {'description': 'Invalid request'},
        500: {'description': 'Error creating group'},
    },
)
async def create_group(
    request_body: CreateGroupRequest,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> GroupResponse:
    try:
        name = request_body.name.strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Group name cannot be empty',
            )
        group = await groups_store.create_group(name, request_body.color)
        return group_to_response(group)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error creating group: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error creating group',
        )


@app.put(
    '/groups/{group_id}',
    response_model=GroupResponse,
    responses={
        200: {'description': 'Group updated successfully'},
        404: {'description': 'Group not found'},
        500: {'description': 'Error updating group'},
    },
)
async def update_group(
    group_id: str,
    request_body: UpdateGroupRequest,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> GroupResponse:
    try:
        group = await groups_store.get_group(group_id)
        if not group:
            raise _not_found(group_id)

        if request_body.name is not None:
            name = request_body.name.strip()
            if not name:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail='Group name cannot be empty',
                )
            group.name = name
        if request_body.color is not None:
            group.color = request_body.color

        if not await groups_store.update_group(group):
            raise _not_found(group_id)
        return group_to_response(group)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error updating group {group_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error updating group',
        )


@app.delete(
    '/groups/{group_id}',
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {'description': 'Group deleted; its ideas are now unassigned'},
        404: {'description': 'Group not found'},
        500: {'description': 'Error deleting group'},
    },
)
async def delete_group(
    group_id: str,
    groups_store: GroupsStore = Depends(get_groups_store),
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> Response:
    """Delete a group. Its ideas stay on the board without a group."""
    try:
        if not await groups_store.get_group(group_id):
            raise _not_found(group_id)
        await ideas_store.unassign_group(group_id)
        await groups_store.delete_group(group_id)
        logger.info(f'Deleted group {group_id}')
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error deleting group {group_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error deleting group',
        )
