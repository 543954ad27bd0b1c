"""API routes for managing ideas on the board."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.server.dependencies import get_groups_store, get_ideas_store
from ideaboard.server.routes.models import (
    ApiModel,
    IdeaResponse,
    Priority,
    idea_to_response,
)
from ideaboard.storage.groups import GroupsStore
from ideaboard.storage.ideas import IdeasStore

app = APIRouter(prefix='/api')


# Request/Response Models

class CreateIdeaRequest(ApiModel):
    """Request model for creating an idea."""
    title: str
    description: str | None = None
    priority: Priority = 'medium'
    group_id: str | None = None
    canvas_x: float = 0.0
    canvas_y: float = 0.0
    completed: bool = False


class UpdateIdeaRequest(ApiModel):
    """Request model for updating an idea.

    Only fields present in the body are applied, so an explicit
    ``"groupId": null`` moves the idea out of its group.
    """
    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    group_id: str | None = None
    canvas_x: float | None = None
    canvas_y: float | None = None
    completed: bool | None = None


class PositionItem(ApiModel):
    id: str
    canvas_x: float
    canvas_y: float


class UpdatePositionsRequest(ApiModel):
    positions: list[PositionItem]


class UpdatePositionsResponse(ApiModel):
    ideas: list[IdeaResponse]
    missing: list[str]


async def _require_group(groups_store: GroupsStore, group_id: str | None) -> None:
    if group_id is None:
        return
    if await groups_store.get_group(group_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Group {group_id} does not exist',
        )


# Routes

@app.get(
    '/ideas',
    response_model=list[IdeaResponse],
    responses={
        200: {'description': 'All ideas, newest first'},
        500: {'description': 'Error loading ideas'},
    },
)
async def list_ideas(
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> list[IdeaResponse]:
    """Get all ideas of the current user."""
    try:
        ideas = await ideas_store.load_ideas()
        return [idea_to_response(idea) for idea in ideas]
    except Exception as e:
        logger.error(f'Error loading ideas: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading ideas',
        )


@app.get('/ideas/unassigned', response_model=list[IdeaResponse])
async def list_unassigned_ideas(
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> list[IdeaResponse]:
    try:
        ideas = await ideas_store.get_unassigned_ideas()
        return [idea_to_response(idea) for idea in ideas]
    except Exception as e:
        logger.error(f'Error loading unassigned ideas: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading ideas',
        )


@app.patch(
    '/ideas/positions',
    response_model=UpdatePositionsResponse,
    responses={
        200: {'description': 'Positions updated; unknown ids listed in missing'},
        500: {'description': 'Error updating positions'},
    },
)
async def update_positions(
    request_body: UpdatePositionsRequest,
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> UpdatePositionsResponse:
    """Move several ideas in a single write."""
    try:
        updated, missing = await ideas_store.update_positions(
            [(p.id, p.canvas_x, p.canvas_y) for p in request_body.positions]
        )
        return UpdatePositionsResponse(
            ideas=[idea_to_response(idea) for idea in updated],
            missing=missing,
        )
    except Exception as e:
        logger.error(f'Error updating idea positions: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error updating positions',
        )


@app.get(
    '/ideas/{idea_id}',
    response_model=IdeaResponse,
    responses={
        200: {'description': 'The idea'},
        404: {'description': 'Idea not found'},
    },
)
async def get_idea(
    idea_id: str,
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> IdeaResponse:
    try:
        idea = await ideas_store.get_idea(idea_id)
        if not idea:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Idea {idea_id} not found',
            )
        return idea_to_response(idea)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error loading idea {idea_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading idea',
        )


@app.post(
    '/ideas',
    response_model=IdeaResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Idea created successfully'},
        400: {'description': 'Invalid request'},
        500: {'description': 'Error creating idea'},
    },
)
async def create_idea(
    request_body: CreateIdeaRequest,
    ideas_store: IdeasStore = Depends(get_ideas_store),
    groups_store: GroupsStore = Depends(get_groups_store),
) -> IdeaResponse:
    """Create a new idea, optionally placed at a canvas position."""
    try:
        title = request_body.title.strip()
        if not title:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Idea title cannot be empty',
            )
        await _require_group(groups_store, request_body.group_id)

        idea = await ideas_store.create_idea(
            title=title,
            description=request_body.description,
            priority=request_body.priority,
            group_id=request_body.group_id,
            canvas_x=request_body.canvas_x,
            canvas_y=request_body.canvas_y,
            completed=request_body.completed,
        )
        return idea_to_response(idea)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error creating idea: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error creating idea',
        )


@app.put(
    '/ideas/{idea_id}',
    response_model=IdeaResponse,
    responses={
        200: {'description': 'Idea updated successfully'},
        400: {'description': 'Invalid request'},
        404: {'description': 'Idea not found'},
        500: {'description': 'Error updating idea'},
    },
)
async def update_idea(
    idea_id: str,
    request_body: UpdateIdeaRequest,
    ideas_store: IdeasStore = Depends(get_ideas_store),
    groups_store: GroupsStore = Depends(get_groups_store),
) -> IdeaResponse:
    """Update an existing idea. Absent fields are left untouched."""
    try:
        fields = request_body.model_fields_set
        changes: dict = {}
        if 'title' in fields:
            title = (request_body.title or '').strip()
            if not title:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail='Idea title cannot be empty',
                )
            changes['title'] = title
        if 'description' in fields:
            changes['description'] = request_body.description
        if 'priority' in fields and request_body.priority is not None:
            changes['priority'] = request_body.priority
        if 'group_id' in fields:
            await _require_group(groups_store, request_body.group_id)
            changes['group_id'] = request_body.group_id
        if request_body.canvas_x is not None:
            changes['canvas_x'] = request_body.canvas_x
        if request_body.canvas_y is not None:
            changes['canvas_y'] = request_body.canvas_y
        if request_body.completed is not None:
            changes['completed'] = request_body.completed

        # Only the sent fields are written so a concurrent position PATCH survives
        updated_idea = await ideas_store.update_fields(idea_id, **changes)
        if not updated_idea:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Idea {idea_id} not found',
            )
        return idea_to_response(updated_idea)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error updating idea {idea_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error updating idea',
        )


@app.delete(
    '/ideas/{idea_id}',
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {'description': 'Idea deleted successfully'},
        404: {'description': 'Idea not found'},
        500: {'description': 'Error deleting idea'},
    },
)
async def delete_idea(
    idea_id: str,
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> Response:
    try:
        deleted = await ideas_store.delete_idea(idea_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Idea {idea_id} not found',
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error deleting idea {idea_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error deleting idea',
        )
