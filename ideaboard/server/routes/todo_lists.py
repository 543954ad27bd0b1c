"""API routes for todo sections and the todo-list overview."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.server.dependencies import get_groups_store, get_ideas_store
from ideaboard.server.routes.models import (
    ApiModel,
    GroupResponse,
    TodoSectionResponse,
    group_to_response,
    section_to_response,
)
from ideaboard.storage.data_models.idea import PRIORITIES
from ideaboard.storage.groups import GroupsStore
from ideaboard.storage.ideas import IdeasStore

app = APIRouter(prefix='/api')


class CreateTodoSectionRequest(ApiModel):
    group_id: str
    title: str
    position: int | None = None


class UpdateTodoSectionRequest(ApiModel):
    title: str | None = None
    position: int | None = None


class TodoListSummary(ApiModel):
    """Progress of one group for the todo grid."""
    group: GroupResponse
    total: int
    completed: int
    priorities: dict[str, int]


@app.get(
    '/todo-lists',
    response_model=list[TodoListSummary],
    responses={
        200: {'description': 'One summary per group'},
        500: {'description': 'Error loading todo lists'},
    },
)
async def list_todo_lists(
    groups_store: GroupsStore = Depends(get_groups_store),
    ideas_store: IdeasStore = Depends(get_ideas_store),
) -> list[TodoListSummary]:
    try:
        groups = await groups_store.load_groups()
        ideas = await ideas_store.load_ideas()
        summaries = []
        for group in groups:
            members = [idea for idea in ideas if idea.group_id == group.id]
            priorities = {p: 0 for p in PRIORITIES}
            for idea in members:
                priorities[idea.priority] = priorities.get(idea.priority, 0) + 1
            summaries.append(
                TodoListSummary(
                    group=group_to_response(group),
                    total=len(members),
                    completed=sum(1 for idea in members if idea.completed),
                    priorities=priorities,
                )
            )
        return summaries
    except Exception as e:
        logger.error(f'Error loading todo lists: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading todo lists',
        )


@app.get('/groups/{group_id}/todo-sections', response_model=list[TodoSectionResponse])
async def list_todo_sections(
    group_id: str,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> list[TodoSectionResponse]:
    """Get the todo sections of a group ordered by position."""
    try:
        if not await groups_store.get_group(group_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Group {group_id} not found',
            )
        sections = await groups_store.list_sections(group_id)
        return [section_to_response(section) for section in sections]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error loading todo sections of group {group_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error loading todo sections',
        )


@app.post(
    '/todo-sections',
    response_model=TodoSectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Todo section created successfully'},
        400: {'description': 'Invalid request'},
        404: {'description': 'Group not found'},
    },
)
async def create_todo_section(
    request_body: CreateTodoSectionRequest,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> TodoSectionResponse:
    try:
        title = request_body.title.strip()
        if not title:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Section title cannot be empty',
            )
        if not await groups_store.get_group(request_body.group_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Group {request_body.group_id} not found',
            )
        section = await groups_store.create_section(
            request_body.group_id, title, request_body.position
        )
        return section_to_response(section)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error creating todo section: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error creating todo section',
        )


@app.put('/todo-sections/{section_id}', response_model=TodoSectionResponse)
async def update_todo_section(
    section_id: str,
    request_body: UpdateTodoSectionRequest,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> TodoSectionResponse:
    try:
        section = await groups_store.get_section(section_id)
        if not section:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Todo section {section_id} not found',
            )
        if request_body.title is not None:
            title = request_body.title.strip()
            if not title:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail='Section title cannot be empty',
                )
            section.title = title
        if request_body.position is not None:
            section.position = request_body.position

        await groups_store.update_section(section)
        return section_to_response(section)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error updating todo section {section_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error updating todo section',
        )


@app.delete('/todo-sections/{section_id}', status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo_section(
    section_id: str,
    groups_store: GroupsStore = Depends(get_groups_store),
) -> Response:
    try:
        if not await groups_store.delete_section(section_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f'Todo section {section_id} not found',
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f'Error deleting todo section {section_id}: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error deleting todo section',
        )
