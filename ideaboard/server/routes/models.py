"""Request/response models shared by the board routes.

JSON field names are camelCase (canvasX, groupId, ...); Python attributes stay
snake_case.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ideaboard.storage.data_models.group import Group, TodoSection
from ideaboard.storage.data_models.idea import Idea

Priority = Literal['low', 'medium', 'high', 'critical']


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IdeaResponse(ApiModel):
    """Response model for an idea."""
    id: str
    user_id: str
    title: str
    description: str | None
    priority: str
    group_id: str | None
    canvas_x: float
    canvas_y: float
    completed: bool
    created_at: str
    updated_at: str


class GroupResponse(ApiModel):
    """Response model for a group."""
    id: str
    user_id: str
    name: str
    color: str
    created_at: str
    updated_at: str


class GroupWithIdeasResponse(GroupResponse):
    ideas: list[IdeaResponse]


class TodoSectionResponse(ApiModel):
    id: str
    user_id: str
    group_id: str
    title: str
    position: int
    created_at: str


def _iso(value: datetime | None) -> str:
    return (value or datetime.now(timezone.utc)).isoformat()


def idea_to_response(idea: Idea) -> IdeaResponse:
    return IdeaResponse(
        id=idea.id,
        user_id=idea.user_id,
        title=idea.title,
        description=idea.description,
        priority=idea.priority,
        group_id=idea.group_id,
        canvas_x=idea.canvas_x,
        canvas_y=idea.canvas_y,
        completed=idea.completed,
        created_at=_iso(idea.created_at),
        updated_at=_iso(idea.updated_at),
    )


def group_to_response(group: Group) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        user_id=group.user_id,
        name=group.name,
        color=group.color,
        created_at=_iso(group.created_at),
        updated_at=_iso(group.updated_at),
    )


def section_to_response(section: TodoSection) -> TodoSectionResponse:
    return TodoSectionResponse(
        id=section.id,
        user_id=section.user_id,
        group_id=section.group_id,
        title=section.title,
        position=section.position,
        created_at=_iso(section.created_at),
    )
