from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.datetime_utils import UTCDatetime

PlaybackSeconds = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class CamelModel(BaseModel):
    """Schemas exchanged with the player UI use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ProgressUpdateRequest(CamelModel):
    position_seconds: PlaybackSeconds
    duration_seconds: PlaybackSeconds | None = None


class LessonProgressResponse(CamelModel):
    lesson_id: UUID
    last_position_seconds: int = 0
    completed_at: UTCDatetime | None = None


class ModuleProgressResponse(CamelModel):
    module_id: UUID
    title: str
    completed_count: int
    total_count: int
    percent: float = Field(..., ge=0, le=100)


class CourseProgressResponse(CamelModel):
    course_id: UUID
    completed_count: int
    total_count: int
    progress_percent: float = Field(..., ge=0, le=100)
    modules: list[ModuleProgressResponse] | None = None
