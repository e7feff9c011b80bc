from uuid import UUID

from app.core.datetime_utils import UTCDatetime
from app.learning.schemas.progress import CamelModel


class LessonOutlineResponse(CamelModel):
    lesson_id: UUID
    title: str
    lesson_type: str
    duration_seconds: int
    is_unlocked: bool
    is_completed: bool


class ModuleOutlineResponse(CamelModel):
    module_id: UUID
    title: str
    is_unlocked: bool
    completed_count: int
    total_count: int
    percent: float
    lessons: list[LessonOutlineResponse] = []


class CourseOutlineResponse(CamelModel):
    course_id: UUID
    title: str
    track_id: UUID | None = None
    is_unlocked: bool
    completed_count: int
    total_count: int
    progress_percent: float
    modules: list[ModuleOutlineResponse] = []


class LessonAccessResponse(CamelModel):
    """Everything the player needs to start or resume a lesson."""

    lesson_id: UUID
    course_id: UUID
    title: str
    lesson_type: str
    duration_seconds: int
    mux_playback_id: str | None = None
    stream_url: str | None = None
    poster_url: str | None = None
    previous_lesson_id: UUID | None = None
    last_position_seconds: int = 0
    completed_at: UTCDatetime | None = None


class CourseCardResponse(CamelModel):
    course_id: UUID
    title: str
    summary: str | None = None
    track_id: UUID | None = None
    track_title: str | None = None
    is_unlocked: bool
    is_completed: bool
