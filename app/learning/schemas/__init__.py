"""Learning API schemas."""

from app.learning.schemas.learn import (
    CourseCardResponse,
    CourseOutlineResponse,
    LessonAccessResponse,
    LessonOutlineResponse,
    ModuleOutlineResponse,
)
from app.learning.schemas.progress import (
    CourseProgressResponse,
    LessonProgressResponse,
    ModuleProgressResponse,
    ProgressUpdateRequest,
)

__all__ = [
    "CourseCardResponse",
    "CourseOutlineResponse",
    "CourseProgressResponse",
    "LessonAccessResponse",
    "LessonOutlineResponse",
    "LessonProgressResponse",
    "ModuleOutlineResponse",
    "ModuleProgressResponse",
    "ProgressUpdateRequest",
]
