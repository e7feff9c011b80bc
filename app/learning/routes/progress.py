from uuid import UUID

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_viewer
from app.auth.viewer import Viewer
from app.content.repository import LessonRef
from app.core.exceptions import NotFoundError
from app.learning.dependencies import get_progress_service, get_visible_lesson
from app.learning.schemas import (
    CourseProgressResponse,
    LessonProgressResponse,
    ProgressUpdateRequest,
)
from app.learning.services.progress_service import ProgressService

router = APIRouter()


@router.get("/learning/progress/lessons/{lesson_id}", response_model=LessonProgressResponse)
async def get_lesson_progress(
    lesson_id: UUID,
    viewer: Viewer = Depends(get_current_viewer),
    service: ProgressService = Depends(get_progress_service),
) -> LessonProgressResponse:
    """Get the saved position for resuming a lesson."""
    progress = service.get_lesson_progress(viewer, lesson_id)
    if progress is None:
        return LessonProgressResponse(lesson_id=lesson_id)

    return LessonProgressResponse.model_validate(progress)


@router.patch("/learning/progress/lessons/{lesson_id}", response_model=LessonProgressResponse)
async def update_lesson_progress(
    request: ProgressUpdateRequest,
    viewer: Viewer = Depends(get_current_viewer),
    lesson: LessonRef = Depends(get_visible_lesson),
    service: ProgressService = Depends(get_progress_service),
) -> LessonProgressResponse:
    """Save the playback position; completes the lesson at 90% or in the last 30 seconds."""
    progress = service.save_lesson_progress(
        viewer,
        lesson.lesson_id,
        position_seconds=request.position_seconds,
        duration_seconds=request.duration_seconds,
    )

    return LessonProgressResponse.model_validate(progress)


@router.post(
    "/learning/progress/lessons/{lesson_id}/complete",
    response_model=LessonProgressResponse,
)
async def mark_lesson_complete(
    viewer: Viewer = Depends(get_current_viewer),
    lesson: LessonRef = Depends(get_visible_lesson),
    service: ProgressService = Depends(get_progress_service),
) -> LessonProgressResponse:
    """Manually mark a lesson as complete."""
    progress = service.mark_lesson_complete(viewer, lesson.lesson_id)

    return LessonProgressResponse.model_validate(progress)


@router.get("/learning/progress/courses/{course_id}", response_model=CourseProgressResponse)
async def get_course_progress(
    course_id: UUID,
    viewer: Viewer = Depends(get_current_viewer),
    service: ProgressService = Depends(get_progress_service),
) -> CourseProgressResponse:
    """Get completed/total lesson counts for a course, overall and per module."""
    progress = service.get_course_progress(viewer, course_id)
    if progress is None:
        raise NotFoundError("Course not found", resource="course")

    return CourseProgressResponse.model_validate(progress)
