from uuid import UUID

from fastapi import APIRouter, Depends

from app.auth.viewer import Viewer
from app.core.exceptions import ForbiddenError, NotFoundError
from app.learning.dependencies import get_progress_service
from app.learning.schemas import (
    CourseCardResponse,
    CourseOutlineResponse,
    LessonAccessResponse,
)
from app.learning.services.progress_service import ProgressService
from app.subscriptions.dependencies import RequireSubscription

router = APIRouter()


@router.get("/learn/courses", response_model=list[CourseCardResponse])
async def list_courses_for_learning(
    viewer: Viewer = Depends(RequireSubscription()),
    service: ProgressService = Depends(get_progress_service),
) -> list[CourseCardResponse]:
    """List courses with the viewer's unlock and completion state."""
    cards = service.list_courses_for_learning(viewer)
    return [CourseCardResponse.model_validate(card) for card in cards]


@router.get("/learn/courses/{course_id}", response_model=CourseOutlineResponse)
async def get_course_outline(
    course_id: UUID,
    viewer: Viewer = Depends(RequireSubscription()),
    service: ProgressService = Depends(get_progress_service),
) -> CourseOutlineResponse:
    """Course curriculum with locked/unlocked modules and lessons."""
    outline = service.get_course_outline(viewer, course_id)
    if outline is None:
        raise NotFoundError("Course not found", resource="course")
    if not outline.is_unlocked:
        raise ForbiddenError(
            "Complete the previous course in this track first",
            details={"reason": "course_locked", "trackId": str(outline.track_id)},
        )

    return CourseOutlineResponse.model_validate(outline)


@router.get(
    "/learn/courses/{course_id}/lessons/{lesson_id}", response_model=LessonAccessResponse
)
async def get_lesson_for_learning(
    course_id: UUID,
    lesson_id: UUID,
    viewer: Viewer = Depends(RequireSubscription()),
    service: ProgressService = Depends(get_progress_service),
) -> LessonAccessResponse:
    """Playback details for an unlocked lesson."""
    access = service.get_lesson_access(viewer, course_id, lesson_id)
    if access is None:
        raise NotFoundError("Lesson not found", resource="lesson")
    if not access.course_unlocked:
        raise ForbiddenError(
            "Complete the previous course in this track first",
            details={"reason": "course_locked"},
        )
    if not access.lesson_unlocked:
        raise ForbiddenError(
            "Complete the previous lesson first",
            details={
                "reason": "lesson_locked",
                "previousLessonId": str(access.previous_lesson_id)
                if access.previous_lesson_id
                else None,
            },
        )

    return LessonAccessResponse.model_validate(access)
