from uuid import UUID

from fastapi import Depends
from sqlalchemy.orm import Session

from app.content.repository import LessonRef, SqlContentRepository
from app.core.exceptions import NotFoundError
from app.db.session import get_db
from app.learning.repositories.progress_store import SqlProgressStore
from app.learning.services.progress_service import ProgressService


def get_progress_service(db: Session = Depends(get_db)) -> ProgressService:
    return ProgressService(content=SqlContentRepository(db), store=SqlProgressStore(db))


def get_visible_lesson(
    lesson_id: UUID,
    service: ProgressService = Depends(get_progress_service),
) -> LessonRef:
    """Resolve a published lesson from the path or fail with 404."""
    lesson = service.get_visible_lesson(lesson_id)
    if lesson is None:
        raise NotFoundError("Lesson not found", resource="lesson")
    return lesson
