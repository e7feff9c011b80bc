"""Learning progress models."""

from app.learning.models.progress import LessonProgress

__all__ = ["LessonProgress"]
