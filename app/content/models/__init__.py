"""Content hierarchy models."""

from app.content.models.course import Course, Lesson, LessonType, Module, School, Track

__all__ = [
    "School",
    "Track",
    "Course",
    "Module",
    "Lesson",
    "LessonType",
]
