"""
Database base module - imports all models for Alembic migration detection.

This module imports all SQLAlchemy models to ensure they are registered
with Alembic for automatic migration generation. While the imports appear
unused, they are essential for the migration system to work properly.
"""

from app.auth.models.user import User
from app.content.models import Course, Lesson, Module, School, Track
from app.learning.models.progress import LessonProgress
from app.subscriptions.models import Entitlement, Subscription

# Export all models for Alembic
__all__ = [
    "User",
    "School",
    "Track",
    "Course",
    "Module",
    "Lesson",
    "LessonProgress",
    "Subscription",
    "Entitlement",
]
