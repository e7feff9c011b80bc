"""
Tests for the SQL progress store upserts.
"""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy import func

from app.core.exceptions import StorageError
from app.learning.models import LessonProgress
from app.learning.repositories.progress_store import SqlProgressStore

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _row_count(db_session, user, lesson) -> int:
    return (
        db_session.query(func.count(LessonProgress.id))
        .filter(LessonProgress.user_id == user.id, LessonProgress.lesson_id == lesson.id)
        .scalar()
    )


def test_get_missing_progress(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)

    assert store.get(test_user.id, test_lesson.id) is None


def test_save_position_creates_row(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)

    record = store.save_position(test_user.id, test_lesson.id, 42, False, NOW)

    assert record.lesson_id == test_lesson.id
    assert record.last_position_seconds == 42
    assert record.completed_at is None
    assert store.get(test_user.id, test_lesson.id) == record


def test_repeated_saves_keep_a_single_row(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)

    for position in (10, 20, 30):
        store.save_position(test_user.id, test_lesson.id, position, False, NOW)

    assert _row_count(db_session, test_user, test_lesson) == 1
    assert store.get(test_user.id, test_lesson.id).last_position_seconds == 30


def test_non_completing_save_keeps_completed_at(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)
    store.save_position(test_user.id, test_lesson.id, 290, True, NOW)

    record = store.save_position(
        test_user.id, test_lesson.id, 5, False, NOW + timedelta(minutes=1)
    )

    assert record.last_position_seconds == 5
    assert record.is_completed
    assert record.completed_at.replace(tzinfo=UTC) == NOW


def test_completing_save_restamps_completed_at(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)
    later = NOW + timedelta(minutes=5)
    store.save_position(test_user.id, test_lesson.id, 290, True, NOW)

    record = store.save_position(test_user.id, test_lesson.id, 300, True, later)

    assert record.completed_at.replace(tzinfo=UTC) == later


def test_mark_completed_creates_row_at_position_zero(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)

    record = store.mark_completed(test_user.id, test_lesson.id, NOW)

    assert record.is_completed
    assert record.last_position_seconds == 0


def test_mark_completed_keeps_position(db_session, test_user, test_lesson):
    store = SqlProgressStore(db_session)
    store.save_position(test_user.id, test_lesson.id, 120, False, NOW)

    record = store.mark_completed(test_user.id, test_lesson.id, NOW + timedelta(seconds=1))
    store.mark_completed(test_user.id, test_lesson.id, NOW + timedelta(seconds=2))

    assert record.last_position_seconds == 120
    assert _row_count(db_session, test_user, test_lesson) == 1


def test_completed_lesson_ids(db_session, test_user, first_course_lessons):
    store = SqlProgressStore(db_session)
    a, b, c = first_course_lessons
    store.mark_completed(test_user.id, a.id, NOW)
    store.save_position(test_user.id, b.id, 10, False, NOW)

    completed = store.completed_lesson_ids(test_user.id, [a.id, b.id, c.id])

    assert completed == {a.id}


def test_completed_lesson_ids_empty_input(db_session, test_user):
    store = SqlProgressStore(db_session)

    assert store.completed_lesson_ids(test_user.id, []) == set()


def test_unsupported_dialect_raises_storage_error():
    db = MagicMock()
    db.get_bind.return_value.dialect.name = "mysql"
    store = SqlProgressStore(db)

    with pytest.raises(StorageError) as exc_info:
        store.save_position(uuid.uuid4(), uuid.uuid4(), 10, False, NOW)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == {"operation": "upsert"}
    db.execute.assert_not_called()
