"""
Test fixtures for learning tests.
"""

import pytest
from sqlalchemy.orm import Session

from tests.utils.factories import create_course_factory, create_track_factory, course_lessons


@pytest.fixture
def test_track(db_session: Session):
    """Create a published track."""
    return create_track_factory(db_session, title="Test Track")


@pytest.fixture
def first_course(db_session: Session, test_track):
    """First course of the track: two modules with two and one lessons."""
    return create_course_factory(
        db_session, track=test_track, title="First Course", sort_order=0, lessons_per_module=[2, 1]
    )


@pytest.fixture
def second_course(db_session: Session, test_track):
    """Second course of the track: one module with one lesson."""
    return create_course_factory(
        db_session, track=test_track, title="Second Course", sort_order=1, lessons_per_module=[1]
    )


@pytest.fixture
def first_course_lessons(db_session: Session, first_course):
    return course_lessons(db_session, first_course)


@pytest.fixture
def second_course_lessons(db_session: Session, second_course):
    return course_lessons(db_session, second_course)


@pytest.fixture
def test_lesson(first_course_lessons):
    """First lesson of the first course (300 seconds)."""
    return first_course_lessons[0]
