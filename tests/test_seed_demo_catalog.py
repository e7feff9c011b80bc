from app.auth.models.user import User
from app.content.models import Course, Lesson
from app.content.repository import SqlContentRepository
from app.scripts.seed_demo_catalog import DEMO_LEARNER_EMAIL, seed_demo_catalog
from app.subscriptions.services.access_service import AccessService


def test_seed_demo_catalog_creates_track_and_learner(db_session):
    track = seed_demo_catalog(db_session)

    course_ids = SqlContentRepository(db_session).list_track_course_ids(track.id)
    assert len(course_ids) == 2

    first = db_session.query(Course).filter(Course.id == course_ids[0]).one()
    assert first.slug == "demo-foundations"

    learner = db_session.query(User).filter(User.email == DEMO_LEARNER_EMAIL).one()
    assert AccessService.has_active_subscription(learner.id, db_session) is True


def test_seed_demo_catalog_text_lessons_have_no_playback(db_session):
    seed_demo_catalog(db_session)

    checklist = db_session.query(Lesson).filter(Lesson.title == "Checklist").one()
    assert checklist.mux_playback_id is None


def test_seed_demo_catalog_is_idempotent(db_session):
    seed_demo_catalog(db_session)

    assert seed_demo_catalog(db_session) is None
