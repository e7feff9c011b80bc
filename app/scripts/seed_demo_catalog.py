"""
Seed script for the demo learning catalog.

Creates a school with one track of two courses, each with modules and lessons,
plus a learner account holding an all-access entitlement. Can be run multiple
times - skips an existing catalog.

Usage:
    python app/scripts/seed_demo_catalog.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.content.models import Course, Lesson, LessonType, Module, School, Track
from app.db.session import get_db
from app.subscriptions.models import Entitlement

DEMO_SCHOOL_SLUG = "demo-school"
DEMO_LEARNER_EMAIL = "learner@example.com"

# (course slug, course title, [(module title, [(lesson title, type, seconds)])])
DEMO_COURSES = [
    (
        "demo-foundations",
        "Foundations",
        [
            (
                "Getting started",
                [
                    ("Welcome", LessonType.VIDEO, 180),
                    ("How lessons unlock", LessonType.VIDEO, 240),
                ],
            ),
            (
                "Working habits",
                [
                    ("Planning a week", LessonType.VIDEO, 420),
                    ("Checklist", LessonType.TEXT, 0),
                ],
            ),
        ],
    ),
    (
        "demo-next-steps",
        "Next Steps",
        [
            (
                "Going further",
                [
                    ("Review", LessonType.VIDEO, 300),
                    ("Final project", LessonType.VIDEO, 600),
                ],
            ),
        ],
    ),
]


def seed_demo_catalog(db: Session) -> Track | None:
    """Seed the demo school, track, courses and learner. Returns the track, or None if skipped."""

    existing_school = db.query(School).filter(School.slug == DEMO_SCHOOL_SLUG).first()
    if existing_school:
        print("⏭️  Demo catalog already exists. Skipping.")
        return None

    print("📚 Creating demo catalog...")

    school = School(slug=DEMO_SCHOOL_SLUG, title="Demo School", is_published=True)
    db.add(school)
    db.flush()

    track = Track(
        school_id=school.id,
        slug="demo-track",
        title="Demo Track",
        description="Two courses taken in order",
        is_published=True,
    )
    db.add(track)
    db.flush()
    print(f"✅ Created track: {track.title}")

    playback_counter = 0
    for course_order, (slug, title, modules) in enumerate(DEMO_COURSES):
        course = Course(
            track_id=track.id,
            slug=slug,
            title=title,
            summary=f"{title} of the demo track",
            is_published=True,
            sort_order=course_order,
        )
        db.add(course)
        db.flush()
        print(f"✅ Created course: {course.title} (slug: {course.slug})")

        for module_order, (module_title, lessons) in enumerate(modules):
            module = Module(course_id=course.id, title=module_title, sort_order=module_order)
            db.add(module)
            db.flush()

            for lesson_order, (lesson_title, lesson_type, seconds) in enumerate(lessons):
                playback_id = None
                if lesson_type == LessonType.VIDEO:
                    playback_counter += 1
                    playback_id = f"PLACEHOLDER_MUX_ID_{playback_counter:03d}"
                db.add(
                    Lesson(
                        module_id=module.id,
                        title=lesson_title,
                        lesson_type=lesson_type,
                        mux_playback_id=playback_id,
                        duration_seconds=seconds,
                        is_published=True,
                        sort_order=lesson_order,
                    )
                )

    learner = db.query(User).filter(User.email == DEMO_LEARNER_EMAIL).first()
    if learner is None:
        learner = User(email=DEMO_LEARNER_EMAIL, name="Demo Learner", role="learner")
        db.add(learner)
        db.flush()
        db.add(Entitlement(user_id=learner.id))
        print(f"✅ Created learner: {learner.email} (all access)")

    db.commit()

    print("\n" + "=" * 60)
    print("🎉 Demo catalog seeding complete!")
    print(f"   Track: {track.title}")
    print(f"   Courses: {len(DEMO_COURSES)}")
    print("=" * 60)

    return track


def main() -> None:
    """Main entry point."""
    print("=" * 60)
    print("🌱 Demo Catalog Seeding Script")
    print("=" * 60)
    print()

    db = next(get_db())
    try:
        seed_demo_catalog(db)
    except Exception as e:
        print(f"\n❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
