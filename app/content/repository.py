"""Read-only access to the content hierarchy for the learning core.

The learning services only see the plain structures defined here, so they
can run against the SQL repository in production and an in-memory fake in
tests.
"""

from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.content.models import Course, Lesson, Module, Track
from app.content.ordering import explicit_order_by
from app.core.repository import BaseRepository


@dataclass(frozen=True)
class LessonNode:
    lesson_id: UUID
    title: str
    lesson_type: str = "video"
    duration_seconds: int = 0
    mux_playback_id: str | None = None


@dataclass(frozen=True)
class ModuleNode:
    module_id: UUID
    title: str
    lessons: list[LessonNode] = field(default_factory=list)

    @property
    def lesson_ids(self) -> list[UUID]:
        return [lesson.lesson_id for lesson in self.lessons]


@dataclass(frozen=True)
class CourseLessonTree:
    """A course with its modules and published lessons, both in course order."""

    course_id: UUID
    title: str
    track_id: UUID | None = None
    is_visible: bool = True
    modules: list[ModuleNode] = field(default_factory=list)

    @property
    def ordered_lesson_ids(self) -> list[UUID]:
        return [lesson_id for module in self.modules for lesson_id in module.lesson_ids]

    def find_lesson(self, lesson_id: UUID) -> LessonNode | None:
        for module in self.modules:
            for lesson in module.lessons:
                if lesson.lesson_id == lesson_id:
                    return lesson
        return None


@dataclass(frozen=True)
class CourseSummary:
    course_id: UUID
    title: str
    track_id: UUID | None = None
    track_title: str | None = None
    summary: str | None = None


@dataclass(frozen=True)
class LessonRef:
    lesson_id: UUID
    course_id: UUID
    is_published: bool


class ContentRepository(Protocol):
    def get_course_lesson_tree(self, course_id: UUID) -> CourseLessonTree | None:
        """Return the ordered module/lesson tree, or None if the course does not exist."""
        ...

    def list_track_course_ids(self, track_id: UUID) -> list[UUID]:
        """Return ids of the published courses in a track, in track order."""
        ...

    def list_published_courses(self) -> list[CourseSummary]:
        """Return every visible course in catalog order."""
        ...

    def find_lesson(self, lesson_id: UUID) -> LessonRef | None:
        """Locate a lesson and the course it belongs to."""
        ...


class SqlContentRepository(BaseRepository[Course]):
    def __init__(self, db: Session):
        super().__init__(db, Course)

    def get_course_lesson_tree(self, course_id: UUID) -> CourseLessonTree | None:
        course = self.get_by_id(course_id)
        if course is None:
            return None

        with self.storage_errors("get_course_lesson_tree"):
            modules = (
                self.db.query(Module)
                .filter(Module.course_id == course_id)
                .order_by(*explicit_order_by(Module))
                .all()
            )
            lessons = (
                self.db.query(Lesson)
                .filter(
                    Lesson.module_id.in_([m.id for m in modules]),
                    Lesson.is_published == True,  # noqa: E712
                )
                .order_by(*explicit_order_by(Lesson))
                .all()
            )
            track = course.track

        lessons_by_module: dict[UUID, list[LessonNode]] = {m.id: [] for m in modules}
        for lesson in lessons:
            lessons_by_module[lesson.module_id].append(
                LessonNode(
                    lesson_id=lesson.id,
                    title=lesson.title,
                    lesson_type=lesson.lesson_type.value,
                    duration_seconds=lesson.duration_seconds,
                    mux_playback_id=lesson.mux_playback_id,
                )
            )

        return CourseLessonTree(
            course_id=course.id,
            title=course.title,
            track_id=course.track_id,
            is_visible=course.is_published and (track is None or track.is_published),
            modules=[
                ModuleNode(module_id=m.id, title=m.title, lessons=lessons_by_module[m.id])
                for m in modules
            ],
        )

    def list_track_course_ids(self, track_id: UUID) -> list[UUID]:
        with self.storage_errors("list_track_course_ids"):
            rows = (
                self.db.query(Course.id)
                .filter(Course.track_id == track_id, Course.is_published == True)  # noqa: E712
                .order_by(*explicit_order_by(Course))
                .all()
            )
        return [row[0] for row in rows]

    def list_published_courses(self) -> list[CourseSummary]:
        with self.storage_errors("list_published_courses"):
            rows = (
                self.db.query(Course, Track.title)
                .outerjoin(Track, Course.track_id == Track.id)
                .filter(
                    Course.is_published == True,  # noqa: E712
                    or_(Course.track_id.is_(None), Track.is_published == True),  # noqa: E712
                )
                .order_by(*explicit_order_by(Course))
                .all()
            )
        return [
            CourseSummary(
                course_id=course.id,
                title=course.title,
                track_id=course.track_id,
                track_title=track_title,
                summary=course.summary,
            )
            for course, track_title in rows
        ]

    def find_lesson(self, lesson_id: UUID) -> LessonRef | None:
        with self.storage_errors("find_lesson"):
            row = (
                self.db.query(Lesson.id, Lesson.is_published, Module.course_id)
                .join(Module, Lesson.module_id == Module.id)
                .filter(Lesson.id == lesson_id)
                .first()
            )
        if row is None:
            return None
        return LessonRef(lesson_id=row[0], course_id=row[2], is_published=row[1])
