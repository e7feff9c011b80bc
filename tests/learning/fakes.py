"""In-memory stand-ins for the content repository and progress store."""

import uuid
from collections.abc import Collection
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID

from app.content.repository import (
    CourseLessonTree,
    CourseSummary,
    LessonNode,
    LessonRef,
    ModuleNode,
)
from app.learning.repositories.progress_store import LessonProgressRecord


def build_course(
    lessons_per_module: list[int],
    track_id: UUID | None = None,
    is_visible: bool = True,
    title: str = "Course",
) -> CourseLessonTree:
    modules = [
        ModuleNode(
            module_id=uuid.uuid4(),
            title=f"Module {index + 1}",
            lessons=[
                LessonNode(
                    lesson_id=uuid.uuid4(),
                    title=f"Lesson {index + 1}.{n + 1}",
                    duration_seconds=300,
                    mux_playback_id=f"playback-{index}-{n}",
                )
                for n in range(count)
            ],
        )
        for index, count in enumerate(lessons_per_module)
    ]
    return CourseLessonTree(
        course_id=uuid.uuid4(),
        title=title,
        track_id=track_id,
        is_visible=is_visible,
        modules=modules,
    )


@dataclass
class InMemoryContentRepository:
    courses: list[CourseLessonTree] = field(default_factory=list)
    track_titles: dict[UUID, str] = field(default_factory=dict)
    unpublished_lessons: dict[UUID, UUID] = field(default_factory=dict)

    def add(self, course: CourseLessonTree) -> CourseLessonTree:
        self.courses.append(course)
        if course.track_id is not None:
            self.track_titles.setdefault(course.track_id, "Track")
        return course

    def get_course_lesson_tree(self, course_id: UUID) -> CourseLessonTree | None:
        return next((c for c in self.courses if c.course_id == course_id), None)

    def list_track_course_ids(self, track_id: UUID) -> list[UUID]:
        return [c.course_id for c in self.courses if c.track_id == track_id and c.is_visible]

    def list_published_courses(self) -> list[CourseSummary]:
        return [
            CourseSummary(
                course_id=c.course_id,
                title=c.title,
                track_id=c.track_id,
                track_title=self.track_titles.get(c.track_id) if c.track_id else None,
            )
            for c in self.courses
            if c.is_visible
        ]

    def find_lesson(self, lesson_id: UUID) -> LessonRef | None:
        if lesson_id in self.unpublished_lessons:
            return LessonRef(
                lesson_id=lesson_id,
                course_id=self.unpublished_lessons[lesson_id],
                is_published=False,
            )
        for course in self.courses:
            if course.find_lesson(lesson_id) is not None:
                return LessonRef(lesson_id=lesson_id, course_id=course.course_id, is_published=True)
        return None


class InMemoryProgressStore:
    def __init__(self) -> None:
        self.records: dict[tuple[UUID, UUID], LessonProgressRecord] = {}

    def get(self, user_id: UUID, lesson_id: UUID) -> LessonProgressRecord | None:
        return self.records.get((user_id, lesson_id))

    def save_position(
        self,
        user_id: UUID,
        lesson_id: UUID,
        position_seconds: int,
        completed: bool,
        now: datetime,
    ) -> LessonProgressRecord:
        existing = self.records.get((user_id, lesson_id))
        if existing is None:
            record = LessonProgressRecord(
                lesson_id=lesson_id,
                last_position_seconds=position_seconds,
                completed_at=now if completed else None,
            )
        else:
            record = replace(
                existing,
                last_position_seconds=position_seconds,
                completed_at=now if completed else existing.completed_at,
            )
        self.records[(user_id, lesson_id)] = record
        return record

    def mark_completed(self, user_id: UUID, lesson_id: UUID, now: datetime) -> LessonProgressRecord:
        existing = self.records.get((user_id, lesson_id))
        if existing is None:
            record = LessonProgressRecord(
                lesson_id=lesson_id, last_position_seconds=0, completed_at=now
            )
        else:
            record = replace(existing, completed_at=now)
        self.records[(user_id, lesson_id)] = record
        return record

    def completed_lesson_ids(self, user_id: UUID, lesson_ids: Collection[UUID]) -> set[UUID]:
        return {
            lesson_id
            for lesson_id in lesson_ids
            if (record := self.records.get((user_id, lesson_id))) and record.is_completed
        }


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current
