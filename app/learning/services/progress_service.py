from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog

from app.auth.viewer import Viewer
from app.content import video
from app.content.repository import ContentRepository, CourseLessonTree, LessonRef
from app.core.constants import EMPTY_CONTENT_PERCENT, PERCENT_DECIMAL_PLACES
from app.core.datetime_utils import utcnow
from app.learning.repositories.progress_store import LessonProgressRecord, ProgressStore
from app.learning.services.completion import (
    normalize_position,
    should_mark_completed,
    validate_playback_values,
)
from app.learning.services.unlock import (
    LessonUnlockState,
    get_unlocked_course_ids_in_track,
    get_unlocked_lesson_ids,
    group_course_ids_by_track,
    is_course_completed,
    is_lesson_unlocked,
    is_module_unlocked,
)

logger = structlog.get_logger(__name__)


def completion_percent(completed_count: int, total_count: int) -> float:
    """Share of completed lessons, rounded half-up; empty content counts as done."""
    if total_count == 0:
        return EMPTY_CONTENT_PERCENT
    raw = Decimal(completed_count) * 100 / Decimal(total_count)
    quantum = Decimal(1).scaleb(-PERCENT_DECIMAL_PLACES)
    return float(raw.quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ModuleProgress:
    module_id: UUID
    title: str
    completed_count: int
    total_count: int
    percent: float


@dataclass(frozen=True)
class CourseProgress:
    course_id: UUID
    completed_count: int
    total_count: int
    progress_percent: float
    modules: list[ModuleProgress] = field(default_factory=list)


@dataclass(frozen=True)
class LessonOutline:
    lesson_id: UUID
    title: str
    lesson_type: str
    duration_seconds: int
    is_unlocked: bool
    is_completed: bool


@dataclass(frozen=True)
class ModuleOutline:
    module_id: UUID
    title: str
    is_unlocked: bool
    completed_count: int
    total_count: int
    percent: float
    lessons: list[LessonOutline] = field(default_factory=list)


@dataclass(frozen=True)
class CourseOutline:
    course_id: UUID
    title: str
    track_id: UUID | None
    is_unlocked: bool
    completed_count: int
    total_count: int
    progress_percent: float
    modules: list[ModuleOutline] = field(default_factory=list)


@dataclass(frozen=True)
class LessonAccess:
    lesson_id: UUID
    course_id: UUID
    title: str
    lesson_type: str
    duration_seconds: int
    mux_playback_id: str | None
    stream_url: str | None
    poster_url: str | None
    course_unlocked: bool
    lesson_unlocked: bool
    previous_lesson_id: UUID | None
    last_position_seconds: int
    completed_at: datetime | None


@dataclass(frozen=True)
class CourseCard:
    course_id: UUID
    title: str
    summary: str | None
    track_id: UUID | None
    track_title: str | None
    is_unlocked: bool
    is_completed: bool


class ProgressService:
    """Lesson completion, sequential unlock state and progress roll-ups for one viewer."""

    def __init__(
        self,
        content: ContentRepository,
        store: ProgressStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.content = content
        self.store = store
        self.clock = clock

    # ─────────────────────────────────────────────────────────────
    # Lesson progress
    # ─────────────────────────────────────────────────────────────

    def save_lesson_progress(
        self,
        viewer: Viewer,
        lesson_id: UUID,
        position_seconds: float,
        duration_seconds: float | None = None,
    ) -> LessonProgressRecord:
        """Record the playback position and complete the lesson once the threshold is met.

        Completion only ever moves forward: a later save with a lower position
        or without a duration keeps an existing ``completed_at``.
        """
        validate_playback_values(position_seconds, duration_seconds)
        completed = duration_seconds is not None and should_mark_completed(
            position_seconds, duration_seconds
        )

        record = self.store.save_position(
            viewer.user_id,
            lesson_id,
            normalize_position(position_seconds),
            completed,
            self.clock(),
        )

        logger.info(
            "lesson_progress_saved",
            user_id=str(viewer.user_id),
            lesson_id=str(lesson_id),
            position_seconds=record.last_position_seconds,
            completed=record.is_completed,
        )
        if completed:
            logger.info("lesson_completed", user_id=str(viewer.user_id), lesson_id=str(lesson_id))

        return record

    def get_lesson_progress(self, viewer: Viewer, lesson_id: UUID) -> LessonProgressRecord | None:
        return self.store.get(viewer.user_id, lesson_id)

    def mark_lesson_complete(self, viewer: Viewer, lesson_id: UUID) -> LessonProgressRecord:
        """Complete a lesson on explicit request, regardless of playback position."""
        record = self.store.mark_completed(viewer.user_id, lesson_id, self.clock())
        logger.info(
            "lesson_marked_complete", user_id=str(viewer.user_id), lesson_id=str(lesson_id)
        )
        return record

    def get_visible_lesson(self, lesson_id: UUID) -> LessonRef | None:
        """The lesson if it exists and is published."""
        lesson = self.content.find_lesson(lesson_id)
        if lesson is None or not lesson.is_published:
            return None
        return lesson

    # ─────────────────────────────────────────────────────────────
    # Course progress & unlock state
    # ─────────────────────────────────────────────────────────────

    def get_course_progress(self, viewer: Viewer, course_id: UUID) -> CourseProgress | None:
        tree = self.content.get_course_lesson_tree(course_id)
        if tree is None:
            return None

        completed = self.store.completed_lesson_ids(viewer.user_id, tree.ordered_lesson_ids)
        return self._build_progress(tree, completed)

    def is_course_unlocked_for_user(self, viewer: Viewer, course_id: UUID) -> bool:
        tree = self.content.get_course_lesson_tree(course_id)
        if tree is None:
            return False
        return self._is_tree_unlocked(viewer, tree)

    def get_course_outline(self, viewer: Viewer, course_id: UUID) -> CourseOutline | None:
        """Course tree annotated with the viewer's unlock and completion state.

        Returns None when the course does not exist or is not visible to learners.
        """
        tree = self.content.get_course_lesson_tree(course_id)
        if tree is None or not tree.is_visible:
            return None

        ordered = tree.ordered_lesson_ids
        completed = self.store.completed_lesson_ids(viewer.user_id, ordered)
        unlocked = get_unlocked_lesson_ids(ordered, completed)
        progress = self._build_progress(tree, completed)
        progress_by_module = {m.module_id: m for m in progress.modules}

        modules = []
        for module in tree.modules:
            module_progress = progress_by_module[module.module_id]
            modules.append(
                ModuleOutline(
                    module_id=module.module_id,
                    title=module.title,
                    is_unlocked=is_module_unlocked(ordered, completed, module.lesson_ids),
                    completed_count=module_progress.completed_count,
                    total_count=module_progress.total_count,
                    percent=module_progress.percent,
                    lessons=[
                        LessonOutline(
                            lesson_id=lesson.lesson_id,
                            title=lesson.title,
                            lesson_type=lesson.lesson_type,
                            duration_seconds=lesson.duration_seconds,
                            is_unlocked=lesson.lesson_id in unlocked,
                            is_completed=lesson.lesson_id in completed,
                        )
                        for lesson in module.lessons
                    ],
                )
            )

        return CourseOutline(
            course_id=tree.course_id,
            title=tree.title,
            track_id=tree.track_id,
            is_unlocked=self._is_tree_unlocked(viewer, tree),
            completed_count=progress.completed_count,
            total_count=progress.total_count,
            progress_percent=progress.progress_percent,
            modules=modules,
        )

    def get_lesson_access(
        self, viewer: Viewer, course_id: UUID, lesson_id: UUID
    ) -> LessonAccess | None:
        """Lesson playback details plus the gate state for the viewer.

        Returns None when the course is not visible or the lesson is not one of
        its published lessons.
        """
        tree = self.content.get_course_lesson_tree(course_id)
        if tree is None or not tree.is_visible:
            return None
        lesson = tree.find_lesson(lesson_id)
        if lesson is None:
            return None

        completed = self.store.completed_lesson_ids(viewer.user_id, tree.ordered_lesson_ids)
        state: LessonUnlockState = is_lesson_unlocked(
            tree.ordered_lesson_ids, completed, lesson_id
        )
        record = self.store.get(viewer.user_id, lesson_id)

        return LessonAccess(
            lesson_id=lesson.lesson_id,
            course_id=tree.course_id,
            title=lesson.title,
            lesson_type=lesson.lesson_type,
            duration_seconds=lesson.duration_seconds,
            mux_playback_id=lesson.mux_playback_id,
            stream_url=video.stream_url(lesson.mux_playback_id),
            poster_url=video.poster_url(lesson.mux_playback_id),
            course_unlocked=self._is_tree_unlocked(viewer, tree),
            lesson_unlocked=state.unlocked,
            previous_lesson_id=state.previous_lesson_id,
            last_position_seconds=record.last_position_seconds if record else 0,
            completed_at=record.completed_at if record else None,
        )

    def list_courses_for_learning(self, viewer: Viewer) -> list[CourseCard]:
        """Every visible course with the viewer's unlock and completion flags."""
        courses = self.content.list_published_courses()
        completed_course_ids = self._completed_course_ids(
            viewer, [c.course_id for c in courses]
        )

        unlocked: set[UUID] = set()
        groups = group_course_ids_by_track((c.course_id, c.track_id) for c in courses)
        for track_id, course_ids in groups.items():
            if track_id is None:
                unlocked.update(course_ids)
            else:
                unlocked |= get_unlocked_course_ids_in_track(course_ids, completed_course_ids)

        return [
            CourseCard(
                course_id=c.course_id,
                title=c.title,
                summary=c.summary,
                track_id=c.track_id,
                track_title=c.track_title,
                is_unlocked=c.course_id in unlocked,
                is_completed=c.course_id in completed_course_ids,
            )
            for c in courses
        ]

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    def _is_tree_unlocked(self, viewer: Viewer, tree: CourseLessonTree) -> bool:
        if tree.track_id is None:
            return True

        track_course_ids = self.content.list_track_course_ids(tree.track_id)
        completed_course_ids = self._completed_course_ids(viewer, track_course_ids)
        return tree.course_id in get_unlocked_course_ids_in_track(
            track_course_ids, completed_course_ids
        )

    def _completed_course_ids(self, viewer: Viewer, course_ids: Collection[UUID]) -> set[UUID]:
        """Courses whose every published lesson the viewer has completed.

        Loads each course tree and answers completion with one batched store query.
        """
        lessons_by_course: dict[UUID, list[UUID]] = {}
        for course_id in course_ids:
            tree = self.content.get_course_lesson_tree(course_id)
            lessons_by_course[course_id] = tree.ordered_lesson_ids if tree else []

        all_lesson_ids = [lid for ids in lessons_by_course.values() for lid in ids]
        completed = self.store.completed_lesson_ids(viewer.user_id, all_lesson_ids)

        return {
            course_id
            for course_id, lesson_ids in lessons_by_course.items()
            if is_course_completed(lesson_ids, completed)
        }

    @staticmethod
    def _build_progress(tree: CourseLessonTree, completed: Collection[UUID]) -> CourseProgress:
        modules = []
        for module in tree.modules:
            total = len(module.lesson_ids)
            done = sum(1 for lesson_id in module.lesson_ids if lesson_id in completed)
            modules.append(
                ModuleProgress(
                    module_id=module.module_id,
                    title=module.title,
                    completed_count=done,
                    total_count=total,
                    percent=completion_percent(done, total),
                )
            )

        ordered = tree.ordered_lesson_ids
        completed_count = sum(1 for lesson_id in ordered if lesson_id in completed)
        return CourseProgress(
            course_id=tree.course_id,
            completed_count=completed_count,
            total_count=len(ordered),
            progress_percent=completion_percent(completed_count, len(ordered)),
            modules=modules,
        )
