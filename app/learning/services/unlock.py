"""Sequential gating over ordered ids.

Lesson N+1 opens once lesson N is completed, in course-wide order. Modules
follow from their first lesson, and courses in a track follow the same rule
one level up. Everything here is pure: ordered id sequences and id sets in,
booleans and sets out.
"""

from collections.abc import Hashable, Iterable, Sequence, Set
from dataclasses import dataclass
from typing import TypeVar
from uuid import UUID

Id = TypeVar("Id", bound=Hashable)


@dataclass(frozen=True)
class LessonUnlockState:
    unlocked: bool
    previous_lesson_id: UUID | None = None


def _sequential_unlocked(ordered_ids: Sequence[Id], completed_ids: Set[Id]) -> set[Id]:
    unlocked: set[Id] = set()
    for index, item_id in enumerate(ordered_ids):
        if index == 0 or ordered_ids[index - 1] in completed_ids:
            unlocked.add(item_id)
    return unlocked


def is_course_completed(ordered_lesson_ids: Sequence[UUID], completed_lesson_ids: Set[UUID]) -> bool:
    """A course is completed when every lesson is; a course without lessons trivially is."""
    return all(lesson_id in completed_lesson_ids for lesson_id in ordered_lesson_ids)


def get_unlocked_course_ids_in_track(
    ordered_course_ids: Sequence[UUID], completed_course_ids: Set[UUID]
) -> set[UUID]:
    """First course in the track, plus every course whose predecessor is completed."""
    return _sequential_unlocked(ordered_course_ids, completed_course_ids)


def is_module_unlocked(
    ordered_lesson_ids: Sequence[UUID],
    completed_lesson_ids: Set[UUID],
    module_lesson_ids: Sequence[UUID],
) -> bool:
    """Open when the lesson before the module's first lesson (course-wide) is completed."""
    if not module_lesson_ids:
        return True
    try:
        index = list(ordered_lesson_ids).index(module_lesson_ids[0])
    except ValueError:
        return True
    if index == 0:
        return True
    return ordered_lesson_ids[index - 1] in completed_lesson_ids


def is_lesson_unlocked(
    ordered_lesson_ids: Sequence[UUID],
    completed_lesson_ids: Set[UUID],
    lesson_id: UUID,
) -> LessonUnlockState:
    try:
        index = list(ordered_lesson_ids).index(lesson_id)
    except ValueError:
        return LessonUnlockState(unlocked=False)
    if index == 0:
        return LessonUnlockState(unlocked=True)

    previous_id = ordered_lesson_ids[index - 1]
    return LessonUnlockState(
        unlocked=previous_id in completed_lesson_ids,
        previous_lesson_id=previous_id,
    )


def get_unlocked_lesson_ids(
    ordered_lesson_ids: Sequence[UUID], completed_lesson_ids: Set[UUID]
) -> set[UUID]:
    """Batch form of :func:`is_lesson_unlocked` for a whole course."""
    return _sequential_unlocked(ordered_lesson_ids, completed_lesson_ids)


def group_course_ids_by_track(
    courses: Iterable[tuple[UUID, UUID | None]],
) -> dict[UUID | None, list[UUID]]:
    """Group ``(course_id, track_id)`` pairs by track, keeping catalog order.

    Untracked courses land under ``None``; they are free-standing and never gated.
    """
    groups: dict[UUID | None, list[UUID]] = {}
    for course_id, track_id in courses:
        groups.setdefault(track_id, []).append(course_id)
    return groups
