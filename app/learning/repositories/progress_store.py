"""Per-(user, lesson) watch state.

Writes go through a single native ``INSERT ... ON CONFLICT DO UPDATE`` so
concurrent saves for the same key can neither create duplicate rows nor clear
``completed_at``.
"""

import uuid
from collections.abc import Callable, Collection
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Query, Session

from app.core.exceptions import StorageError
from app.core.repository import BaseRepository
from app.learning.models import LessonProgress


@dataclass(frozen=True)
class LessonProgressRecord:
    lesson_id: UUID
    last_position_seconds: int
    completed_at: datetime | None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @classmethod
    def from_model(cls, progress: LessonProgress) -> "LessonProgressRecord":
        return cls(
            lesson_id=progress.lesson_id,
            last_position_seconds=progress.last_position_seconds,
            completed_at=progress.completed_at,
        )


class ProgressStore(Protocol):
    def get(self, user_id: UUID, lesson_id: UUID) -> LessonProgressRecord | None:
        ...

    def save_position(
        self,
        user_id: UUID,
        lesson_id: UUID,
        position_seconds: int,
        completed: bool,
        now: datetime,
    ) -> LessonProgressRecord:
        """Upsert the position; stamp ``completed_at`` only when ``completed``."""
        ...

    def mark_completed(self, user_id: UUID, lesson_id: UUID, now: datetime) -> LessonProgressRecord:
        """Upsert ``completed_at = now`` without touching a stored position."""
        ...

    def completed_lesson_ids(self, user_id: UUID, lesson_ids: Collection[UUID]) -> set[UUID]:
        """Subset of ``lesson_ids`` the user has completed."""
        ...


_UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlProgressStore(BaseRepository[LessonProgress]):
    def __init__(self, db: Session):
        super().__init__(db, LessonProgress)

    def get(self, user_id: UUID, lesson_id: UUID) -> LessonProgressRecord | None:
        with self.storage_errors("get"):
            progress = self._find(user_id, lesson_id)
        return LessonProgressRecord.from_model(progress) if progress else None

    def save_position(
        self,
        user_id: UUID,
        lesson_id: UUID,
        position_seconds: int,
        completed: bool,
        now: datetime,
    ) -> LessonProgressRecord:
        on_update: dict[str, Any] = {"updated_at": now}
        if completed:
            on_update["completed_at"] = now
        return self._upsert(
            "save_position",
            user_id,
            lesson_id,
            position_seconds=position_seconds,
            completed_at=now if completed else None,
            now=now,
            on_update=on_update,
            update_position=True,
        )

    def mark_completed(self, user_id: UUID, lesson_id: UUID, now: datetime) -> LessonProgressRecord:
        return self._upsert(
            "mark_completed",
            user_id,
            lesson_id,
            position_seconds=0,
            completed_at=now,
            now=now,
            on_update={"completed_at": now, "updated_at": now},
            update_position=False,
        )

    def completed_lesson_ids(self, user_id: UUID, lesson_ids: Collection[UUID]) -> set[UUID]:
        if not lesson_ids:
            return set()

        with self.storage_errors("completed_lesson_ids"):
            rows = (
                self.db.query(LessonProgress.lesson_id)
                .filter(
                    LessonProgress.user_id == user_id,
                    LessonProgress.lesson_id.in_(list(lesson_ids)),
                    LessonProgress.completed_at.is_not(None),
                )
                .all()
            )
        return {row[0] for row in rows}

    def _upsert(
        self,
        operation: str,
        user_id: UUID,
        lesson_id: UUID,
        *,
        position_seconds: int,
        completed_at: datetime | None,
        now: datetime,
        on_update: dict[str, Any],
        update_position: bool,
    ) -> LessonProgressRecord:
        insert = self._dialect_insert()
        stmt = insert(LessonProgress.__table__).values(
            id=uuid.uuid4(),
            user_id=user_id,
            lesson_id=lesson_id,
            last_position_seconds=position_seconds,
            completed_at=completed_at,
            created_at=now,
            updated_at=now,
        )
        if update_position:
            on_update = {**on_update, "last_position_seconds": stmt.excluded.last_position_seconds}
        stmt = stmt.on_conflict_do_update(index_elements=["user_id", "lesson_id"], set_=on_update)

        with self.storage_errors(operation):
            self.db.execute(stmt)
            self.db.commit()
            progress = self._query(user_id, lesson_id).one()

        return LessonProgressRecord.from_model(progress)

    def _find(self, user_id: UUID, lesson_id: UUID) -> LessonProgress | None:
        result: LessonProgress | None = self._query(user_id, lesson_id).first()
        return result

    def _query(self, user_id: UUID, lesson_id: UUID) -> "Query[LessonProgress]":
        # populate_existing: upserts bypass the identity map
        return (
            self.db.query(LessonProgress)
            .populate_existing()
            .filter(LessonProgress.user_id == user_id, LessonProgress.lesson_id == lesson_id)
        )

    def _dialect_insert(self) -> Callable[..., Any]:
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_INSERTS[dialect]
        except KeyError:
            raise StorageError(
                f"Atomic upsert is not supported on {dialect}", operation="upsert"
            ) from None
