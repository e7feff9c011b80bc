"""Base repository pattern implementation.

Domain repositories (content tree, progress store) inherit from this class
and add their own queries on top of the shared session handling.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StorageError

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Generic repository bound to one session and one model class.

    Example:
        ```python
        class TrackRepository(BaseRepository[Track]):
            def __init__(self, db: Session):
                super().__init__(db, Track)

            def find_by_slug(self, slug: str) -> Track | None:
                return self.db.query(self.model).filter(self.model.slug == slug).first()
        ```
    """

    def __init__(self, db: Session, model: type[ModelType]):
        """Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy session.
            model: The model class this repository operates on.
        """
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> ModelType | None:
        """Get a single entity by ID.

        Args:
            entity_id: The UUID of the entity.

        Returns:
            The entity if found, None otherwise.
        """
        with self.storage_errors("get_by_id"):
            result = self.db.query(self.model).filter(self.model.id == entity_id).first()  # type: ignore[attr-defined]
        return cast(ModelType | None, result)

    @contextmanager
    def storage_errors(self, operation: str) -> Iterator[None]:
        """Roll back and re-raise database failures as StorageError.

        Args:
            operation: Name of the repository operation, reported in the error details.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(
                f"{self.model.__name__} storage operation failed", operation=operation  # type: ignore[attr-defined]
            ) from exc
