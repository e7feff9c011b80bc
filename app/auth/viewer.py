from dataclasses import dataclass, field
from uuid import UUID

from app.core.constants import ADMIN_ROLE


@dataclass(frozen=True)
class Viewer:
    """The authenticated caller, passed explicitly into learning services."""

    user_id: UUID
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles
