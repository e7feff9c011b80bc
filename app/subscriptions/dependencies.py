from fastapi import Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_viewer
from app.auth.viewer import Viewer
from app.core.exceptions import ForbiddenError
from app.db.session import get_db
from app.subscriptions.services.access_service import AccessService


class RequireSubscription:
    """Dependency class to check that the viewer may watch paid content."""

    def __init__(self, skip_for_admin: bool = True):
        """
        Initialize subscription requirement.

        Args:
            skip_for_admin: If True, admins bypass the subscription check. Default True.
        """
        self.skip_for_admin = skip_for_admin

    def __call__(
        self,
        viewer: Viewer = Depends(get_current_viewer),
        db: Session = Depends(get_db),
    ) -> Viewer:
        if self.skip_for_admin and viewer.is_admin:
            return viewer

        if not AccessService.has_active_subscription(viewer.user_id, db):
            raise ForbiddenError(
                "An active subscription is required to access courses",
                details={"reason": "subscription_required"},
            )
        return viewer
