import logging
from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends
from sqlalchemy.orm import Session

from app.auth.models.user import User
from app.auth.viewer import Viewer
from app.core import security
from app.core.exceptions import UnauthorizedError
from app.db.session import get_db

logger = logging.getLogger(__name__)


async def get_access_token_from_cookie(
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """Extract access token from cookie"""
    if not access_token:
        raise UnauthorizedError()
    return access_token


async def get_validated_token_payload(
    token: str,
    expected_type: str = "access",
) -> dict:
    """Decode and validate JWT token"""
    payload = security.decode_token(token)

    if payload is None:
        raise UnauthorizedError("Could not validate credentials")

    if payload.get("type") != expected_type:
        raise UnauthorizedError(f"Invalid token type, expected {expected_type}")

    return payload


async def get_current_viewer(
    access_token: str = Depends(get_access_token_from_cookie),
    db: Session = Depends(get_db),
) -> Viewer:
    """Resolve the viewer for the current request from its access token"""
    payload = await get_validated_token_payload(access_token, expected_type="access")

    subject: str | None = payload.get("sub")
    if subject is None:
        raise UnauthorizedError("Could not validate credentials")

    try:
        user_id = UUID(subject)
    except ValueError:
        raise UnauthorizedError("Could not validate credentials") from None

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        logger.info("Rejected token for missing or inactive user %s", subject)
        raise UnauthorizedError("User not found")

    return Viewer(user_id=user.id, roles=frozenset({user.role}))
