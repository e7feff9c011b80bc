import math

from app.core.constants import COMPLETION_TAIL_SECONDS, COMPLETION_THRESHOLD_RATIO
from app.core.exceptions import BadRequestError


def should_mark_completed(position_seconds: float, duration_seconds: float | None) -> bool:
    """Whether a playback position counts as having watched the lesson.

    True once 90% of the duration is reached or playback is inside the final
    30 seconds. Lessons of 30 seconds or less therefore complete as soon as a
    duration is reported, whatever the position.
    """
    if duration_seconds is None or not math.isfinite(duration_seconds) or duration_seconds <= 0:
        return False
    position = max(0.0, position_seconds)
    return position >= duration_seconds * COMPLETION_THRESHOLD_RATIO or position >= max(
        0.0, duration_seconds - COMPLETION_TAIL_SECONDS
    )


def normalize_position(position_seconds: float) -> int:
    """Whole, non-negative seconds as stored on the progress row."""
    return int(math.floor(max(0.0, position_seconds) + 0.5))


def validate_playback_values(position_seconds: float, duration_seconds: float | None) -> None:
    if not math.isfinite(position_seconds) or position_seconds < 0:
        raise BadRequestError(
            "positionSeconds must be a finite number >= 0", field="positionSeconds"
        )
    if duration_seconds is not None and (
        not math.isfinite(duration_seconds) or duration_seconds < 0
    ):
        raise BadRequestError(
            "durationSeconds must be a finite number >= 0", field="durationSeconds"
        )
