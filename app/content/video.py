from app.core.config import settings
from app.core.constants import MUX_POSTER_QUERY


def stream_url(playback_id: str | None) -> str | None:
    """HLS manifest URL for a Mux playback id."""
    if not playback_id:
        return None
    return f"{settings.MUX_STREAM_BASE_URL}/{playback_id}.m3u8"


def poster_url(playback_id: str | None) -> str | None:
    if not playback_id:
        return None
    return f"{settings.MUX_IMAGE_BASE_URL}/{playback_id}/thumbnail.jpg?{MUX_POSTER_QUERY}"
