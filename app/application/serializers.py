from typing import Any, Dict, Mapping, Optional

from app.application.models import VideoRecord
from app.core.exceptions import UpstreamError

# "high" first to keep the 480x360 rendition the client layout expects
THUMBNAIL_PREFERENCE = ("high", "medium", "default", "standard", "maxres")


def best_thumbnail_url(thumbnails: Mapping[str, Any]) -> Optional[str]:
    for key in THUMBNAIL_PREFERENCE:
        thumb = thumbnails.get(key)
        if isinstance(thumb, dict) and thumb.get("url"):
            return thumb["url"]
    return None


def _require_str(container: Mapping[str, Any], field: str, where: str) -> str:
    value = container.get(field)
    if not isinstance(value, str):
        raise UpstreamError(f"Malformed YouTube item: missing {where}.{field}")
    return value


def video_record_from_item(item: Dict[str, Any]) -> VideoRecord:
    """Flatten one ``videos.list`` item into a VideoRecord.

    The raw ``id`` becomes ``video_id``; ``snippet.title``, ``snippet.channelTitle``
    and the preferred snippet thumbnail are lifted to the top level. Anything
    missing is reported as an UpstreamError, never as KeyError/TypeError.
    """
    if not isinstance(item, dict):
        raise UpstreamError("Malformed YouTube item: not an object")

    video_id = _require_str(item, "id", "item")
    snippet = item.get("snippet")
    if not isinstance(snippet, dict):
        raise UpstreamError(f"Malformed YouTube item {video_id}: missing snippet")

    thumbnails = snippet.get("thumbnails")
    thumbnail_url = best_thumbnail_url(thumbnails) if isinstance(thumbnails, dict) else None
    if thumbnail_url is None:
        raise UpstreamError(f"Malformed YouTube item {video_id}: missing snippet.thumbnails")

    content_details = item.get("contentDetails")
    duration = content_details.get("duration") if isinstance(content_details, dict) else None

    return VideoRecord(
        video_id=video_id,
        title=_require_str(snippet, "title", "snippet"),
        channel_title=_require_str(snippet, "channelTitle", "snippet"),
        thumbnail_url=thumbnail_url,
        duration=duration if isinstance(duration, str) else None,
    )
