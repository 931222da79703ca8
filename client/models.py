from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ClientVideoRecord:
    video_id: str
    title: str
    channel_title: str
    thumbnail: str
    duration: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ClientVideoRecord":
        if not isinstance(payload, dict):
            raise ValueError("video entry must be an object")
        values = {}
        for key, field in (("videoId", "video_id"), ("title", "title"), ("channelTitle", "channel_title"), ("thumbnail", "thumbnail")):
            value = payload.get(key)
            if not isinstance(value, str):
                raise ValueError(f"video entry is missing {key}")
            values[field] = value
        duration = payload.get("duration")
        return cls(duration=duration if isinstance(duration, str) else None, **values)
