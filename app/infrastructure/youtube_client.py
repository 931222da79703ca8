import asyncio
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

import requests

from app.application.models import VideoRecord
from app.application.ports.metadata_provider import MetadataProvider
from app.application.serializers import video_record_from_item
from app.core.exceptions import UpstreamError

log = logging.getLogger("app.youtube")

VIDEO_PARTS = "snippet,contentDetails"


def chunked(ids: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for i in range(0, len(ids), size):
        yield ids[i:i + size]


def _error_reason(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    # proxies and CDNs answer with bodies that are not in Google's error shape
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    errors = error.get("errors")
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return None
    reason = errors[0].get("reason")
    return reason if isinstance(reason, str) else None


class YouTubeMetadataClient(MetadataProvider):
    def __init__(
        self,
        api_key: str,
        api_url: str = "https://www.googleapis.com/youtube/v3/videos",
        timeout_sec: float = 5.0,
        max_batch_size: int = 50,
        session: Optional[requests.Session] = None,
    ) -> None:
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be positive")
        self._api_key = api_key
        self._api_url = api_url
        self._timeout_sec = timeout_sec
        self._max_batch_size = max_batch_size
        self._session = session or requests.Session()

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    async def enrich(self, ids: Sequence[str]) -> List[VideoRecord]:
        if not ids:
            return []

        records: List[VideoRecord] = []
        for batch in chunked(list(ids), self._max_batch_size):
            items = await asyncio.to_thread(self._fetch_items, batch)
            requested = set(batch)
            for item in items:
                record = video_record_from_item(item)
                if record.video_id not in requested:
                    log.warning("Dropping YouTube item for unrequested id=%s", record.video_id)
                    continue
                records.append(record)
        return records

    def _fetch_items(self, batch: Sequence[str]) -> List[Dict[str, Any]]:
        params = {"part": VIDEO_PARTS, "id": ",".join(batch), "key": self._api_key}
        # requests exceptions embed the full URL including the key, so they are not chained
        try:
            response = self._session.get(self._api_url, params=params, timeout=self._timeout_sec)
        except requests.Timeout:
            raise UpstreamError(f"YouTube request timed out after {self._timeout_sec}s") from None
        except requests.RequestException as exc:
            raise UpstreamError(f"YouTube request failed: {type(exc).__name__}") from None

        if not 200 <= response.status_code < 300:
            reason = _error_reason(response) or "unknown"
            raise UpstreamError(
                f"YouTube responded {response.status_code} reason={reason}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            raise UpstreamError("YouTube response is not valid JSON", status_code=response.status_code) from None

        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise UpstreamError("YouTube response has no items list", status_code=response.status_code)

        log.info("YouTube videos.list requested=%d returned=%d", len(batch), len(items))
        return items

    def close(self) -> None:
        self._session.close()
