import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

import requests

from client.models import ClientVideoRecord

log = logging.getLogger("client.loader")

FETCH_ERROR_MESSAGE = "Failed to fetch videos. Pull down to retry."


class LoaderState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
    REFRESHING = "refreshing"


class FetchError(Exception):
    pass


class VideoFeedLoader:
    """Fetches the video feed and tracks loading, error and refresh state.

    Only one fetch runs at a time: ``load()`` or ``refresh()`` called while a
    fetch is outstanding awaits that fetch instead of starting another. A
    failed fetch keeps the last successful list so stale content stays
    visible next to the error.
    """

    def __init__(self, url: str, timeout_sec: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self._url = url
        self._timeout_sec = timeout_sec
        self._session = session or requests.Session()
        self._state = LoaderState.IDLE
        self._videos: List[ClientVideoRecord] = []
        self._error: Optional[str] = None
        self._refreshing = False
        self._inflight: Optional[asyncio.Task] = None
        self._listeners: List[Callable[["VideoFeedLoader"], None]] = []

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def videos(self) -> List[ClientVideoRecord]:
        return list(self._videos)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def refreshing(self) -> bool:
        return self._refreshing

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def subscribe(self, listener: Callable[["VideoFeedLoader"], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def load(self) -> LoaderState:
        if self.in_flight:
            return await asyncio.shield(self._inflight)
        self._state = LoaderState.LOADING
        return await self._start()

    async def refresh(self) -> LoaderState:
        if self.in_flight:
            log.debug("Refresh coalesced into the fetch already in flight")
            return await asyncio.shield(self._inflight)
        if self._state not in (LoaderState.LOADED, LoaderState.FAILED):
            return await self.load()
        self._state = LoaderState.REFRESHING
        self._refreshing = True
        return await self._start()

    async def _start(self) -> LoaderState:
        self._notify()
        self._inflight = asyncio.ensure_future(self._run())
        return await asyncio.shield(self._inflight)

    async def _run(self) -> LoaderState:
        try:
            videos = await asyncio.to_thread(self._fetch)
        except FetchError as exc:
            log.error("Video feed fetch failed: %s", exc)
            self._error = FETCH_ERROR_MESSAGE
            self._state = LoaderState.FAILED
        else:
            self._videos = videos
            self._error = None
            self._state = LoaderState.LOADED
        finally:
            if self._state in (LoaderState.LOADING, LoaderState.REFRESHING):
                self._error = FETCH_ERROR_MESSAGE
                self._state = LoaderState.FAILED
            self._refreshing = False
            self._notify()
        return self._state

    def _fetch(self) -> List[ClientVideoRecord]:
        try:
            response = self._session.get(self._url, timeout=self._timeout_sec)
        except requests.RequestException as exc:
            raise FetchError(f"network error: {exc}") from exc
        if not response.ok:
            raise FetchError(f"server responded {response.status_code}")
        try:
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array")
            return [ClientVideoRecord.from_payload(item) for item in payload]
        except ValueError as exc:
            raise FetchError(f"malformed response: {exc}") from exc

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def close(self) -> None:
        self._session.close()
