import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Tuple

from client.loader import LoaderState, VideoFeedLoader
from client.models import ClientVideoRecord

log = logging.getLogger("client.views")

SKELETON_ROWS = 5

PLAYBACK_ERROR_TITLE = "Playback Error"
PLAYBACK_ERROR_MESSAGE = "This video cannot be played. It may be restricted by the owner."


@dataclass(frozen=True)
class ListScreen:
    mode: str  # "skeleton" | "error" | "list"
    items: Tuple[ClientVideoRecord, ...]
    error: Optional[str]
    refreshing: bool
    skeleton_rows: int = 0


class VideoListView:
    """Projects loader state onto what the list screen should show."""

    def __init__(self, on_select: Callable[[ClientVideoRecord], None]) -> None:
        self._on_select = on_select

    def render(self, loader: VideoFeedLoader) -> ListScreen:
        videos = tuple(loader.videos)
        if loader.state in (LoaderState.IDLE, LoaderState.LOADING) and not videos:
            return ListScreen("skeleton", (), None, False, skeleton_rows=SKELETON_ROWS)
        if loader.error and not videos:
            return ListScreen("error", (), loader.error, loader.refreshing)
        return ListScreen("list", videos, loader.error, loader.refreshing)

    def select(self, loader: VideoFeedLoader, video_id: str) -> ClientVideoRecord:
        for video in loader.videos:
            if video.video_id == video_id:
                self._on_select(video)
                return video
        raise LookupError(f"video {video_id} is not in the current list")


class EmbeddedPlayer(Protocol):
    """The embedded player widget. Subscriptions return an unsubscribe callable."""

    def play(self, video_id: str) -> None:
        ...

    def on_state_change(self, handler: Callable[[str], None]) -> Callable[[], None]:
        ...

    def on_error(self, handler: Callable[[Any], None]) -> Callable[[], None]:
        ...

    def stop(self) -> None:
        ...


class _Session:
    def __init__(self, record: ClientVideoRecord, player: EmbeddedPlayer) -> None:
        self.record = record
        self.player = player
        self.unsubscribers: List[Callable[[], None]] = []


class PlaybackOverlay:
    def __init__(
        self,
        alert: Callable[[str, str], None],
        on_close: Optional[Callable[[ClientVideoRecord], None]] = None,
    ) -> None:
        self._alert = alert
        self._on_close = on_close
        self._session: Optional[_Session] = None

    @property
    def visible(self) -> bool:
        return self._session is not None

    @property
    def current(self) -> Optional[ClientVideoRecord]:
        return self._session.record if self._session else None

    def open(self, record: ClientVideoRecord, player: EmbeddedPlayer) -> None:
        if self._session is not None:
            self.close()

        session = _Session(record, player)
        self._session = session
        session.unsubscribers.append(player.on_state_change(lambda state: self._handle_state(session, state)))
        session.unsubscribers.append(player.on_error(lambda error: self._handle_error(session, error)))
        player.play(record.video_id)

    def _handle_state(self, session: _Session, state: str) -> None:
        # signals from an already closed session are ignored
        if session is not self._session:
            return
        if state == "ended":
            self.close()

    def _handle_error(self, session: _Session, error: Any) -> None:
        if session is not self._session:
            return
        log.error("Player error video_id=%s: %s", session.record.video_id, error)
        self._alert(PLAYBACK_ERROR_TITLE, PLAYBACK_ERROR_MESSAGE)
        self.close()

    def close(self) -> None:
        session = self._session
        if session is None:
            return
        self._session = None
        for unsubscribe in session.unsubscribers:
            unsubscribe()
        session.player.stop()
        if self._on_close is not None:
            self._on_close(session.record)
