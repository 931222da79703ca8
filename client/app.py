from typing import Callable, Optional

from client import config
from client.loader import LoaderState, VideoFeedLoader
from client.models import ClientVideoRecord
from client.views import EmbeddedPlayer, ListScreen, PlaybackOverlay, VideoListView


class VideoBrowserApp:
    def __init__(
        self,
        loader: VideoFeedLoader,
        player_factory: Callable[[], EmbeddedPlayer],
        alert: Callable[[str, str], None],
    ) -> None:
        self.loader = loader
        self.overlay = PlaybackOverlay(alert)
        self.list_view = VideoListView(on_select=self._open_player)
        self._player_factory = player_factory

    @classmethod
    def from_env(
        cls,
        player_factory: Callable[[], EmbeddedPlayer],
        alert: Callable[[str, str], None],
        platform: Optional[str] = None,
    ) -> "VideoBrowserApp":
        loader = VideoFeedLoader(config.videos_url(platform), timeout_sec=config.FETCH_TIMEOUT_SEC)
        return cls(loader, player_factory, alert)

    async def mount(self) -> LoaderState:
        return await self.loader.load()

    async def pull_to_refresh(self) -> LoaderState:
        return await self.loader.refresh()

    def screen(self) -> ListScreen:
        return self.list_view.render(self.loader)

    def select(self, video_id: str) -> ClientVideoRecord:
        return self.list_view.select(self.loader, video_id)

    def close_player(self) -> None:
        self.overlay.close()

    def _open_player(self, record: ClientVideoRecord) -> None:
        self.overlay.open(record, self._player_factory())

    def unmount(self) -> None:
        self.overlay.close()
        self.loader.close()
