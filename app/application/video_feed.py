import logging
from typing import List

from app.application.models import VideoRecord
from app.application.ports.catalog_repository import CatalogRepository
from app.application.ports.metadata_provider import MetadataProvider

log = logging.getLogger("app.video_feed")


class ListVideoFeedUseCase:
    def __init__(self, repository: CatalogRepository, metadata: MetadataProvider) -> None:
        self._repository = repository
        self._metadata = metadata

    async def execute(self) -> List[VideoRecord]:
        ids = await self._repository.list_tracked_ids()
        if not ids:
            log.info("Catalog is empty, nothing to enrich")
            return []

        videos = await self._metadata.enrich(ids)
        log.info("Video feed built requested=%d resolved=%d", len(ids), len(videos))
        return videos
