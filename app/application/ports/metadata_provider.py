from typing import Protocol, List, Sequence

from app.application.models import VideoRecord


class MetadataProvider(Protocol):
    async def enrich(self, ids: Sequence[str]) -> List[VideoRecord]:
        ...
