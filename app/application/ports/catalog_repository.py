from typing import Protocol, List


class CatalogRepository(Protocol):
    async def list_tracked_ids(self) -> List[str]:
        ...
