import logging
from typing import List

from pymongo.errors import PyMongoError

from app.application.ports.catalog_repository import CatalogRepository
from app.core.exceptions import StoreUnavailable
from app.infrastructure.db.mongo_client import MongoCatalogStore

log = logging.getLogger("app.catalog_repo")


class MongoCatalogRepository(CatalogRepository):
    def __init__(self, store: MongoCatalogStore, collection_name: str = "videos") -> None:
        self._store = store
        self._collection_name = collection_name

    async def list_tracked_ids(self) -> List[str]:
        collection = self._store.database()[self._collection_name]
        try:
            cursor = collection.find({}, {"videoId": 1, "_id": 0})
            docs = await cursor.to_list(length=None)
        except PyMongoError as exc:
            raise StoreUnavailable(f"Catalog query on {self._collection_name} failed") from exc

        ids: List[str] = []
        for doc in docs:
            video_id = doc.get("videoId")
            if not isinstance(video_id, str) or not video_id:
                log.warning("Skipping catalog document without videoId: %r", doc)
                continue
            ids.append(video_id)
        return ids
