from fastapi import Request

from app.application.video_feed import ListVideoFeedUseCase
from app.config import MONGO_COLLECTION
from app.infrastructure.db.catalog_repository import MongoCatalogRepository


def get_video_feed_use_case(request: Request) -> ListVideoFeedUseCase:
    state = request.app.state
    repository = MongoCatalogRepository(state.catalog_store, collection_name=MONGO_COLLECTION)
    return ListVideoFeedUseCase(repository, state.metadata_client)
