import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app import config
from app.api.videos import router as videos_router
from app.infrastructure.db.mongo_client import MongoCatalogStore
from app.infrastructure.youtube_client import YouTubeMetadataClient

log = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.require_settings()

    store = MongoCatalogStore(config.MONGO_URI, config.MONGO_DB, timeout_ms=config.MONGO_TIMEOUT_MS)
    try:
        await store.connect()
    except Exception:
        log.critical("Cannot serve without MongoDB, aborting startup")
        raise

    metadata_client = YouTubeMetadataClient(
        api_key=config.YOUTUBE_API_KEY,
        api_url=config.YOUTUBE_API_URL,
        timeout_sec=config.YOUTUBE_TIMEOUT_SEC,
        max_batch_size=config.YOUTUBE_MAX_BATCH,
    )
    app.state.catalog_store = store
    app.state.metadata_client = metadata_client
    try:
        yield
    finally:
        metadata_client.close()
        store.close()


app = FastAPI(title="Video Feed Aggregator", lifespan=lifespan)

app.include_router(videos_router)


@app.get("/health")
async def health() -> JSONResponse:
    store = getattr(app.state, "catalog_store", None)
    mongo_ok = store is not None and await store.ping()
    return JSONResponse(
        status_code=200 if mongo_ok else 503,
        content={
            "ok": mongo_ok,
            "service": "video_feed",
            "mongo": "up" if mongo_ok else "down",
        },
    )
