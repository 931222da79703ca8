import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.dependencies import get_video_feed_use_case
from app.application.video_feed import ListVideoFeedUseCase
from app.core.exceptions import VideoFeedError
from app.infrastructure.cache.rate_limit import rate_limit

router = APIRouter()
log = logging.getLogger("app.videos")

FETCH_FAILED_MESSAGE = "Failed to fetch videos"


@router.get("/videos")
@rate_limit(scope="videos")
async def list_videos(
    fastapi_request: Request,
    use_case: ListVideoFeedUseCase = Depends(get_video_feed_use_case),
) -> JSONResponse:
    try:
        videos = await use_case.execute()
    except VideoFeedError:
        log.exception("Failed to build video feed")
        return JSONResponse(status_code=500, content={"message": FETCH_FAILED_MESSAGE})

    return JSONResponse(status_code=200, content=[video.to_response() for video in videos])
