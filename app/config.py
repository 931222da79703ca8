import os
from dotenv import load_dotenv

from app.core.exceptions import ConfigurationError

load_dotenv()

MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB = os.getenv("MONGO_DB", "learnoverse")
MONGO_COLLECTION = os.getenv("MONGO_COLLECTION", "videos")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY")
YOUTUBE_API_URL = os.getenv("YOUTUBE_API_URL", "https://www.googleapis.com/youtube/v3/videos")
YOUTUBE_TIMEOUT_SEC = float(os.getenv("YOUTUBE_TIMEOUT_SEC", "5"))
# videos.list accepts at most 50 ids per call
YOUTUBE_MAX_BATCH = int(os.getenv("YOUTUBE_MAX_BATCH", "50"))

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB = int(os.getenv("REDIS_DB", "0"))


def require_settings() -> None:
    missing = [name for name, value in (("MONGO_URI", MONGO_URI), ("YOUTUBE_API_KEY", YOUTUBE_API_KEY)) if not value]
    if missing:
        raise ConfigurationError(missing)
