import os
import sys
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

SERVER_PORT = int(os.getenv("PORT", "3000"))
# Android emulators reach the host machine through 10.0.2.2
ANDROID_HOST = "10.0.2.2"
DEFAULT_HOST = "localhost"
FETCH_TIMEOUT_SEC = float(os.getenv("VIDEO_API_TIMEOUT_SEC", "10"))


def is_android(platform: Optional[str] = None) -> bool:
    if platform is not None:
        return platform == "android"
    return sys.platform == "android" or hasattr(sys, "getandroidapilevel")


def videos_url(platform: Optional[str] = None) -> str:
    override = os.getenv("VIDEO_API_URL")
    if override:
        base = override.rstrip("/")
    else:
        host = ANDROID_HOST if is_android(platform) else DEFAULT_HOST
        base = f"http://{host}:{SERVER_PORT}"
    return f"{base}/videos"
