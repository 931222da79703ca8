from typing import List, Optional


class ConfigurationError(Exception):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required settings: {', '.join(missing)}")


class VideoFeedError(Exception):
    """Base for failures the /videos endpoint turns into a 500."""


class StoreUnavailable(VideoFeedError):
    pass


class UpstreamError(VideoFeedError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
