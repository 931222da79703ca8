from typing import Optional

from pydantic import BaseModel, Field


class VideoRecord(BaseModel):
    video_id: str = Field(serialization_alias="videoId")
    title: str
    channel_title: str = Field(serialization_alias="channelTitle")
    thumbnail_url: str = Field(serialization_alias="thumbnail")
    duration: Optional[str] = None

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
