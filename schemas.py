"""Response shapes of the YouTube Data API v3 endpoints we call."""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Thumbnail(UpstreamModel):
    url: str


class Snippet(UpstreamModel):
    title: str
    channel_title: str = ""
    published_at: Optional[str] = None
    thumbnails: Dict[str, Thumbnail] = {}

    def thumbnail_url(self):
        for size in ("medium", "high", "default"):
            if size in self.thumbnails:
                return self.thumbnails[size].url
        return ""


class SearchItemId(UpstreamModel):
    video_id: str


class SearchItem(UpstreamModel):
    id: SearchItemId
    snippet: Snippet


class SearchResponse(UpstreamModel):
    items: List[SearchItem] = []


class ContentDetails(UpstreamModel):
    duration: Optional[str] = None


class Statistics(UpstreamModel):
    view_count: Optional[int] = None


class VideoDetails(UpstreamModel):
    id: str
    content_details: Optional[ContentDetails] = None
    statistics: Optional[Statistics] = None


class VideosResponse(UpstreamModel):
    items: List[VideoDetails] = []
