import logging

import requests
from pydantic import ValidationError

from durations import format_duration
from models import Video
from schemas import SearchResponse, VideosResponse

logger = logging.getLogger(__name__)

MUSIC_CATEGORY_ID = "10"


class YouTubeAPIError(Exception):
    pass


def _call(url, params, timeout):
    """GET a YouTube API endpoint, returns the decoded JSON or None if it is not JSON"""
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        raise YouTubeAPIError(f"YouTube API request failed: {e}") from e

    if not response.ok:
        logger.error("YouTube API error response: %s %s", response.status_code, response.text)
        raise YouTubeAPIError(f"YouTube API error: {response.status_code} - {response.text}")

    try:
        return response.json()
    except ValueError:
        return None


def _parse(schema, payload):
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        logger.warning("Unexpected %s payload: %s", schema.__name__, e)
        return None


def search_youtube(query, max_results, api_key, base_url, timeout=10):
    """Search music videos and attach their duration and view count"""
    logger.info("YouTube search request for query: %s", query)
    payload = _call(f"{base_url}/search", {
        'part': 'snippet',
        'q': query,
        'type': 'video',
        'videoCategoryId': MUSIC_CATEGORY_ID,
        'maxResults': max_results,
        'key': api_key,
    }, timeout)

    results = _parse(SearchResponse, payload)
    items = [item for item in results.items if item.id.video_id] if results else []
    if not items:
        return []
    logger.info("YouTube search found %d videos", len(items))

    video_ids = [item.id.video_id for item in items]
    payload = _call(f"{base_url}/videos", {
        'part': 'contentDetails,statistics',
        'id': ','.join(video_ids),
        'key': api_key,
    }, timeout)

    details = _parse(VideosResponse, payload)
    details_by_id = {d.id: d for d in details.items} if details else {}

    videos = []
    for item in items:
        detail = details_by_id.get(item.id.video_id)
        duration = ""
        view_count = None
        if detail:
            if detail.content_details:
                duration = format_duration(detail.content_details.duration)
            if detail.statistics:
                view_count = detail.statistics.view_count

        videos.append(Video(
            id=item.id.video_id,
            title=item.snippet.title,
            channel_title=item.snippet.channel_title,
            thumbnail=item.snippet.thumbnail_url(),
            duration=duration,
            published_at=item.snippet.published_at,
            view_count=view_count,
        ))

    return videos
