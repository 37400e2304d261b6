"""Utility functions for YouTube video links."""

from typing import Iterable, List, Optional
from urllib.parse import parse_qs, urlparse

from .logging_config import get_logger

logger = get_logger(__name__)

SHORT_HOSTS = {"youtu.be"}
LONG_HOSTS = {"youtube.com", "www.youtube.com"}


def extract_video_id(link: str) -> Optional[str]:
    """Extract the video ID from a YouTube video link.

    Accepts ``https://youtu.be/<id>`` and ``https://www.youtube.com/watch?v=<id>``.

    Args:
        link: A video URL

    Returns:
        The video ID, or None if the link is not a recognised video URL
    """
    try:
        url = urlparse(link.strip())
    except ValueError:
        return None

    host = (url.hostname or "").lower()
    if host in SHORT_HOSTS:
        segment = url.path.lstrip("/").split("/", 1)[0]
        return segment or None
    if host in LONG_HOSTS:
        values = parse_qs(url.query).get("v")
        return values[0] if values and values[0] else None
    return None


def extract_video_ids(links: Iterable[str]) -> List[str]:
    """Extract unique video IDs from links, keeping first-seen order.

    Lines that are blank or do not yield an ID are skipped.
    """
    video_ids: List[str] = []
    seen = set()
    for link in links:
        if not link or not link.strip():
            continue
        video_id = extract_video_id(link)
        if not video_id:
            logger.debug("Ignoring link without a video ID: %s", link)
            continue
        if video_id not in seen:
            seen.add(video_id)
            video_ids.append(video_id)
    return video_ids
