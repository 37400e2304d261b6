"""Fetch video metadata and apply the duration admission filter."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from . import config
from .cancellation import CancellationToken
from .duration import is_admissible, parse_duration
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CandidateVideo:
    """A video that passed the duration filter."""

    video_id: str
    published_at: str
    title: str
    channel_title: str
    duration: int  # seconds

    @property
    def published_timestamp(self) -> float:
        """Publish time as epoch seconds; 0 when missing or malformed."""
        return parse_timestamp(self.published_at)


def parse_timestamp(value: Optional[str]) -> float:
    if not value:
        return 0.0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def to_candidate(item: Dict) -> Optional[CandidateVideo]:
    """Build a CandidateVideo from a videos.list item, or None if not admissible."""
    duration = parse_duration(item.get("contentDetails", {}).get("duration"))
    if not is_admissible(duration):
        return None
    snippet = item.get("snippet", {})
    return CandidateVideo(
        video_id=item["id"],
        published_at=snippet.get("publishedAt", ""),
        title=snippet.get("title", item["id"]),
        channel_title=snippet.get("channelTitle", ""),
        duration=duration,
    )


def qualify_videos(
    client,
    video_ids: List[str],
    cancel_token: CancellationToken,
    batch_size: int = config.VIDEO_BATCH_SIZE,
) -> List[CandidateVideo]:
    """Keep the videos whose duration is admissible.

    Args:
        client: YouTubeClient used to fetch metadata
        video_ids: Video IDs to check
        cancel_token: Cancellation signal of the current run
        batch_size: IDs per metadata request

    Returns:
        Admitted videos in batch order; rejected IDs are dropped silently

    Raises:
        OperationCancelled: If the run is cancelled
        YouTubeError: If a metadata request fails
    """
    videos: List[CandidateVideo] = []

    for start in range(0, len(video_ids), batch_size):
        cancel_token.raise_if_cancelled()

        batch = video_ids[start:start + batch_size]
        for item in client.get_videos(batch, cancel_token):
            candidate = to_candidate(item)
            if candidate:
                videos.append(candidate)

        logger.debug("Qualified %d of first %d videos", len(videos), start + len(batch))

    return videos
