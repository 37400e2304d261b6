"""Playlist generation pipelines."""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional

from . import config
from .cancellation import CancellationToken
from .errors import AuthRequiredError, EmptyResultError, OperationCancelled, log_error
from .logging_config import get_logger
from .pacing import Pacer
from .qualifier import CandidateVideo, qualify_videos
from .utils import extract_video_ids

logger = get_logger(__name__)

SUBSCRIPTIONS_DESCRIPTION = "Generated playlist from subscriptions."
LINKS_DESCRIPTION = "Generated playlist from video links."
TITLE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Progress checkpoints, in percent
CHANNEL_STAGE_END = 75
SUBSCRIPTIONS_CREATE_AT = 80
LINKS_DETAILS_AT = 25
LINKS_CREATE_AT = 75
APPEND_AT = 90


class Progress(NamedTuple):
    """Stage label and completion percentage (0-100)."""

    label: str
    percentage: int


IDLE = Progress("", 0)


@dataclass
class RunResult:
    """Outcome of a completed run.

    ``video_count`` counts every qualified video, including those whose
    append failed; subtract ``len(failed_videos)`` for the number added.
    """

    playlist_id: str
    video_count: int


class FailedItemLog:
    """Append-only record of items a run had to skip."""

    def __init__(self) -> None:
        self._items: List[str] = []

    def record(self, item: str) -> None:
        self._items.append(item)

    def reset(self) -> None:
        self._items = []

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))


class PlaylistGenerator:
    """Builds a new private playlist from subscriptions or from video links.

    One run at a time; the caller keeps the trigger disabled while
    ``is_loading`` is set.
    """

    def __init__(
        self,
        client,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        pacer: Optional[Pacer] = None,
        on_progress: Optional[Callable[[Progress], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize generator.

        Args:
            client: YouTubeClient used for every API call
            token_provider: Returns the current access token; defaults to the client's
            pacer: Pause policy between channels
            on_progress: Called with each progress update
            clock: Returns the local time used in generated titles
        """
        self.client = client
        self.token_provider = token_provider or client.token_provider
        self.pacer = pacer or Pacer()
        self.on_progress = on_progress
        self.clock = clock

        self.is_loading = False
        self.progress = IDLE
        self.failed_videos = FailedItemLog()
        self.skipped_channels = FailedItemLog()
        self._cancel_token: Optional[CancellationToken] = None
        self._run_lock = threading.Lock()

    def generate_from_subscriptions(self, title: Optional[str] = None) -> RunResult:
        """Create a playlist with the most recent videos of subscribed channels.

        Raises:
            AuthRequiredError: If there is no valid access token
            EmptyResultError: If no channels or no suitable videos are found
            OperationCancelled: If the run is cancelled
            YouTubeError: If a stage-level API call fails
        """
        return self._run(
            self._collect_from_subscriptions,
            title or self.clock().strftime(TITLE_TIME_FORMAT),
            SUBSCRIPTIONS_DESCRIPTION,
            SUBSCRIPTIONS_CREATE_AT,
        )

    def generate_from_links(self, links: Iterable[str], title: Optional[str] = None) -> RunResult:
        """Create a playlist from pasted video links, in the order given.

        Raises:
            AuthRequiredError: If there is no valid access token
            EmptyResultError: If no link yields a video ID
            OperationCancelled: If the run is cancelled
            YouTubeError: If a stage-level API call fails
        """
        links = list(links)
        return self._run(
            lambda cancel_token: self._collect_from_links(links, cancel_token),
            title or f"Custom Playlist {self.clock().strftime(TITLE_TIME_FORMAT)}",
            LINKS_DESCRIPTION,
            LINKS_CREATE_AT,
        )

    def cancel(self) -> None:
        """Cancel the active run, if any.

        A cancelled run that is still unwinding never touches the state of a
        run started after it.
        """
        with self._run_lock:
            cancel_token = self._cancel_token
            if cancel_token is None or cancel_token.cancelled:
                return
            cancel_token.cancel()
            self.is_loading = False
        self._update_progress(*IDLE)

    def _run(
        self,
        collect: Callable[[CancellationToken], List[CandidateVideo]],
        title: str,
        description: str,
        create_at: int,
    ) -> RunResult:
        if not self.token_provider():
            raise AuthRequiredError()

        cancel_token = CancellationToken()
        with self._run_lock:
            self._cancel_token = cancel_token
            self.is_loading = True
        self.progress = IDLE
        self.failed_videos.reset()
        self.skipped_channels.reset()

        try:
            videos = collect(cancel_token)

            self._update_progress("Creating playlist", create_at)
            playlist_id = self.client.create_playlist(title, description, cancel_token)

            self._update_progress("Adding videos", APPEND_AT)
            self._append_videos(playlist_id, videos, cancel_token)

            self._update_progress("Complete", 100)
            logger.info(
                "Added %d of %d videos to playlist %s",
                len(videos) - len(self.failed_videos),
                len(videos),
                playlist_id,
            )
            return RunResult(playlist_id=playlist_id, video_count=len(videos))
        except OperationCancelled:
            logger.info("Playlist generation cancelled by user")
            if self._is_current(cancel_token):
                self._update_progress("Cancelled", 0)
            raise
        finally:
            with self._run_lock:
                if self._cancel_token is cancel_token:
                    self._cancel_token = None
                    self.is_loading = False

    def _is_current(self, cancel_token: CancellationToken) -> bool:
        with self._run_lock:
            return self._cancel_token is cancel_token

    def _collect_from_subscriptions(self, cancel_token: CancellationToken) -> List[CandidateVideo]:
        self._update_progress("Fetching subscribed channels", 0)
        channels = self.client.list_subscribed_channels(cancel_token)
        if not channels:
            raise EmptyResultError("No subscribed channels found")
        logger.info("Found %d subscribed channels", len(channels))

        videos: List[CandidateVideo] = []
        for index, channel_id in enumerate(channels):
            cancel_token.raise_if_cancelled()
            self._update_progress(
                "Processing channels",
                round((index + 1) / len(channels) * CHANNEL_STAGE_END),
            )

            try:
                videos.extend(self._collect_channel(channel_id, cancel_token))
            except (OperationCancelled, AuthRequiredError):
                raise
            except Exception as e:
                log_error(e, f"Error processing channel {channel_id}")
                self.skipped_channels.record(channel_id)

            if index < len(channels) - 1:
                self.pacer.pause(cancel_token)

        if not videos:
            raise EmptyResultError("No suitable videos found")

        videos.sort(key=lambda video: video.published_timestamp, reverse=True)
        return videos[: config.PLAYLIST_VIDEO_LIMIT]

    def _collect_channel(
        self, channel_id: str, cancel_token: CancellationToken
    ) -> List[CandidateVideo]:
        uploads_id = self.client.get_uploads_playlist_id(channel_id, cancel_token)
        if not uploads_id:
            logger.warning("No uploads playlist found for channel %s", channel_id)
            self.skipped_channels.record(channel_id)
            return []

        video_ids = self.client.list_playlist_video_ids(
            uploads_id, cancel_token, max_results=config.CHANNEL_VIDEO_LIMIT
        )
        return qualify_videos(self.client, video_ids, cancel_token)

    def _collect_from_links(
        self, links: List[str], cancel_token: CancellationToken
    ) -> List[CandidateVideo]:
        self._update_progress("Extracting video IDs", 0)
        video_ids = extract_video_ids(links)
        if not video_ids:
            raise EmptyResultError("No valid video links found")

        self._update_progress("Fetching video details", LINKS_DETAILS_AT)
        return qualify_videos(self.client, video_ids, cancel_token)

    def _append_videos(
        self,
        playlist_id: str,
        videos: List[CandidateVideo],
        cancel_token: CancellationToken,
    ) -> None:
        for video in videos:
            cancel_token.raise_if_cancelled()
            try:
                self.client.insert_playlist_item(playlist_id, video.video_id, cancel_token)
                logger.debug("Added video %s to playlist", video.title)
            except (OperationCancelled, AuthRequiredError):
                raise
            except Exception as e:
                log_error(e, f"Failed to add video {video.title}")
                self.failed_videos.record(video.title)

    def _update_progress(self, label: str, percentage: int) -> None:
        self.progress = Progress(label, percentage)
        if self.on_progress:
            self.on_progress(self.progress)
