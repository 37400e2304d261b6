"""YouTube Data API client bound to a token provider and a cancellation token."""

from typing import Callable, Dict, List, Optional

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from . import config
from .cancellation import CancellationToken
from .errors import AuthRequiredError, OperationCancelled, UpstreamError, YouTubeError
from .fetcher import fetch_collection
from .logging_config import get_logger

logger = get_logger(__name__)

TokenProvider = Callable[[], Optional[str]]


def build_youtube_service(http: Optional[httplib2.Http] = None):
    """Build a YouTube discovery resource without attached credentials.

    Authorization is added per request by :class:`YouTubeClient`.
    """
    return build("youtube", "v3", http=http or httplib2.Http(), cache_discovery=False)


def validate_token(youtube, token: str) -> bool:
    """Check that an access token is accepted with a minimal API call.

    Args:
        youtube: YouTube API resource
        token: Bearer token to check

    Returns:
        True if the API accepted the token
    """
    # pylint: disable=no-member
    request = youtube.channels().list(part="snippet", mine=True, maxResults=1)
    # pylint: enable=no-member
    request.headers["authorization"] = f"Bearer {token}"
    try:
        response = request.execute()
    except Exception as e:
        logger.info("Stored token rejected: %s", str(e))
        return False
    return not (isinstance(response, dict) and response.get("error"))


class YouTubeClient:
    """Wrapper for the YouTube API operations used to build playlists."""

    def __init__(self, youtube, token_provider: TokenProvider, http=None):
        """Initialize API wrapper.

        Args:
            youtube: YouTube API resource
            token_provider: Returns the current bearer token, or None
            http: Transport shared by ``youtube``
        """
        self.youtube = youtube
        self.token_provider = token_provider
        self.http = http

    @classmethod
    def create(cls, token_provider: TokenProvider) -> "YouTubeClient":
        http = httplib2.Http()
        return cls(build_youtube_service(http), token_provider, http)

    def execute(self, request, cancel_token: CancellationToken) -> Dict:
        """Run one API request with the current token.

        A call already sent when the run is cancelled runs to completion on
        the server; its response or error is discarded.

        Raises:
            OperationCancelled: If the run was cancelled before or during the call
            AuthRequiredError: If no valid token is available
            UpstreamError: If the API answered with an error
        """
        cancel_token.raise_if_cancelled()

        token = self.token_provider()
        if not token:
            raise AuthRequiredError()
        request.headers["authorization"] = f"Bearer {token}"

        try:
            response = request.execute()
        except HttpError as e:
            cancel_token.raise_if_cancelled()
            raise UpstreamError(str(e.reason), status=e.resp.status) from e
        except Exception as e:
            cancel_token.raise_if_cancelled()
            raise UpstreamError(f"Request failed: {str(e)}") from e

        cancel_token.raise_if_cancelled()

        if isinstance(response, dict) and response.get("error"):
            error = response["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise UpstreamError(message or "Unknown API error")
        return response if response is not None else {}

    def list_subscribed_channels(self, cancel_token: CancellationToken) -> List[str]:
        """Get the channel IDs the user is subscribed to."""
        items = fetch_collection(
            self,
            lambda page_token, page_size: self.youtube.subscriptions().list(
                part="snippet",
                mine=True,
                maxResults=page_size,
                pageToken=page_token,
            ),
            cancel_token,
        )
        return [item["snippet"]["resourceId"]["channelId"] for item in items]

    def get_uploads_playlist_id(
        self, channel_id: str, cancel_token: CancellationToken
    ) -> Optional[str]:
        """Get the ID of a channel's uploads playlist, or None if it has none."""
        response = self.execute(
            self.youtube.channels().list(part="contentDetails", id=channel_id),
            cancel_token,
        )
        items = response.get("items") or []
        if not items:
            return None
        return items[0].get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")

    def list_playlist_video_ids(
        self,
        playlist_id: str,
        cancel_token: CancellationToken,
        max_results: Optional[int] = None,
    ) -> List[str]:
        """Get video IDs from a playlist, newest uploads first for upload lists."""
        items = fetch_collection(
            self,
            lambda page_token, page_size: self.youtube.playlistItems().list(
                part="contentDetails",
                playlistId=playlist_id,
                maxResults=page_size,
                pageToken=page_token,
            ),
            cancel_token,
            max_results=max_results,
        )
        return [item["contentDetails"]["videoId"] for item in items]

    def get_videos(self, video_ids: List[str], cancel_token: CancellationToken) -> List[Dict]:
        """Get snippet and content details for up to 50 videos."""
        if len(video_ids) > config.VIDEO_BATCH_SIZE:
            raise ValueError(f"At most {config.VIDEO_BATCH_SIZE} video IDs per request")
        response = self.execute(
            self.youtube.videos().list(
                part="contentDetails,snippet",
                id=",".join(video_ids),
                maxResults=config.VIDEO_BATCH_SIZE,
            ),
            cancel_token,
        )
        return response.get("items", [])

    def create_playlist(
        self,
        title: str,
        description: str,
        cancel_token: CancellationToken,
        privacy_status: str = "private",
    ) -> str:
        """Create a playlist and return its ID."""
        response = self.execute(
            self.youtube.playlists().insert(
                part="snippet,status",
                body={
                    "snippet": {"title": title, "description": description},
                    "status": {"privacyStatus": privacy_status},
                },
            ),
            cancel_token,
        )
        playlist_id = response.get("id")
        if not playlist_id:
            raise YouTubeError("Playlist creation returned no playlist ID")
        logger.info("Playlist created with ID: %s", playlist_id)
        return playlist_id

    def insert_playlist_item(
        self, playlist_id: str, video_id: str, cancel_token: CancellationToken
    ) -> None:
        """Append a video to the end of a playlist."""
        self.execute(
            self.youtube.playlistItems().insert(
                part="snippet",
                body={
                    "snippet": {
                        "playlistId": playlist_id,
                        "resourceId": {"kind": "youtube#video", "videoId": video_id},
                    }
                },
            ),
            cancel_token,
        )
