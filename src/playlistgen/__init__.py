"""Generate YouTube playlists from subscriptions or pasted video links."""

__version__ = "0.1.0"

# Import all public components
from .auth import AuthState, NavigationContext, TokenLifecycleManager
from .cancellation import CancellationToken
from .core import YouTubeClient, build_youtube_service, validate_token
from .credentials import CredentialStore, StoredTokens
from .duration import is_admissible, parse_duration
from .errors import (
    AuthRequiredError,
    EmptyResultError,
    OperationCancelled,
    TokenExchangeError,
    UpstreamError,
    YouTubeError,
)
from .fetcher import fetch_collection
from .logging_config import configure_logging, get_logger
from .orchestrator import PlaylistGenerator, Progress, RunResult
from .pacing import Pacer
from .qualifier import CandidateVideo, qualify_videos
from .token_exchange import TokenExchangeClient, TokenGrant
from .utils import extract_video_id, extract_video_ids

# Import config variables
from .config import (  # noqa: F401
    YOUTUBE_SCOPES,
    GOOGLE_CLIENT_ID,
    CREDENTIALS_FILE,
    TOKEN_EXCHANGE_URL,
    TOKEN_REFRESH_URL,
)

# Configure logging
configure_logging()

# Get logger for this module
logger = get_logger(__name__)
