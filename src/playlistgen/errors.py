"""Error types and error handling utilities."""

from typing import Optional

from .logging_config import get_logger

logger = get_logger(__name__)

CANCELLED_MESSAGE = "Operation cancelled"


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error(f"{context}: {str(error)}")
    else:
        logger.error(str(error))


class YouTubeError(Exception):
    """Base class for YouTube API errors."""

    pass


class UpstreamError(YouTubeError):
    """Error raised when the API answers with an error status or error body."""

    def __init__(self, message: str, status: Optional[int] = None):
        """Initialize error.

        Args:
            message: Error message reported by the API
            status: HTTP status code, if known
        """
        self.status = status
        super().__init__(message)


class EmptyResultError(YouTubeError):
    """Error raised when a run has nothing to work with."""

    pass


class AuthRequiredError(Exception):
    """Error raised when no valid access token is available."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class OperationCancelled(Exception):
    """Raised when a run is cancelled.

    Callers filter this out of their error display; it is never a failure.
    """

    def __init__(self, message: str = CANCELLED_MESSAGE):
        super().__init__(message)


class TokenExchangeError(Exception):
    """Error raised when the token exchange service rejects a request."""

    pass
