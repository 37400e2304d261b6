"""Tests for error types."""

from unittest.mock import patch

from src.playlistgen.errors import (
    AuthRequiredError,
    EmptyResultError,
    OperationCancelled,
    UpstreamError,
    YouTubeError,
    log_error,
)


def test_upstream_error_status():
    """Test UpstreamError keeps the status code."""
    error = UpstreamError("Quota exceeded", status=403)
    assert error.status == 403
    assert str(error) == "Quota exceeded"
    assert isinstance(error, YouTubeError)


def test_empty_result_is_youtube_error():
    assert isinstance(EmptyResultError("No subscribed channels found"), YouTubeError)


def test_cancelled_is_distinct():
    """Test cancellation is not caught as an API error."""
    error = OperationCancelled()
    assert str(error) == "Operation cancelled"
    assert not isinstance(error, YouTubeError)


def test_auth_required_default_message():
    assert str(AuthRequiredError()) == "Authentication required"


@patch("src.playlistgen.errors.logger")
def test_log_error_with_context(mock_logger):
    """Test context is prefixed to the message."""
    log_error(ValueError("bad"), "Error processing channel ch1")
    mock_logger.error.assert_called_once_with("Error processing channel ch1: bad")


@patch("src.playlistgen.errors.logger")
def test_log_error_without_context(mock_logger):
    log_error(ValueError("bad"))
    mock_logger.error.assert_called_once_with("bad")
