"""Common test fixtures and utilities."""

from unittest.mock import MagicMock

import pytest

from src.playlistgen.cancellation import CancellationToken
from src.playlistgen.core import YouTubeClient
from src.playlistgen.credentials import CredentialStore
from tests.factories import FakeClock, subscription_page


@pytest.fixture
def youtube_client() -> MagicMock:
    """Create a mock YouTube API client.

    Returns:
        MagicMock: Mock YouTube API resource with common methods configured
    """
    mock = MagicMock()
    mock.subscriptions.return_value.list.return_value.execute.return_value = subscription_page([])
    mock.playlists.return_value.insert.return_value.execute.return_value = {"id": "newlist"}
    mock.playlistItems.return_value.insert.return_value.execute.return_value = {"id": "item"}
    return mock


@pytest.fixture
def client(youtube_client: MagicMock) -> YouTubeClient:
    """Create a YouTubeClient around the mock resource with a fixed token."""
    return YouTubeClient(youtube_client, lambda: "access-token")


@pytest.fixture
def cancel_token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock: FakeClock) -> CredentialStore:
    """Create a CredentialStore in a temporary directory."""
    return CredentialStore(store_file=str(tmp_path / "credentials" / "tokens.json"), clock=clock)
