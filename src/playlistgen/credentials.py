"""Persistent storage for OAuth tokens."""

import json
import os
import time
from typing import Callable, Dict, NamedTuple, Optional

from . import config
from .logging_config import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_KEY = "youtube_access_token"
TOKEN_EXPIRY_KEY = "youtube_token_expiry"
REFRESH_TOKEN_KEY = "youtube_refresh_token"


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class StoredTokens(NamedTuple):
    """Snapshot of the stored credential."""

    access_token: Optional[str]
    refresh_token: Optional[str]
    is_expired: bool


class CredentialStore:
    """String-keyed token store backed by a JSON file.

    Holds exactly three keys: the access token, its expiry in epoch
    milliseconds and an optional refresh token.
    """

    def __init__(
        self,
        store_file: Optional[str] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize credential store.

        Args:
            store_file: Path to the JSON file holding the tokens
            clock: Returns the current time in epoch milliseconds
        """
        self.store_file = store_file or config.CREDENTIALS_FILE
        self.clock = clock
        self.values: Dict[str, str] = {}

        if os.path.exists(self.store_file):
            self._load()

    def _load(self) -> None:
        """Load stored values from file."""
        try:
            with open(self.store_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.values = {k: str(v) for k, v in data.items() if isinstance(v, (str, int))}
        except (OSError, ValueError, AttributeError) as e:
            logger.error("Error loading credentials: %s", str(e))
            self.values = {}

    def _save(self) -> None:
        """Write stored values to file."""
        directory = os.path.dirname(self.store_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.store_file, "w", encoding="utf-8") as f:
            json.dump(self.values, f, indent=2)

    def store(
        self,
        access_token: str,
        expires_in: int,
        refresh_token: Optional[str] = None,
    ) -> None:
        """Persist a freshly issued access token.

        Args:
            access_token: Bearer token
            expires_in: Lifetime of the token in seconds
            refresh_token: Long-lived refresh token; an existing one is kept when omitted
        """
        expiry = self.clock() + int(expires_in) * 1000
        self.values[ACCESS_TOKEN_KEY] = access_token
        self.values[TOKEN_EXPIRY_KEY] = str(expiry)
        if refresh_token:
            self.values[REFRESH_TOKEN_KEY] = refresh_token
        self._save()
        logger.debug("Stored access token expiring at %d", expiry)

    def read(self) -> StoredTokens:
        """Read the stored tokens.

        The access token is only handed back together with a verified,
        non-expired expiry marker. Expiry equal to now counts as expired.
        """
        access_token = self.values.get(ACCESS_TOKEN_KEY)
        refresh_token = self.values.get(REFRESH_TOKEN_KEY)
        expiry = self.values.get(TOKEN_EXPIRY_KEY)

        if not access_token or not expiry:
            return StoredTokens(None, refresh_token, True)

        try:
            expires_at = int(expiry)
        except ValueError:
            logger.warning("Ignoring malformed token expiry %r", expiry)
            return StoredTokens(None, refresh_token, True)

        is_expired = self.clock() >= expires_at
        return StoredTokens(None if is_expired else access_token, refresh_token, is_expired)

    def expires_at(self) -> Optional[int]:
        """Stored expiry in epoch milliseconds, if any."""
        try:
            return int(self.values[TOKEN_EXPIRY_KEY])
        except (KeyError, ValueError):
            return None

    def clear(self) -> None:
        """Remove every stored token."""
        for key in (ACCESS_TOKEN_KEY, TOKEN_EXPIRY_KEY, REFRESH_TOKEN_KEY):
            self.values.pop(key, None)
        self._save()
