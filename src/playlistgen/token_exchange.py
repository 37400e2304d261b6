"""Client for the backend relay that swaps OAuth codes for tokens."""

from typing import NamedTuple, Optional

import requests

from . import config
from .errors import TokenExchangeError
from .logging_config import get_logger

logger = get_logger(__name__)


class TokenGrant(NamedTuple):
    """Tokens issued by the exchange service."""

    access_token: str
    expires_in: int
    refresh_token: Optional[str] = None


class TokenExchangeClient:
    """Talks to the exchange and refresh relay endpoints."""

    def __init__(
        self,
        exchange_url: Optional[str] = None,
        refresh_url: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.exchange_url = exchange_url or config.TOKEN_EXCHANGE_URL
        self.refresh_url = refresh_url or config.TOKEN_REFRESH_URL
        self.timeout = timeout
        self.session = session or requests.Session()

    def exchange_code(self, code: str) -> TokenGrant:
        """Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the OAuth redirect

        Returns:
            TokenGrant, possibly carrying a refresh token

        Raises:
            TokenExchangeError: If the service rejects the code
        """
        data = self._post(self.exchange_url, {"code": code})
        return self._grant(data, data.get("refresh_token"))

    def refresh(self, refresh_token: str) -> TokenGrant:
        """Get a new access token using a refresh token.

        Raises:
            TokenExchangeError: If the refresh token is rejected
        """
        data = self._post(self.refresh_url, {"refresh_token": refresh_token})
        return self._grant(data, None)

    def _post(self, url: str, payload: dict) -> dict:
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TokenExchangeError(f"Token service unreachable: {str(e)}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok or not isinstance(data, dict) or data.get("error"):
            message = data.get("error") if isinstance(data, dict) else None
            raise TokenExchangeError(
                f"Token service returned {response.status_code}: {message or 'no token'}"
            )
        return data

    @staticmethod
    def _grant(data: dict, refresh_token: Optional[str]) -> TokenGrant:
        access_token = data.get("access_token")
        if not access_token:
            raise TokenExchangeError("Token service response has no access_token")
        try:
            expires_in = int(data.get("expires_in") or config.DEFAULT_EXPIRES_IN)
        except (TypeError, ValueError) as e:
            raise TokenExchangeError(
                f"Token service response has an invalid expires_in: {data.get('expires_in')!r}"
            ) from e
        return TokenGrant(
            access_token=access_token,
            expires_in=expires_in,
            refresh_token=refresh_token,
        )
