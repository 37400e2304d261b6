"""Access token lifecycle: bootstrap, validation, refresh and logout."""

import threading
import webbrowser
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import parse_qs, urlparse, urlunparse

from google_auth_oauthlib.flow import Flow

from . import config
from .core import build_youtube_service, validate_token
from .credentials import CredentialStore
from .errors import TokenExchangeError, log_error
from .logging_config import get_logger
from .token_exchange import TokenExchangeClient, TokenGrant

logger = get_logger(__name__)


class AuthState(Enum):
    """Authentication state of the session."""

    UNAUTHENTICATED = "unauthenticated"
    VALIDATING = "validating"
    AUTHENTICATED = "authenticated"


@dataclass
class AuthSession:
    """In-memory authentication state; written only by TokenLifecycleManager."""

    state: AuthState = AuthState.UNAUTHENTICATED
    access_token: Optional[str] = None
    expires_at: Optional[int] = None  # epoch milliseconds


@dataclass
class NavigationContext:
    """The location the session was opened with, e.g. an OAuth redirect."""

    url: str = ""
    replace_location: Optional[Callable[[str], None]] = None

    def _param(self, name: str) -> Optional[str]:
        values = parse_qs(urlparse(self.url).query).get(name)
        return values[0] if values else None

    @property
    def code(self) -> Optional[str]:
        return self._param("code")

    @property
    def error(self) -> Optional[str]:
        return self._param("error")

    def scrub(self) -> None:
        """Drop the query string (and with it the code) from the visible location."""
        parsed = urlparse(self.url)
        self.url = urlunparse(parsed._replace(query="", fragment=""))
        if self.replace_location:
            self.replace_location(self.url)


def default_probe(token: str) -> bool:
    return validate_token(build_youtube_service(), token)


class TokenLifecycleManager:
    """Owns the access token and keeps it valid for the session.

    Other components read the token through :meth:`current_token`; only this
    class writes the credential store or the session state.
    """

    def __init__(
        self,
        store: Optional[CredentialStore] = None,
        exchange: Optional[TokenExchangeClient] = None,
        probe: Callable[[str], bool] = default_probe,
        navigator: Callable[[str], object] = webbrowser.open,
        sweep_interval: float = config.TOKEN_SWEEP_INTERVAL,
        background_sweep: bool = True,
        client_id: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        scopes: Optional[List[str]] = None,
    ):
        """Initialize the manager.

        Args:
            store: Persistent token store
            exchange: Client for the token exchange service
            probe: Returns True if the API accepts a token
            navigator: Opens the authorization URL
            sweep_interval: Seconds between background expiry checks
            background_sweep: Whether to run expiry checks on a daemon thread
            client_id: OAuth client ID
            redirect_uri: Where the identity provider sends the user back
            scopes: OAuth scopes to request
        """
        self.store = store or CredentialStore()
        self.exchange = exchange or TokenExchangeClient()
        self.probe = probe
        self.navigator = navigator
        self.sweep_interval = sweep_interval
        self.background_sweep = background_sweep
        self.client_id = client_id or config.GOOGLE_CLIENT_ID
        self.redirect_uri = redirect_uri or config.REDIRECT_URI
        self.scopes = scopes or config.YOUTUBE_SCOPES

        self.session = AuthSession()
        self._lock = threading.RLock()
        self._sweep_stop: Optional[threading.Event] = None
        self._sweep_thread: Optional[threading.Thread] = None
        self._generation = 0  # bumped by logout; stale grants are dropped

    @property
    def state(self) -> AuthState:
        return self.session.state

    @property
    def is_authenticated(self) -> bool:
        return self.session.state is AuthState.AUTHENTICATED

    @property
    def is_validating(self) -> bool:
        return self.session.state is AuthState.VALIDATING

    def current_token(self) -> Optional[str]:
        """The access token, or None if not authenticated or already expired."""
        with self._lock:
            if self.session.state is not AuthState.AUTHENTICATED:
                return None
            expires_at = self.session.expires_at
            if expires_at is not None and self.store.clock() >= expires_at:
                return None
            return self.session.access_token

    def bootstrap(self, context: Optional[NavigationContext] = None) -> AuthState:
        """Establish the session state from a redirect or from stored tokens.

        Always leaves the VALIDATING state before returning.
        """
        context = context or NavigationContext()
        self._set_state(AuthState.VALIDATING)
        try:
            error = context.error
            code = context.code
            if error:
                logger.error("OAuth error: %s", error)
                self._set_unauthenticated()
            elif code:
                self._bootstrap_from_code(code, context)
            else:
                self._bootstrap_from_store()
        finally:
            if self.session.state is AuthState.VALIDATING:
                self._set_unauthenticated()
        return self.session.state

    def _bootstrap_from_code(self, code: str, context: NavigationContext) -> None:
        generation = self._generation
        try:
            grant = self.exchange.exchange_code(code)
        except TokenExchangeError as e:
            log_error(e, "Failed to exchange authorization code for tokens")
            self._set_unauthenticated()
            return

        self._accept(grant, grant.refresh_token, generation)
        context.scrub()

    def _bootstrap_from_store(self) -> None:
        stored = self.store.read()

        if stored.access_token and not stored.is_expired:
            if self.probe(stored.access_token):
                self._set_authenticated(stored.access_token, self.store.expires_at())
                return
            logger.info("Stored access token failed validation")

        if stored.refresh_token:
            self.refresh()
            return

        if stored.access_token:
            logger.warning("No refresh token stored; the access token cannot be renewed")
            self._set_authenticated(stored.access_token, self.store.expires_at())
            return

        self._set_unauthenticated()

    def refresh(self) -> bool:
        """Replace the access token using the stored refresh token.

        A rejected refresh token logs the user out.

        Returns:
            True if a new access token was stored
        """
        with self._lock:
            generation = self._generation
            refresh_token = self.store.read().refresh_token
        if not refresh_token:
            return False

        try:
            grant = self.exchange.refresh(refresh_token)
        except TokenExchangeError as e:
            log_error(e, "Token refresh failed")
            if generation == self._generation:
                self.logout()
            return False

        if not self._accept(grant, refresh_token, generation):
            return False
        logger.info("Access token refreshed")
        return True

    def check_expiry(self) -> None:
        """Refresh an expired token, or log out if it cannot be refreshed."""
        if self.session.state is not AuthState.AUTHENTICATED:
            return

        stored = self.store.read()
        if not stored.is_expired:
            return

        if stored.refresh_token:
            self.refresh()
        else:
            logger.info("Access token expired and cannot be refreshed")
            self.logout()

    def authenticate(self, force_consent: bool = False) -> None:
        """Send the user to the identity provider's consent screen.

        Args:
            force_consent: Ask for consent again, which guarantees a new
                refresh token; otherwise only ask to pick an account
        """
        flow = Flow.from_client_config(
            {
                "web": {
                    "client_id": self.client_id,
                    "auth_uri": config.AUTH_URI,
                    "token_uri": config.TOKEN_URI,
                }
            },
            scopes=self.scopes,
            redirect_uri=self.redirect_uri,
            autogenerate_code_verifier=False,
        )
        url, _ = flow.authorization_url(
            access_type="offline",
            prompt="consent" if force_consent else "select_account",
        )
        self.navigator(url)

    def logout(self) -> None:
        """Forget every token and stop background checks.

        A refresh or code exchange still waiting on the relay when this runs
        has its grant discarded.
        """
        with self._lock:
            self._generation += 1
        self._stop_sweep()
        with self._lock:
            self.store.clear()
            self.session.access_token = None
            self.session.expires_at = None
            self.session.state = AuthState.UNAUTHENTICATED
        logger.info("Logged out")

    def force_reauthenticate(self) -> None:
        self.logout()
        self.authenticate(force_consent=True)

    def close(self) -> None:
        self._stop_sweep()

    def _accept(self, grant: TokenGrant, refresh_token: Optional[str], generation: int) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.info("Discarding tokens issued before logout")
                return False
            self.store.store(grant.access_token, grant.expires_in, refresh_token)
            self._set_authenticated(grant.access_token, self.store.expires_at())
        return True

    def _set_authenticated(self, access_token: str, expires_at: Optional[int]) -> None:
        with self._lock:
            self.session.access_token = access_token
            self.session.expires_at = expires_at
            self.session.state = AuthState.AUTHENTICATED
        if self.background_sweep:
            self._start_sweep()

    def _set_unauthenticated(self) -> None:
        with self._lock:
            self.session.access_token = None
            self.session.expires_at = None
            self.session.state = AuthState.UNAUTHENTICATED

    def _set_state(self, state: AuthState) -> None:
        with self._lock:
            self.session.state = state

    def _start_sweep(self) -> None:
        with self._lock:
            if self._sweep_thread is not None and self._sweep_thread.is_alive():
                return
            stop = threading.Event()
            thread = threading.Thread(
                target=self._sweep, args=(stop,), name="token-sweep", daemon=True
            )
            self._sweep_stop = stop
            self._sweep_thread = thread
        thread.start()

    def _stop_sweep(self) -> None:
        with self._lock:
            stop, thread = self._sweep_stop, self._sweep_thread
            self._sweep_stop = None
            self._sweep_thread = None
        if stop is not None:
            stop.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _sweep(self, stop: threading.Event) -> None:
        while not stop.wait(self.sweep_interval):
            try:
                self.check_expiry()
            except Exception as e:
                log_error(e, "Token expiry check failed")
