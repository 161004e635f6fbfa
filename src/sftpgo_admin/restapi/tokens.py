"""Bearer token handling for the SFTPGo REST API.

Provides a thread-safe token cache that refreshes the token from the token
endpoint shortly before it expires, and an httpx auth hook that attaches the
token to every outgoing request.
"""

import time
from collections.abc import Generator
from threading import Lock

import httpx
import structlog

from .errors import parse_error_response
from .types import AccessToken

logger = structlog.get_logger(__name__)

TOKEN_PATH = "/api/v2/token"

DEFAULT_TOKEN_TIMEOUT = 5.0

# Tokens closer than this to their expiry are refreshed before use.
TOKEN_EXPIRY_GRACE = 10.0


class TokenProvider:
    """Obtains and caches the bearer token for API requests.

    The token is fetched with HTTP Basic credentials and reused until it is
    within :data:`TOKEN_EXPIRY_GRACE` seconds of its expiry. Refreshes are
    serialized by a lock, so concurrent callers share a single refresh.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: float = DEFAULT_TOKEN_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the token provider.

        Args:
            base_url: Base URL of the SFTPGo server.
            username: Admin username for token issuance.
            password: Admin password for token issuance.
            timeout: Token request timeout in seconds (default: 5.0).
            transport: Optional httpx transport, mainly for tests.
        """
        self._lock = Lock()
        self._token: AccessToken | None = None
        self._client = httpx.Client(
            base_url=base_url,
            auth=httpx.BasicAuth(username, password),
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def token(self) -> str:
        """Return a valid token, refreshing it if needed.

        Returns:
            The bearer token value.

        Raises:
            httpx.HTTPError: If the token request fails in transport.
            ApiError: If the token endpoint answers with a non-2xx status.
            pydantic.ValidationError: If the token response cannot be decoded.
        """
        with self._lock:
            if self._token is not None:
                remaining = self._token.expires_at_utc.timestamp() - time.time()
                if remaining > TOKEN_EXPIRY_GRACE:
                    logger.debug(
                        "Using cached token",
                        expires_in_seconds=int(remaining),
                    )
                    return self._token.access_token

            self._token = self._refresh()
            return self._token.access_token

    def _refresh(self) -> AccessToken:
        """Request a new token from the token endpoint."""
        response = self._client.post(TOKEN_PATH)
        if not response.is_success:
            raise parse_error_response(response)

        token = AccessToken.model_validate_json(response.content)
        logger.info(
            "Refreshed API token",
            expires_at=token.expires_at_utc.isoformat(),
        )
        return token

    def close(self):
        """Close the token HTTP client."""
        if not self._client.is_closed:
            self._client.close()


class BearerTokenAuth(httpx.Auth):
    """Attach the provider's bearer token to each request.

    If the token cannot be obtained, the request is not sent and the error
    propagates to the caller.
    """

    def __init__(self, provider: TokenProvider):
        self._provider = provider

    def auth_flow(
        self,
        request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._provider.token()}"
        yield request
