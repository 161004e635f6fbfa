"""SFTPGo REST API client.

Provides HTTP client with bearer token authentication, thread safety,
pagination and automatic response validation using Pydantic models.
"""

import threading
import time
from typing import Any
from urllib.parse import quote

import httpx
import pydantic
import structlog

from .errors import parse_error_response
from .tokens import DEFAULT_TOKEN_TIMEOUT, BearerTokenAuth, TokenProvider
from .types import ConnectionStatus, User, UserQuotaScan, UserQuotaScans, Users

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 15.0

# Page size used by get_all_users; a shorter page marks the last one.
USERS_PAGE_SIZE = 500

USERS_PATH = "/api/v2/users"
QUOTA_SCANS_PATH = "/api/v2/quota-scans"
CONNECTIONS_PATH = "/api/v2/connections"

_users_adapter = pydantic.TypeAdapter(list[User])
_quota_scans_adapter = pydantic.TypeAdapter(list[UserQuotaScan])
_connections_adapter = pydantic.TypeAdapter(list[ConnectionStatus])


class SftpgoApiClient:
    """HTTP client for the SFTPGo admin REST API.

    Handles authentication, makes HTTP requests, classifies error responses
    and returns Pydantic-validated records. Every request carries a bearer
    token from a shared :class:`TokenProvider`.

    Thread-safe through thread-local storage of httpx.Client instances and a
    lock-guarded token provider. Can be used as a context manager for
    automatic cleanup.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: float = DEFAULT_TIMEOUT,
        token_timeout: float = DEFAULT_TOKEN_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the REST API client.

        Args:
            base_url: Base URL of the SFTPGo server (e.g., "http://localhost:8080").
            username: Admin username used to obtain tokens.
            password: Admin password used to obtain tokens.
            timeout: Request timeout in seconds (default: 15.0).
            token_timeout: Token request timeout in seconds (default: 5.0).
            transport: Optional httpx transport shared by all requests.

        Raises:
            ValueError: If base_url is empty or a timeout is not positive.
        """
        if not base_url:
            msg = "base_url cannot be empty"
            raise ValueError(msg)
        if timeout <= 0 or token_timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

        self._headers = {"Accept": "application/json"}

        self._token_provider = TokenProvider(
            base_url=self.base_url,
            username=username,
            password=password,
            timeout=token_timeout,
            transport=transport,
        )
        self._auth = BearerTokenAuth(self._token_provider)

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()
        self._clients: list[httpx.Client] = []
        self._clients_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Get or create thread-local httpx client.

        Each thread gets its own httpx.Client instance. Clients are created
        lazily and reused within the same thread.

        Returns:
            Thread-local httpx.Client instance.
        """
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            self._local.client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                auth=self._auth,
                timeout=self._timeout,
                transport=self._transport,
            )
            with self._clients_lock:
                self._clients.append(self._local.client)
        return self._local.client

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close all HTTP clients created by this instance."""
        with self._clients_lock:
            for client in self._clients:
                if not client.is_closed:
                    client.close()
            self._clients.clear()
        self._token_provider.close()

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Make HTTP request to the SFTPGo API.

        Handles request execution and error classification. Logs request
        details and duration.

        Args:
            method: HTTP method.
            endpoint: API endpoint path (e.g., "/api/v2/users").
            params: Optional query parameters.
            json: Optional JSON body.

        Returns:
            The successful (2xx) response.

        Raises:
            httpx.HTTPError: If the HTTP request fails in transport.
            ApiError: If the API answers with a non-2xx status.
            pydantic.ValidationError: If an error body cannot be decoded.
        """
        start_time = time.time()
        params = params or {}

        try:
            logger.debug(
                "Making API request",
                method=method,
                endpoint=endpoint,
                params=params,
            )
            response = self.client.request(method, endpoint, params=params, json=json)
        except httpx.HTTPError:
            duration = time.time() - start_time
            logger.exception(
                "API request failed",
                method=method,
                endpoint=endpoint,
                duration_seconds=round(duration, 3),
            )
            raise

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )
        if not response.is_success:
            error = parse_error_response(response)
            logger.warning(
                "API error response",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                error_message=str(error),
            )
            raise error
        return response

    def get_users(self, offset: int = 0, limit: int = 0, order: str = "") -> Users:
        """Fetch one page of users.

        Args:
            offset: Number of users to skip, omitted when 0.
            limit: Maximum number of users to return, omitted when 0.
            order: Sort order ("ASC" or "DESC"), omitted when empty.

        Returns:
            Validated users for the requested page.

        Raises:
            httpx.HTTPError: If HTTP request fails.
            ApiError: If the API answers with an error.
            pydantic.ValidationError: If the response cannot be decoded.
        """
        params: dict[str, Any] = {}
        if offset > 0:
            params["offset"] = offset
        if limit > 0:
            params["limit"] = limit
        if order:
            params["order"] = order

        response = self._request("GET", USERS_PATH, params=params)
        return Users(_users_adapter.validate_json(response.content))

    def get_all_users(self) -> Users:
        """Fetch every user by walking the users endpoint page by page.

        An error on any page is raised and the pages fetched so far are
        discarded.

        Returns:
            All users, in server order.
        """
        users = Users()
        offset = 0
        while True:
            page = self.get_users(offset=offset, limit=USERS_PAGE_SIZE)
            users.extend(page)
            if len(page) < USERS_PAGE_SIZE:
                break
            offset += USERS_PAGE_SIZE

        logger.debug("Fetched all users", count=len(users))
        return users

    def get_user_quota_scans(self) -> UserQuotaScans:
        """Fetch the quota scans currently running."""
        response = self._request("GET", QUOTA_SCANS_PATH)
        return UserQuotaScans(_quota_scans_adapter.validate_json(response.content))

    def get_active_connections(self) -> list[ConnectionStatus]:
        """Fetch the active connections."""
        response = self._request("GET", CONNECTIONS_PATH)
        return _connections_adapter.validate_json(response.content)

    def start_user_quota_scan(self, user: User) -> None:
        """Start a quota scan for ``user``.

        Raises:
            ApiError: If the server rejects the request, e.g. a scan is
                already running for the user.
        """
        self._request("POST", QUOTA_SCANS_PATH, json=user.to_payload())
        logger.info("Started quota scan", username=user.username)

    def terminate_active_connection(self, connection_id: str) -> None:
        """Close the active connection identified by ``connection_id``."""
        endpoint = f"{CONNECTIONS_PATH}/{quote(connection_id, safe='')}"
        self._request("DELETE", endpoint)
        logger.info("Terminated connection", connection_id=connection_id)
