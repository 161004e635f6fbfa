"""SFTPGo REST API client package.

Provides a lightweight HTTP client for the SFTPGo admin REST API that
authenticates with bearer tokens, paginates list endpoints and returns
validated API records.

Exports:
    SftpgoApiClient: HTTP client with authentication and error handling.
    TokenProvider: Cached bearer token source.
    ApiError: Base error for non-2xx API responses.
    types: Module containing Pydantic models for API records.
"""

from . import types
from .client import DEFAULT_TIMEOUT, USERS_PAGE_SIZE, SftpgoApiClient
from .errors import (
    ApiError,
    ErrorKind,
    ForbiddenError,
    UnauthorizedError,
    parse_error_response,
)
from .tokens import DEFAULT_TOKEN_TIMEOUT, BearerTokenAuth, TokenProvider

__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_TOKEN_TIMEOUT",
    "USERS_PAGE_SIZE",
    "ApiError",
    "BearerTokenAuth",
    "ErrorKind",
    "ForbiddenError",
    "SftpgoApiClient",
    "TokenProvider",
    "UnauthorizedError",
    "parse_error_response",
    "types",
]
