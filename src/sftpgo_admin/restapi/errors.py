"""SFTPGo API error types and response classification."""

import enum
import http

import httpx
from pydantic import BaseModel


class ErrorKind(enum.Enum):
    """Classification of an error response."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    API = "api"


class ErrorResponse(BaseModel):
    """Error body returned by the server for failed requests."""

    message: str = ""
    error: str = ""


class ApiError(Exception):
    """Raised when the SFTPGo API answers with a non-2xx status.

    Attributes:
        kind: Error classification.
        status_code: HTTP status code of the response.
        message: Server supplied ``message`` field.
        error: Server supplied ``error`` field.
    """

    def __init__(
        self,
        message: str = "",
        error: str = "",
        status_code: int | None = None,
        kind: ErrorKind = ErrorKind.API,
    ):
        self.kind = kind
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(self.error or self.message)


class UnauthorizedError(ApiError):
    """Raised for HTTP 401 responses."""

    def __init__(self):
        super().__init__(
            message=http.HTTPStatus.UNAUTHORIZED.phrase,
            status_code=http.HTTPStatus.UNAUTHORIZED.value,
            kind=ErrorKind.UNAUTHORIZED,
        )


class ForbiddenError(ApiError):
    """Raised for HTTP 403 responses."""

    def __init__(self):
        super().__init__(
            message=http.HTTPStatus.FORBIDDEN.phrase,
            status_code=http.HTTPStatus.FORBIDDEN.value,
            kind=ErrorKind.FORBIDDEN,
        )


def parse_error_response(response: httpx.Response) -> ApiError:
    """Build the error for a non-2xx response.

    401 and 403 map to fixed errors. Any other status is decoded as an
    :class:`ErrorResponse` body.

    Args:
        response: The failed HTTP response.

    Returns:
        The classified error, for the caller to raise.

    Raises:
        pydantic.ValidationError: If the error body cannot be decoded.
    """
    if response.status_code == http.HTTPStatus.UNAUTHORIZED:
        return UnauthorizedError()
    if response.status_code == http.HTTPStatus.FORBIDDEN:
        return ForbiddenError()

    body = ErrorResponse.model_validate_json(response.content)
    return ApiError(
        message=body.message,
        error=body.error,
        status_code=response.status_code,
    )
