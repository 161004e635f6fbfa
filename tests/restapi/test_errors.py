"""Tests for error response classification."""

import httpx
import pydantic
import pytest

from sftpgo_admin.restapi import errors


def test_unauthorized_ignores_body():
    error = errors.parse_error_response(httpx.Response(401, content=b"not json"))

    assert isinstance(error, errors.UnauthorizedError)
    assert error.kind is errors.ErrorKind.UNAUTHORIZED
    assert error.status_code == 401
    assert str(error) == "Unauthorized"


def test_forbidden_ignores_body():
    error = errors.parse_error_response(
        httpx.Response(403, json={"error": "admin role required"}),
    )

    assert isinstance(error, errors.ForbiddenError)
    assert error.kind is errors.ErrorKind.FORBIDDEN
    assert str(error) == "Forbidden"


def test_error_field_takes_precedence():
    error = errors.parse_error_response(
        httpx.Response(400, json={"message": "invalid input", "error": "bad request"}),
    )

    assert type(error) is errors.ApiError
    assert error.kind is errors.ErrorKind.API
    assert error.status_code == 400
    assert error.message == "invalid input"
    assert error.error == "bad request"
    assert str(error) == "bad request"


def test_message_used_when_error_empty():
    error = errors.parse_error_response(httpx.Response(404, json={"message": "x"}))

    assert str(error) == "x"


def test_empty_body_raises_decoding_error():
    with pytest.raises(pydantic.ValidationError):
        errors.parse_error_response(httpx.Response(500))
