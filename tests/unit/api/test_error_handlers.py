"""
Unit tests for the exception handlers that render the response envelope.
"""

import asyncio
import json

from fastapi import Request
from fastapi.exceptions import RequestValidationError

from app.api.error_handlers import general_exception_handler, service_error_handler, validation_error_handler
from app.core.errors import InternalError, SessionExpiredError, UserNotFoundError


def _request(path: str = "/api/v1/users/abc") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": b"",
        "headers": [],
    })


def _render(handler, exc):
    response = asyncio.run(handler(_request(), exc))
    return response.status_code, json.loads(response.body)


# ======================================================================
# ServiceError
# ======================================================================


class TestServiceErrorHandler:

    def test_client_error_is_fail(self):
        status, body = _render(service_error_handler, UserNotFoundError())
        assert status == 404
        assert body == {"status": "fail", "message": "User not found", "code": "USER_NOT_FOUND"}

    def test_auth_error_is_error(self):
        status, body = _render(service_error_handler, SessionExpiredError())
        assert status == 401
        assert body["status"] == "error"
        assert body["code"] == "SESSION_EXPIRED"

    def test_internal_error_message_is_opaque(self):
        status, body = _render(service_error_handler, InternalError("db password is hunter2"))
        assert status == 500
        assert body == {"status": "error", "message": "Internal server error", "code": "INTERNAL_ERROR"}


# ======================================================================
# Validation and unexpected errors
# ======================================================================


class TestOtherHandlers:

    def test_validation_error(self):
        exc = RequestValidationError([{"type": "missing", "loc": ("body", "email"), "msg": "Field required",
                                       "input": None}])
        status, body = _render(validation_error_handler, exc)
        assert status == 422
        assert body["status"] == "fail"
        assert body["code"] == "VALIDATION_ERROR"
        assert body["data"][0]["loc"] == ["body", "email"]

    def test_unexpected_error(self):
        status, body = _render(general_exception_handler, RuntimeError("boom"))
        assert status == 500
        assert body == {"status": "error", "message": "Internal server error", "code": "INTERNAL_ERROR"}
