import structlog
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from app.core.errors import InternalError, ServiceError
from app.schemas.response import Envelope

logger = structlog.get_logger(__name__)


def create_envelope_response(status_code: int, status: str, message: str, code: str, data=None) -> JSONResponse:
    """Create a JSON error response in the standard envelope."""
    content = Envelope(status=status, data=data, message=message, code=code)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content, exclude_none=True))


async def service_error_handler(request: Request, exc: ServiceError) -> Response:
    """Render ServiceError subclasses with their own status code and error code."""
    if isinstance(exc, InternalError):
        # Detail stays in the log; the caller only sees the opaque message
        logger.error("internal_error", path=request.url.path, cause=repr(exc.__cause__))
        return create_envelope_response(exc.status_code, exc.envelope_status, InternalError.default_message, exc.code)

    logger.info("request_rejected", path=request.url.path, code=exc.code, status_code=exc.status_code)
    return create_envelope_response(exc.status_code, exc.envelope_status, exc.message, exc.code)


async def validation_error_handler(_: Request, exc: RequestValidationError) -> Response:
    """Handle malformed request bodies and parameters (422)."""
    return create_envelope_response(422, "fail", "Request validation failed", "VALIDATION_ERROR",
                                    data=jsonable_encoder(exc.errors()))


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", path=request.url.path, error=str(exc))
    return create_envelope_response(500, "error", InternalError.default_message, InternalError.code)
