"""Error Handlers — every failure leaves the API as the same `{"error": {...}}` envelope.

Invariants:
    - OrigenError → its own http_status and to_response() body
    - Body validation and post-merge model validation → 400 VALIDATION_ERROR with one
      detail per offending field
    - Anything else → 500 INTERNAL_ERROR, message never includes the exception text
    - 4xx outcomes log at WARNING, 5xx at ERROR (with traceback only for the unhandled case)

Design Decisions:
    - Handlers added with add_exception_handler from one table so the three cases
      cannot drift apart in shape
    - Log context comes from the error's ErrorContext, falling back to the request path
      for `operation`
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from origen.core.errors import ErrorCategory, ErrorSeverity, OrigenError

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    details: list[dict] | None = None,
) -> dict:
    body = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
    }
    if details is not None:
        body["details"] = details
    return {"error": body}


def _field_errors(errors) -> list[dict]:
    # loc starts with "body" for request payloads; kept so clients see where it came from
    return [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]


async def _origen_error(request: Request, exc: OrigenError) -> JSONResponse:
    ctx = exc.context
    extra = {
        "error_code": exc.code,
        "collection": ctx.collection,
        "operation": ctx.operation or request.url.path,
        "username": ctx.username,
    }
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(level, f"{request.method} {request.url.path}: {exc.message}", extra=extra)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _validation_error(
    request: Request, exc: RequestValidationError | ValidationError,
) -> JSONResponse:
    details = _field_errors(exc.errors())
    logger.warning(
        f"{request.method} {request.url.path}: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "operation": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details,
        ),
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"{request.method} {request.url.path}: unhandled {type(exc).__name__}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "operation": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


_HANDLERS = (
    (OrigenError, _origen_error),
    (RequestValidationError, _validation_error),
    # settings edits are re-validated after merging, past FastAPI's body validation
    (ValidationError, _validation_error),
    (Exception, _unhandled_error),
)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to `app`."""
    for exc_type, handler in _HANDLERS:
        app.add_exception_handler(exc_type, handler)
