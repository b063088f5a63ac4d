"""Error Handlers — map exceptions to the StudyFront error envelope.

Invariants:
    - Every error body is {"error": {code, message, category, severity, ...}}
    - StudyFrontError keeps its own http_status; 5xx logged as errors, the
      rest as warnings
    - QuotaExceededError carries Retry-After: seconds until the next UTC day
    - UpstreamServiceError carries Retry-After when the provider sent one
    - RequestValidationError → 400; message is the first failure, details
      list every field
    - Anything else → 500 with a fixed message
"""

import logging
import math
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from studyfront.core.errors import (
    ErrorSeverity, QuotaExceededError, StudyFrontError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudyFrontError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_domain_error(request: Request, exc: StudyFrontError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        headers=retry_after_headers(exc),
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=validation_envelope(exc.errors()),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def retry_after_headers(
    exc: StudyFrontError, now: datetime | None = None,
) -> dict[str, str] | None:
    if isinstance(exc, QuotaExceededError):
        now = now or datetime.now(timezone.utc)
        tomorrow = (now + timedelta(days=1)).date()
        reset = datetime(
            tomorrow.year, tomorrow.month, tomorrow.day, tzinfo=timezone.utc,
        )
        return {"Retry-After": str(math.ceil((reset - now).total_seconds()))}
    if exc.context.retry_after_ms:
        return {"Retry-After": str(math.ceil(exc.context.retry_after_ms / 1000))}
    return None


def validation_envelope(errors) -> dict:
    errors = list(errors)
    message = (
        str(errors[0]["msg"]).removeprefix("Value error, ")
        if errors else "Invalid request data"
    )
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": message,
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    }
