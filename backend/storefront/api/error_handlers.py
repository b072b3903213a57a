"""Error Handlers — every failure leaves the API as the same {success: false} envelope.

Invariants:
    - Body shape is always {"success": false, "message": str, "error": {...}}; the
      storefront and admin panel only read `success` and `message`
    - StorefrontError keeps its own status; PersistenceError also names the
      resources that failed to save
    - Request body/query validation → HTTP 400 with per-field details
    - Starlette HTTP errors (unknown route, wrong method) use the same envelope
    - Anything else → 500 that never leaks internal details

Design Decisions:
    - Client errors log at WARNING, server errors at ERROR: a wrong admin
      password must not page anyone
    - Extracted from main.py to keep the entry point small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.errors import ErrorCategory, ErrorSeverity, StorefrontError

logger = logging.getLogger(__name__)


def error_envelope(
    message: str,
    code: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    **details,
) -> dict:
    """Envelope for failures that do not originate from a StorefrontError."""
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **details,
        },
    }


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def storefront_error_handler(request: Request, exc: StorefrontError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    content = exc.to_response()
    if exc.context.resources:
        content["error"]["resources"] = exc.context.resources
    return JSONResponse(status_code=exc.http_status, content=content)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected payload on {request.url.path}: {[f['field'] for f in fields]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            "Invalid request data", "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, details=fields,
        ),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    category = (
        ErrorCategory.RESOURCE_NOT_FOUND
        if exc.status_code == status.HTTP_404_NOT_FOUND
        else ErrorCategory.VALIDATION
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail), f"HTTP_{exc.status_code}", category),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Catch-all — never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            "An unexpected error occurred", "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
