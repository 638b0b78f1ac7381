"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Toutes les erreurs sortent sous la forme `{code, message, trace_id}`:
- `InvalidDateError` -> 422 `INVALID_DATE`
- `StoreUnavailable` -> 503 `STORE_UNAVAILABLE` (l'appelant peut réessayer)
- contenu introuvable -> 404 `CONTENT_NOT_FOUND` (état vide normal, pas une panne)
"""

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from astrocusp.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNPROCESSABLE_ENTITY,
)
from astrocusp.domain.errors import InvalidDateError, StoreUnavailable

log = structlog.get_logger(__name__)


class APIError(HTTPException):
    """Custom API error with standard envelope."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize an API error with standardized envelope."""
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.details = details


def content_not_found(message: str, **details: Any) -> APIError:
    return APIError(HTTP_NOT_FOUND, "CONTENT_NOT_FOUND", message, details or None)


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "code": code,
            "message": message,
            "trace_id": trace_id,
            **({"details": details} if details else {}),
        },
    )


def extract_trace_id(request: Request) -> str | None:
    """Extract trace ID from request headers or request state."""
    trace_id = request.headers.get("X-Request-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "trace_id", None)


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    trace_id = extract_trace_id(request)
    log.info("api_error", code=exc.code, status_code=exc.status_code, trace_id=trace_id)
    return create_error_response(exc.status_code, exc.code, exc.message, trace_id, exc.details)


def handle_invalid_date(request: Request, exc: InvalidDateError) -> JSONResponse:
    return create_error_response(
        HTTP_UNPROCESSABLE_ENTITY,
        "INVALID_DATE",
        str(exc),
        extract_trace_id(request),
        {"value": str(exc.value), "reason": exc.reason},
    )


def handle_store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
    trace_id = extract_trace_id(request)
    log.error("content_store_unavailable", error=str(exc), trace_id=trace_id)
    return create_error_response(
        HTTP_SERVICE_UNAVAILABLE, "STORE_UNAVAILABLE", "content store unavailable", trace_id
    )


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with standard envelope."""
    error_codes = {
        HTTP_BAD_REQUEST: "BAD_REQUEST",
        HTTP_NOT_FOUND: "NOT_FOUND",
        HTTP_UNPROCESSABLE_ENTITY: "VALIDATION_ERROR",
        HTTP_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
    }
    return create_error_response(
        exc.status_code,
        error_codes.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail),
        extract_trace_id(request),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(InvalidDateError, handle_invalid_date)
    app.add_exception_handler(StoreUnavailable, handle_store_unavailable)
    app.add_exception_handler(HTTPException, handle_http_exception)
