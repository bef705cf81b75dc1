"""Error Handlers — global exception handlers for the ledger API.

Invariants:
    - Every error body is a LifebankError envelope: code, ledger_code, category, context
    - RequestValidationError → InvalidInputError with field-level details
    - Exception (catch-all) → InternalError, never leaks internal details
    - This module is the single place a rejected HTTP call is logged

Design Decisions:
    - Three-layer handler: domain (LifebankError), validation (Pydantic), catch-all (Exception)
    - The domain in the envelope context comes from the route prefix (/api/v1/units,
      /api/v1/requests), so schema rejections name the ledger they were aimed at
    - Extracted from main.py to keep the entry point's import fan-out small
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from lifebank.core.domain_types import Domain
from lifebank.core.errors import InternalError, InvalidInputError, LifebankError

logger = logging.getLogger(__name__)

_API_PREFIX = "/api/v1/"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_ledger_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_ledger_error_handler(app: FastAPI) -> None:
    """Register ledger domain/infrastructure error handler."""

    @app.exception_handler(LifebankError)
    async def ledger_error_handler(request: Request, exc: LifebankError):
        """Handle all ledger domain/infrastructure errors."""
        return _respond(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        error = InvalidInputError(
            _validation_details(exc), domain=_domain_for(request),
        )
        return _respond(request, error)


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        error = InternalError(domain=_domain_for(request))
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
        )


def _respond(request: Request, exc: LifebankError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{request.method} {request.url.path} rejected: {exc.message}",
        extra={
            "error_code": exc.code,
            "ledger_code": exc.ledger_code,
            "domain": exc.context.domain or _domain_for(request),
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _domain_for(request: Request) -> str | None:
    path = request.url.path
    if not path.startswith(_API_PREFIX):
        return None
    segment = path[len(_API_PREFIX):].split("/", 1)[0]
    return segment if segment in {d.value for d in Domain} else None


def _validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
