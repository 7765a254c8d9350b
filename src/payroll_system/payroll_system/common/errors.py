from __future__ import annotations

from flask import Flask
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    ConfigurationError,
    DomainError,
    NotFoundError,
    ReconciliationMismatch,
    StateError,
    ValidationError,
)
from .http import fail

# Most specific first; the first isinstance match wins.
STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (StateError, 409),
    (ConfigurationError, 500),
    (ReconciliationMismatch, 500),
]


def status_for(error: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        status = status_for(e)
        if status >= 500:
            # Broken setup or a calculation bug: the operator must see it.
            app.logger.exception(e)
        return fail(str(e), status=status, code=e.code)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
