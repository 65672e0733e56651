# backend/checkup_capacity/errors.py
"""
Error taxonomy and FastAPI handlers.

Every error is rendered as {"ok": false, "error": <CODE>}. Validation errors
and internal failures are never cacheable.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .services.capacity.config import get_capacity_config
from .services.capacity.response_cache import VARY

logger = logging.getLogger(__name__)

NO_STORE = "no-store"


class CapacityError(Exception):
    status_code = 500
    code = "INTERNAL"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.code)
        self.detail = detail


class TenantNotFound(CapacityError):
    status_code = 404
    code = "TENANT_NOT_FOUND"


class TemplateNotFound(CapacityError):
    status_code = 404
    code = "TEMPLATE_NOT_FOUND"


class InvalidMonth(CapacityError):
    status_code = 400
    code = "INVALID_MONTH"


class InvalidRange(CapacityError):
    status_code = 400
    code = "INVALID_RANGE"


class InvalidDate(CapacityError):
    status_code = 400
    code = "INVALID_DATE"


class InvalidDefaults(CapacityError):
    status_code = 400
    code = "INVALID_DEFAULTS"


def error_response(status_code: int, code: str, cache_control: str = NO_STORE) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": code},
        headers={"Cache-Control": cache_control, "Vary": VARY},
    )


async def capacity_error_handler(request: Request, exc: CapacityError) -> JSONResponse:
    if isinstance(exc, TenantNotFound):
        # Unknown tenant is a stable answer; let shared caches keep it briefly
        return error_response(exc.status_code, exc.code, get_capacity_config().public_cache_control)
    return error_response(exc.status_code, exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {str(part) for err in exc.errors() for part in err.get("loc", ())}
    code = InvalidDate.code if "date" in fields else "INVALID_REQUEST"
    return error_response(400, code)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "INTERNAL")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CapacityError, capacity_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
