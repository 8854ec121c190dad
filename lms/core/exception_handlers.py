"""Error responses for the LMS API.

Every failure is answered with the same envelope as a success, flipped:
``{"success": false, "error": <CODE>, "message": ..., "details": ...}``.
The HTTP status is derived from the error code.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lms.core.config import get_settings
from lms.domain.exceptions import LmsException

logger = logging.getLogger(__name__)

# Unlisted codes are client errors (400).
STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "FIELDS_NOT_ALLOWED": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "PURCHASE_REQUIRED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "DUPLICATE_EMAIL": 409,
    "DUPLICATE_CATEGORY": 409,
    "ALREADY_ENROLLED": 409,
    "LAYOUT_ALREADY_EXISTS": 409,
    "MAIL_DELIVERY_ERROR": 502,
    "STORAGE_UPLOAD_ERROR": 502,
    "STORAGE_DELETE_ERROR": 502,
    "STORAGE_PATH_ERROR": 502,
    "OAUTH_PROVIDER_ERROR": 502,
    "DATABASE_NOT_CONFIGURED": 503,
}


def status_for(exc: LmsException) -> int:
    return STATUS_BY_ERROR_CODE.get(exc.error_code, 400)


def error_body(error: str, message: Any, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": error, "message": message}
    if details:
        body["details"] = details
    return body


def jsonable_errors(errors: Any) -> list[dict[str, Any]]:
    """Pydantic error dicts with ``ctx`` and ``input`` stringified (they may hold exceptions or bytes)."""
    cleaned = []
    for error in errors:
        item = dict(error)
        if "ctx" in item:
            item["ctx"] = {k: str(v) for k, v in item["ctx"].items()}
        if "input" in item:
            item["input"] = str(item["input"])
        cleaned.append(item)
    return cleaned


async def handle_lms_exception(request: Request, exc: LmsException) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    payload = exc.to_dict()
    return JSONResponse(
        status_code=status,
        content=error_body(payload["error"], payload["message"], payload.get("details")),
    )


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=error_body(
            "VALIDATION_ERROR", "Request validation failed", jsonable_errors(exc.errors())
        ),
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """500 for anything unhandled; the exception text is only exposed in debug mode."""
    logger.exception("Unhandled error on %s", request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(status_code=500, content=error_body("INTERNAL_ERROR", message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LmsException, handle_lms_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
