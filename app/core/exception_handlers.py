"""
Global exception handlers that log API errors.
"""
import json
import traceback

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.delivery.exceptions import DeliveryError, ZoneInactiveError
from app.utils.logger import logger


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Validation errors (422), logged with the offending fields."""
    error_details = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", []))
        error_details.append({
            "field": field,
            "type": error.get("type", "unknown"),
            "message": error.get("msg", "Validation error"),
            "input": error.get("input"),
        })

    logger.error(
        f"[VALIDATION ERROR 422] {request.method} {request.url.path} - "
        f"{json.dumps(error_details, indent=2, ensure_ascii=False, default=str)}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": json.loads(json.dumps(error_details, default=str)),
            "message": "Invalid data provided",
        }
    )


async def http_exception_handler(request: Request, exc):
    status_code = exc.status_code
    log_message = f"[HTTP ERROR {status_code}] {request.method} {request.url.path} - Details: {exc.detail}"

    if status_code >= 500:
        logger.error(log_message)
    elif status_code >= 400:
        logger.warning(log_message)

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.detail,
            "status_code": status_code
        },
        headers=getattr(exc, "headers", None),
    )


async def delivery_exception_handler(request: Request, exc: DeliveryError):
    """Delivery domain errors become a user-facing message plus a stable error_code."""
    log_message = (
        f"[DELIVERY {exc.error_code}] {request.method} {request.url.path} - {exc.message}"
    )
    if isinstance(exc, ZoneInactiveError):
        logger.warning(f"{log_message} (zone {exc.zone_number} inactive)")
    elif exc.status_code >= 500:
        logger.error(log_message)
    else:
        logger.info(log_message)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
            "status_code": exc.status_code,
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Unhandled exceptions, logged with the full traceback."""
    logger.error(
        f"[UNHANDLED EXCEPTION] {request.method} {request.url.path} - "
        f"{type(exc).__name__}: {str(exc)}"
    )
    logger.error(f"[UNHANDLED EXCEPTION] Traceback:\n{traceback.format_exc()}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_type": type(exc).__name__,
        }
    )
