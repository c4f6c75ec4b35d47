"""Exception handlers: every failure leaves the API as {"error": message}.

Domain errors map to their own status code, framework errors keep theirs,
and anything else becomes a logged 500 so the process keeps serving.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from motion_control.jobs.errors import JobNotFoundError, MotionControlError

logger = logging.getLogger("motion_control.errors")


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def domain_error_handler(request: Request, exc: MotionControlError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s path=%s: %s", type(exc).__name__, request.url.path, exc)
    elif isinstance(exc, JobNotFoundError):
        logger.info("unknown job id=%s", exc.job_id)
    else:
        logger.warning("%s path=%s: %s", type(exc).__name__, request.url.path, exc)
    return error_response(exc.status_code, str(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("path=%s status=%s detail=%r", request.url.path, exc.status_code, exc.detail)
    return error_response(exc.status_code, str(exc.detail) if exc.detail else "HTTP error")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only the JSON-safe keys; pydantic may put the raw exception under "ctx"
    details = [
        {k: v for k, v in err.items() if k in ("type", "loc", "msg")}
        for err in exc.errors()
    ]
    logger.warning("path=%s validation errors=%s", request.url.path, details)
    return error_response(422, "Validation error", details=details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error at path=%s", request.url.path)
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(MotionControlError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
