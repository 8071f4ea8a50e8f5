"""
Request ids, JSON error envelopes and request timing for Resume Hub
"""
import time
import uuid
from datetime import datetime
from typing import Any

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError

from resume_hub.utils.exceptions import ResumeHubError, map_to_http_exception
from resume_hub.utils.logging_config import get_logger

logger = get_logger(__name__)


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Every error leaves the service in this envelope"""
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    content = {
        "success": False,
        "timestamp": datetime.utcnow().isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail,
    }
    return JSONResponse(status_code=status_code, content=content, headers={"X-Request-ID": request_id})


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def _where(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def resume_hub_error_handler(request: Request, exc: ResumeHubError) -> JSONResponse:
    """Typed service errors: client mistakes are warnings, the rest are errors"""
    request_id = _request_id(request)
    http_exc = map_to_http_exception(exc)
    level = logger.warning if http_exc.status_code < 500 else logger.error
    level(
        f"{exc.error_code} in {_where(request)}: {exc.message}",
        extra={"request_id": request_id, "error_code": exc.error_code, "details": exc.details},
    )
    return error_response(request_id, http_exc.status_code, http_exc.detail)


def _unexpected_error(request: Request, request_id: str, exc: Exception) -> JSONResponse:
    if isinstance(exc, RequestValidationError):
        logger.warning(f"Invalid request to {_where(request)}: {exc.errors()}", extra={"request_id": request_id})
        return error_response(request_id, 422, {
            "error": "Validation failed",
            "message": "Request data validation failed",
            "validation_errors": exc.errors(),
        })

    if isinstance(exc, ValidationError):
        # stored documents that no longer fit the models
        logger.error(f"Stored data failed validation in {_where(request)}: {exc}", extra={"request_id": request_id})
        return error_response(request_id, 500, {
            "error": "Data validation failed",
            "message": "Stored data has an invalid format",
        })

    if isinstance(exc, HTTPException):
        logger.warning(f"HTTP {exc.status_code} in {_where(request)}: {exc.detail}", extra={"request_id": request_id})
        return error_response(request_id, exc.status_code, exc.detail)

    logger.error(
        f"Unhandled {exc.__class__.__name__} in {_where(request)}: {exc}",
        extra={"request_id": request_id},
        exc_info=True,
    )
    return error_response(request_id, 500, {
        "error": "Internal server error",
        "message": "An unexpected error occurred. Please try again later.",
    })


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Outermost middleware: assigns the request id and turns anything that escapes into an envelope"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except ResumeHubError as exc:
            return await resume_hub_error_handler(request, exc)
        except Exception as exc:
            return _unexpected_error(request, request_id, exc)

        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request with status, caller and duration"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = _request_id(request)
        user_id = request.headers.get("x-user-id", "-")

        logger.debug(
            f"Request {request_id}: {_where(request)} from user {user_id}",
            extra={"request_id": request_id, "content_length": request.headers.get("content-length")},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request failed: {_where(request)} after {time.time() - start_time:.3f}s",
                extra={"request_id": request_id, "exception": str(exc)},
            )
            raise

        processing_time = time.time() - start_time
        logger.info(
            f"{_where(request)} - {response.status_code} in {processing_time:.3f}s (user {user_id})",
            extra={"request_id": request_id, "processing_time": processing_time},
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Warns about slow requests and adds X-Processing-Time"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        processing_time = time.time() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request: {_where(request)} took {processing_time:.3f}s",
                extra={"request_id": _request_id(request), "threshold": self.slow_request_threshold},
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
