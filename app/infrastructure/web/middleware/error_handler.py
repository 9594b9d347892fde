"""
Global error handler middleware for the FastAPI application.
Catches and formats all exceptions consistently.
"""

import logging
import traceback
from typing import Any, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import status
import json

from app.config import settings
from app.domain.models.base import DomainException, ValidationError

logger = logging.getLogger(__name__)


# Domain error codes and the HTTP status they map to
ERROR_STATUS_CODES = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "BUSINESS_RULE_VIOLATION": status.HTTP_409_CONFLICT,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DUPLICATE_ENTITY": status.HTTP_409_CONFLICT,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
}


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle different types of exceptions and return appropriate responses.
        """
        # Domain errors are expected outcomes; everything else is a bug
        if isinstance(exc, DomainException):
            logger.info(f"Domain error on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.error(
                f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
                exc_info=True,
                extra={
                    "request_path": request.url.path,
                    "request_method": request.method,
                    "client_host": request.client.host if request.client else None
                }
            )

        error_response = self.format_error_response(exc)

        # In development, add more debug information
        if settings.debug and not isinstance(exc, DomainException):
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response.get("status_code", 500),
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        # Default error response
        error_response = {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }

        # Handle specific exception types
        if isinstance(exc, DomainException):
            error_response.update({
                "error": exc.code,
                "message": exc.message,
                "status_code": ERROR_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST)
            })
            if isinstance(exc, ValidationError) and exc.field:
                error_response["field"] = exc.field
        elif isinstance(exc, json.JSONDecodeError):
            error_response.update({
                "error": "Invalid JSON",
                "message": "The request body contains invalid JSON",
                "status_code": status.HTTP_400_BAD_REQUEST
            })
        elif isinstance(exc, ValueError):
            error_response.update({
                "error": "Bad Request",
                "message": str(exc),
                "status_code": status.HTTP_400_BAD_REQUEST
            })
        elif isinstance(exc, PermissionError):
            error_response.update({
                "error": "Forbidden",
                "message": "You don't have permission to perform this action",
                "status_code": status.HTTP_403_FORBIDDEN
            })
        elif isinstance(exc, TimeoutError):
            error_response.update({
                "error": "Request Timeout",
                "message": "The request took too long to process",
                "status_code": status.HTTP_408_REQUEST_TIMEOUT
            })

        return error_response
