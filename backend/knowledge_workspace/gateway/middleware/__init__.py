"""
Gateway Middleware Module

Custom middleware for request/response handling, logging, and error handling.
"""
from .request_logging import RequestLoggingMiddleware
from .error_handler import (
    ErrorHandlingMiddleware,
    error_body,
    http_exception_handler,
    workspace_error_handler
)
from .request_id import RequestIDMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "ErrorHandlingMiddleware",
    "RequestIDMiddleware",
    "error_body",
    "http_exception_handler",
    "workspace_error_handler"
]
