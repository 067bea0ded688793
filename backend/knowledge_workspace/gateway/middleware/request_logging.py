"""
Request Logging Middleware

Logs all incoming requests and responses with timing information.
The request id is added to each line by the logging filter.
"""
import time
from typing import Callable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_SKIP_PATHS = ["/health", "/docs", "/redoc", "/openapi.json"]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and duration of every request.
    
    4xx responses are logged as warnings and 5xx as errors. Health and docs
    endpoints are skipped.
    """
    
    def __init__(self, app, skip_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.skip_paths = skip_paths if skip_paths is not None else DEFAULT_SKIP_PATHS
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if any(path.startswith(skip) for skip in self.skip_paths):
            return await call_next(request)
        
        method = request.method
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{method} {path} → exception after {(time.perf_counter() - started) * 1000:.1f}ms: {e}")
            raise
        
        duration_ms = (time.perf_counter() - started) * 1000
        message = f"{method} {path} → {response.status_code} ({duration_ms:.1f}ms)"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response
