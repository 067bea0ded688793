"""
Error Handling

Centralized error handling and response formatting. Business errors
(``WorkspaceError``) and HTTP exceptions are converted by exception
handlers; anything else escaping a route is caught by the middleware
and answered with a 500 JSON body.
"""
import traceback
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi import status
from ...api.exceptions import WorkspaceError, handle_business_exception
from ...core.config import ENVIRONMENT
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def error_body(request: Request, error, code=None) -> dict:
    """Standard JSON error payload."""
    return {
        "success": False,
        "error": error,
        "code": code,
        "path": request.url.path,
        "request_id": getattr(request.state, "request_id", None)
    }


async def workspace_error_handler(request: Request, exc: WorkspaceError) -> JSONResponse:
    """Business exception → its status code and machine code."""
    http_exception = handle_business_exception(exc)
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path}: {exc.code} - {exc.message}")
    return JSONResponse(
        status_code=http_exception.status_code,
        content=error_body(request, http_exception.detail["error"], http_exception.detail["code"])
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP exceptions (404 for unknown routes, 405, ...) in the same shape."""
    detail = exc.detail
    code = None
    if isinstance(detail, dict):
        code = detail.get("code")
        detail = detail.get("error", detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, detail, code),
        headers=getattr(exc, "headers", None)
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Converts unexpected exceptions to a 500 JSON response.
    
    The exception message (and traceback) are only returned outside
    production.
    """
    
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            is_development = ENVIRONMENT != "production"
            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)
            
            content = error_body(request, str(e) if is_development else "Internal server error", "INTERNAL_ERROR")
            if is_development:
                content["traceback"] = traceback.format_exc()
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
