"""
API Gateway

Main gateway class that wires middleware, exception handlers, routers and
health endpoints onto the FastAPI application. Acts as the single entry
point for all API requests.
"""
from typing import List, Optional
from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..api.exceptions import WorkspaceError
from ..core.config import CORS_ORIGINS, ENVIRONMENT
from ..core.logging_config import get_logger
from ..middleware.rate_limit import limiter
from .middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    ErrorHandlingMiddleware,
    error_body,
    http_exception_handler,
    workspace_error_handler
)

logger = get_logger(__name__)

API_PREFIX = "/api/v1"


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content=error_body(request, f"Rate limit exceeded: {exc.detail}", "RATE_LIMITED")
    )


class APIGateway:
    """
    API Gateway that manages middleware, error handling and routing.
    
    Responsibilities:
    - Initialize FastAPI application
    - Register middleware (CORS, request ID, logging, error handling)
    - Convert business errors to JSON error bodies
    - Register routers at the root and under /api/v1
    - Provide health check endpoints
    """
    
    def __init__(
        self,
        title: str = "AI Knowledge Workspace API",
        description: str = "Workspaces, documents and knowledge cards with AI summarization and recommendations",
        version: str = "1.0.0",
        enable_docs: Optional[bool] = None,
        lifespan=None
    ):
        """
        Initialize API Gateway.
        
        Args:
            title: API title
            description: API description
            version: API version
            enable_docs: Enable API docs (auto-detected from ENVIRONMENT if None)
            lifespan: Lifespan context manager that builds and tears down services
        """
        self.title = title
        self.description = description
        self.version = version
        self.enable_docs = enable_docs if enable_docs is not None else ENVIRONMENT != "production"
        
        self.app = FastAPI(
            title=self.title,
            description=self.description,
            version=self.version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None,
            lifespan=lifespan
        )
        
        self.app.state.limiter = limiter
        self.app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
        self.app.add_exception_handler(WorkspaceError, workspace_error_handler)
        self.app.add_exception_handler(StarletteHTTPException, http_exception_handler)
        
        logger.info("API Gateway initialized")
    
    def setup_middleware(self):
        """Configure all middleware (last added runs first)."""
        logger.info("Setting up middleware...")
        
        self.app.add_middleware(ErrorHandlingMiddleware)
        self.app.add_middleware(
            RequestLoggingMiddleware,
            skip_paths=["/health", "/docs", "/redoc", "/openapi.json"]
        )
        self.app.add_middleware(RequestIDMiddleware)
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.debug(f"CORS origins: {', '.join(CORS_ORIGINS)}")
        
        logger.info("All middleware configured")
    
    def register_router(self, router: APIRouter, tags: Optional[List[str]] = None):
        """
        Register a router at the root and under the versioned prefix.
        
        Args:
            router: FastAPI router instance
            tags: OpenAPI tags for documentation
        """
        self.app.include_router(router, tags=tags or [])
        self.app.include_router(router, prefix=API_PREFIX, tags=tags or [], include_in_schema=False)
        logger.debug(f"Registered router {tags or ''} at '/' and '{API_PREFIX}'")
    
    def register_health_endpoints(self):
        """Register health check endpoints."""
        
        @self.app.get("/")
        async def root():
            """Root endpoint - API information."""
            return {
                "message": f"{self.title} is running",
                "version": self.version,
                "status": "healthy",
                "api_prefix": API_PREFIX
            }
        
        @self.app.get("/health")
        async def health_check(request: Request):
            """
            Health check endpoint for container orchestration.
            
            Returns 200 once services are initialized, 503 before.
            """
            services = getattr(request.app.state, "services", None)
            if services is None:
                logger.warning("Health check failed: services not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "reason": "Services not initialized"}
                )
            return {
                "status": "healthy",
                "database": type(services.db).__name__,
                "summarizer": services.summarizer.name,
                "background_queue": services.queue.stats
            }
        
        logger.info("Health check endpoints registered")
    
    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app
