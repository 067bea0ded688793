"""
Shared dependencies for routers.
Provides service construction and dependency injection.

Services are built once at startup into a ``ServiceContainer`` stored on
``app.state.services``; handlers receive them through ``Depends``.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..api.exceptions import AuthenticationError
from ..core.config import DATABASE_TYPE
from ..core.logging_config import get_logger
from ..core.security import decode_token
from ..services.ai_service import Summarizer, build_summarizer
from ..services.analytics_service import AnalyticsService
from ..services.background import BackgroundTaskQueue
from ..services.card_service import CardService
from ..services.database import DatabaseFactory, DatabaseInterface
from ..services.document_service import DocumentService
from ..services.file_service import FileService
from ..services.interaction_service import InteractionService
from ..services.maintenance import MaintenanceJob
from ..services.note_service import NoteService
from ..services.notification_service import NotificationService
from ..services.recommendation_service import RecommendationService
from ..services.search_service import SearchService
from ..services.storage import FileStorageInterface, LocalFileStorage
from ..services.user_service import UserService, public_user
from ..services.workspace_service import WorkspaceService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class ServiceContainer:
    """Every long-lived service, wired once per application."""
    db: DatabaseInterface
    storage: FileStorageInterface
    queue: BackgroundTaskQueue
    summarizer: Summarizer
    files: FileService
    analytics: AnalyticsService
    notifications: NotificationService
    users: UserService
    workspaces: WorkspaceService
    documents: DocumentService
    cards: CardService
    interactions: InteractionService
    recommendations: RecommendationService
    notes: NoteService
    search: SearchService
    maintenance: MaintenanceJob
    
    async def start(self, run_maintenance: bool = True):
        await self.storage.initialize()
        await self.queue.start()
        if run_maintenance:
            self.maintenance.start()
    
    async def stop(self):
        await self.maintenance.stop()
        await self.queue.stop(drain=True)
        await self.storage.close()
        await self.db.close()


def build_container(
    db: DatabaseInterface,
    storage: Optional[FileStorageInterface] = None,
    summarizer: Optional[Summarizer] = None,
    queue: Optional[BackgroundTaskQueue] = None,
    files: Optional[FileService] = None
) -> ServiceContainer:
    """
    Wire all services around an initialized datastore.
    
    Args:
        db: Initialized database adapter
        storage: File storage (defaults to local storage under UPLOAD_DIR)
        summarizer: Summarization strategy (defaults to build_summarizer())
        queue: Background queue for best-effort side effects
        files: File service override (tests inject an httpx MockTransport)
    """
    storage = storage or LocalFileStorage()
    queue = queue or BackgroundTaskQueue()
    summarizer = summarizer or build_summarizer()
    files = files or FileService(storage)
    
    analytics = AnalyticsService(db, queue)
    notifications = NotificationService(db, queue)
    workspaces = WorkspaceService(db, files)
    cards = CardService(db, analytics)
    
    return ServiceContainer(
        db=db,
        storage=storage,
        queue=queue,
        summarizer=summarizer,
        files=files,
        analytics=analytics,
        notifications=notifications,
        users=UserService(db, analytics),
        workspaces=workspaces,
        documents=DocumentService(db, files, summarizer, workspaces),
        cards=cards,
        interactions=InteractionService(db, cards, notifications, analytics),
        recommendations=RecommendationService(db),
        notes=NoteService(db, workspaces),
        search=SearchService(db, analytics),
        maintenance=MaintenanceJob(db)
    )


async def initialize_database() -> DatabaseInterface:
    """Initialize database adapter based on configuration."""
    logger.info(f"Initializing database: {DATABASE_TYPE}")
    return await DatabaseFactory.create_and_initialize(DATABASE_TYPE)


def get_services(request: Request) -> ServiceContainer:
    """Get the service container (dependency injection)."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized")
    return services


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    services: ServiceContainer = Depends(get_services)
) -> Optional[Dict]:
    """
    Resolve the bearer token if one is sent.
    
    Returns:
        Public user dict, or None when no Authorization header is present
    
    Raises:
        AuthenticationError: INVALID_TOKEN for bad, expired or orphaned tokens
    """
    if credentials is None or not credentials.credentials:
        return None
    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub") if payload else None
    if not user_id:
        raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")
    record = await services.db.get_user(user_id)
    if not record:
        raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")
    return public_user(record)


async def get_current_user(user: Optional[Dict] = Depends(get_optional_user)) -> Dict:
    """Require a signed-in user (401 UNAUTHORIZED otherwise)."""
    if user is None:
        raise AuthenticationError("Authentication required")
    return user
