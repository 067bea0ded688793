"""
Shared pytest fixtures.

Configuration is read from the environment at import time, so the test
environment is set up before anything from ``knowledge_workspace`` loads.
"""
import os
import tempfile

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_TYPE"] = "memory"
os.environ["LOG_TO_FILE"] = "false"
os.environ["AI_PROVIDER"] = "heuristic"
os.environ["AI_REQUIRED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="kw-uploads-"))

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from knowledge_workspace.main import create_app
from knowledge_workspace.routers.dependencies import build_container
from knowledge_workspace.services.ai_service import HeuristicSummarizer
from knowledge_workspace.services.background import BackgroundTaskQueue
from knowledge_workspace.services.database import DatabaseFactory
from knowledge_workspace.services.file_service import FileService
from knowledge_workspace.services.storage import LocalFileStorage


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory datastore."""
    adapter = await DatabaseFactory.create_and_initialize("memory")
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def services(db, tmp_path):
    """Service container over the in-memory datastore with a running queue."""
    storage = LocalFileStorage(tmp_path / "uploads")
    container = build_container(
        db,
        storage=storage,
        summarizer=HeuristicSummarizer(),
        queue=BackgroundTaskQueue(maxsize=100, workers=1),
        files=FileService(storage)
    )
    await container.start(run_maintenance=False)
    yield container
    await container.stop()


@pytest.fixture
def client(tmp_path):
    """TestClient whose services are built inside the app's own event loop."""
    async def build_services():
        db = await DatabaseFactory.create_and_initialize("memory")
        storage = LocalFileStorage(tmp_path / "uploads")
        return build_container(
            db,
            storage=storage,
            summarizer=HeuristicSummarizer(),
            queue=BackgroundTaskQueue(maxsize=100, workers=1),
            files=FileService(storage)
        )
    
    app = create_app(build_services=build_services, run_maintenance=False)
    with TestClient(app) as test_client:
        yield test_client


def drain_queue(client: TestClient):
    """Wait for best-effort background work (notifications, analytics) to finish."""
    client.portal.call(client.app.state.services.queue.join)


def signup(client: TestClient, name: str = "Ada", email: str = None, password: str = "secret123") -> dict:
    """Create an account and return ``{"user", "token", "headers"}``."""
    email = email or f"{name.lower()}@example.com"
    response = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return {"user": data["user"], "token": data["token"], "headers": {"Authorization": f"Bearer {data['token']}"}}


async def make_user(services, name: str = "Ada") -> dict:
    """Create a user through the service layer."""
    user, _ = await services.users.signup(name, f"{name.lower()}@example.com", "secret123")
    return user
