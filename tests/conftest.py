"""
Pytest configuration and shared fixtures.
"""

import os

# Settings are read at import time: configure the test environment first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("TOKEN_SECRET", "test-token-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from typing import List, Dict, Any, Optional
from fastapi.testclient import TestClient

from src.database import Database
from src.database.repositories import UserRepository
from src.integrations.telegram import TelegramNotifier, NotificationResult
from src.main import create_app

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


class RecordingNotifier(TelegramNotifier):
    """Notifier that records sends instead of calling Telegram."""

    def __init__(self, result: Optional[NotificationResult] = None):
        super().__init__(api_base="http://telegram.invalid", timeout=1.0)
        self.result = result or NotificationResult(success=True)
        self.dispatched: List[Dict[str, Any]] = []
        self.delivered: List[Dict[str, Any]] = []

    async def send_message(self, bot_token, chat_id, text):
        self.delivered.append({"bot_token": bot_token, "chat_id": chat_id, "text": text})
        return self.result

    def dispatch(self, bot_token, chat_id, text, kind):
        self.dispatched.append({
            "bot_token": bot_token,
            "chat_id": chat_id,
            "text": text,
            "kind": kind,
        })

    def kinds(self) -> List[str]:
        return [call["kind"] for call in self.dispatched]


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'taskflow.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """Initialized database on a fresh SQLite file."""
    db = Database(database_url)
    assert await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(session):
    """Factory creating users directly in the database."""
    counter = {"n": 0}

    async def _make(email: Optional[str] = None, name: str = "Owner"):
        counter["n"] += 1
        user = await UserRepository(session).create(
            email=email or f"user{counter['n']}@example.com",
            password_hash="not-a-real-hash",
            name=name,
        )
        await session.commit()
        return user

    return _make


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(database_url, notifier):
    """Test client running the full app (lifespan included) on SQLite."""
    app = create_app(database=Database(database_url), notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user and return bearer auth headers."""
    counter = {"n": 0}

    def _register(email: Optional[str] = None, password: str = "secret123", name: str = "Manager"):
        counter["n"] += 1
        response = client.post("/api/auth/register", json={
            "email": email or f"manager{counter['n']}@example.com",
            "password": password,
            "name": name,
        })
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register):
    return register()


@pytest.fixture
def create_employee(client):
    def _create(headers, **fields):
        body = {"name": "Ivan Petrov", "position": "Developer", "telegramTag": "ivan"}
        body.update(fields)
        response = client.post("/api/employees", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_task(client):
    def _create(headers, employee_id, **fields):
        body = {
            "title": "Prepare report",
            "description": "Quarterly numbers",
            "employeeId": employee_id,
            "deadline": "2030-01-01T00:00:00Z",
        }
        body.update(fields)
        response = client.post("/api/tasks", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
