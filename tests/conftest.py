"""
Test Suite Configuration
"""
import os

os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_FORMAT"] = "console"
os.environ.pop("ANTHROPIC_API_KEY", None)

import pytest
from typing import AsyncGenerator, List, Optional, Tuple

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bizmanage.config import Settings, get_settings
from bizmanage.database.connection import close_database, create_engine_for_url, init_database
from bizmanage.database.models import Base
from bizmanage.database.repository import Storage
from bizmanage.insights.client import AIResult
from bizmanage.serving.api import create_api_app
from bizmanage.serving.api.dependencies import get_insight_client


VALID_INSIGHTS_JSON = """{
  "insights": [
    {
      "title": "Revenue concentrated in one branch",
      "description": "Downtown accounts for most sales.",
      "type": "opportunity",
      "metrics": [{"name": "Share", "value": "72%", "trend": "up"}],
      "tags": ["sales"]
    }
  ],
  "recommendations": [
    {
      "title": "Replicate downtown promotions",
      "description": "Run the same promotion in other branches.",
      "priority": "high",
      "potentialImpact": "Higher revenue in weaker branches",
      "implementation": "Schedule the promotion next month",
      "tags": ["marketing"]
    }
  ],
  "summary": "Sales are healthy but uneven.",
  "analysisDate": "2025-01-01T00:00:00.000Z"
}"""


class FakeCompletionClient:
    """Completion client returning a canned result and recording prompts"""

    def __init__(self, result: Optional[AIResult] = None, error: Optional[Exception] = None):
        self.result = result or AIResult.success(f"```json\n{VALID_INSIGHTS_JSON}\n```")
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def complete(self, system: str, prompt: str) -> AIResult:
        self.calls.append((system, prompt))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; rebuild them for every test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return get_settings()


@pytest.fixture
async def test_engine():
    """Create test database engine"""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def storage(test_db) -> Storage:
    return Storage(test_db)


@pytest.fixture
def valid_insights_json() -> str:
    return VALID_INSIGHTS_JSON


@pytest.fixture
def make_fake_ai():
    """Factory for completion clients with a chosen result or error"""
    return FakeCompletionClient


@pytest.fixture
def fake_ai() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
async def app():
    """API application bound to a fresh in-memory database"""
    await init_database()
    application = create_api_app()
    yield application
    application.dependency_overrides.clear()
    await close_database()


@pytest.fixture
async def client(app, fake_ai) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the AI client replaced by `fake_ai`"""
    app.dependency_overrides[get_insight_client] = lambda: fake_ai
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


@pytest.fixture
async def unconfigured_client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client using the real AI dependency with no API key set"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
