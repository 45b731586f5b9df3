"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from langchain_core.language_models import FakeListChatModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from learnpath.agent import llm as llm_module
from learnpath.api.deps import get_db
from learnpath.core.config import get_settings
from learnpath.core.database import Base
from learnpath.main import app
from learnpath.models import Roadmap, User
from learnpath.schemas.roadmap import RoadmapContent
from learnpath.services import roadmap_service

LLM_TARGETS = (
    "learnpath.agent.nodes.planner.get_llm",
    "learnpath.agent.nodes.study_planner.get_llm",
    "learnpath.agent.assistant.get_llm",
    "learnpath.agent.assistant.get_fast_llm",
)


class UnavailableLLM:
    """Stands in for an unreachable LLM provider."""

    def __init__(self) -> None:
        self.calls = 0

    def with_structured_output(self, schema, **kwargs):
        raise ConnectionError("LLM unavailable")

    async def ainvoke(self, messages, **kwargs):
        self.calls += 1
        raise ConnectionError("LLM unavailable")


def _patch_llm(monkeypatch: pytest.MonkeyPatch, llm) -> None:
    for target in LLM_TARGETS:
        monkeypatch.setattr(target, lambda *args, **kwargs: llm)


@pytest.fixture(autouse=True)
def unavailable_llm(monkeypatch: pytest.MonkeyPatch) -> UnavailableLLM:
    """Prevent real LLM calls; every generation falls back to templates."""
    llm = UnavailableLLM()
    _patch_llm(monkeypatch, llm)
    return llm


@pytest.fixture
def fake_llm(monkeypatch: pytest.MonkeyPatch):
    """Install a FakeListChatModel answering with the given responses."""

    def install(*responses: str) -> FakeListChatModel:
        llm = FakeListChatModel(responses=list(responses))
        _patch_llm(monkeypatch, llm)
        return llm

    return install


def _clear_llm_caches() -> None:
    get_settings.cache_clear()
    llm_module.get_llm.cache_clear()
    llm_module.get_fast_llm.cache_clear()


@pytest.fixture
def unconfigured_llm(monkeypatch: pytest.MonkeyPatch):
    """Use the real LLM factories with no API key configured."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    for target in LLM_TARGETS:
        monkeypatch.setattr(target, getattr(llm_module, target.rsplit(".", 1)[1]))
    _clear_llm_caches()
    yield
    _clear_llm_caches()


@pytest_asyncio.fixture
async def test_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _content(*titles: str, career_path: str = "Web Developer") -> RoadmapContent:
    return RoadmapContent.model_validate(
        {
            "careerPath": career_path,
            "overview": "Test roadmap",
            "estimatedTimeframe": "3 Months",
            "steps": [
                {"title": title, "description": f"Learn {title}", "skills": [title]}
                for title in titles
            ],
        }
    )


@pytest.fixture
def make_content():
    """Build roadmap content from step titles."""
    return _content


@pytest_asyncio.fixture
async def seed_user(test_session: AsyncSession) -> User:
    user = User(id="uid-1", email="learner@example.com", name="Learner")
    test_session.add(user)
    await test_session.commit()
    return user


@pytest_asyncio.fixture
async def seed_roadmap(test_session: AsyncSession, seed_user: User) -> Roadmap:
    roadmap = await roadmap_service.save_roadmap(
        test_session,
        seed_user.id,
        _content("HTML & CSS Fundamentals", "JavaScript Essentials", "React"),
    )
    await test_session.commit()
    return roadmap
