import base64
import json
from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from textextract.config import Settings
from textextract.models import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestSessionLocal = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture
def chat_responses() -> list:
    """Queue of replies for the fake chat completions endpoint.

    Each item is either a string (returned as the message content) or an
    ``httpx.Response`` returned as-is.
    """
    return []


@pytest.fixture
def chat_requests() -> list:
    return []


@pytest.fixture
def llm_transport(chat_responses, chat_requests) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        chat_requests.append(json.loads(request.content))
        if not chat_responses:
            return httpx.Response(500, json={"error": {"message": "no reply queued"}})
        reply = chat_responses.pop(0)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": reply}}]})

    return httpx.MockTransport(handler)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        openai_api_key="",
        openai_base_url="https://llm.test/v1",
        llm_timeout_seconds=5,
        _env_file=None,
    )


@pytest_asyncio.fixture(scope="function")
async def client(db_session, llm_transport) -> AsyncGenerator[AsyncClient, None]:
    from textextract.core.database import get_async_session
    from textextract.dependencies import get_llm_transport
    from textextract.main import app

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session
    app.dependency_overrides[get_llm_transport] = lambda: llm_transport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def encode() -> Callable[[bytes], str]:
    return lambda data: base64.b64encode(data).decode("ascii")


@pytest.fixture
def sample_txt_bytes() -> bytes:
    return b"Invoice 2024-001: Total due is $42.00. Payment is expected within 30 days of receipt."
