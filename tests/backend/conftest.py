import json
import uuid

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.config import Settings
from app.core.context import build_services
from app.core.db import build_tortoise_config
from app.main import app


TEST_DB_URL = "sqlite://:memory:"
TEST_SECRET = "test-secret"

# Words the fake classifier reacts to
FLAG_WORD = "badword"      # answered with "inappropriate"
SAFETY_WORD = "blockme"    # answered with a safety block
OUTAGE_WORD = "outage"     # answered with HTTP 503


def gemini_reply(label: str) -> dict:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": label}]}, "finishReason": "STOP"}
        ]
    }


def gemini_safety_block() -> dict:
    return {"candidates": [{"finishReason": "SAFETY", "safetyRatings": []}]}


class FakeClassifier:
    """
    Stand-in for the Gemini generateContent endpoint.
    Records the user text of every call.
    """

    def __init__(self):
        self.texts: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        prompt = body["contents"][0]["parts"][0]["text"]
        text = prompt.split("For: ", 1)[1]
        self.texts.append(text)
        if OUTAGE_WORD in text:
            return httpx.Response(503, json={"error": {"message": "unavailable"}})
        if SAFETY_WORD in text:
            return httpx.Response(200, json=gemini_safety_block())
        if FLAG_WORD in text:
            return httpx.Response(200, json=gemini_reply("inappropriate\n"))
        return httpx.Response(200, json=gemini_reply(" Appropriate "))


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=build_tortoise_config(TEST_DB_URL))
    await Tortoise.generate_schemas()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=TEST_DB_URL,
        secret_key=TEST_SECRET,
        gemini_api_key="test-key",
        media_backend="local",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def fake_classifier():
    return FakeClassifier()


@pytest_asyncio.fixture
async def db():
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def services(db, test_settings, fake_classifier):
    """
    Service context wired to the fake classifier and a temporary upload dir.
    """
    ctx = build_services(test_settings, transport=httpx.MockTransport(fake_classifier))
    yield ctx
    await ctx.aclose()


@pytest_asyncio.fixture
async def client(services):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    app.state.services = services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def auth_headers(client):
    """
    Factory fixture: register + login a fresh user, return (headers, username).
    """

    async def _auth_headers(password: str = "PostTest#1"):
        username = f"user_{uuid.uuid4().hex[:6]}"
        await client.post("/api/register", json={"username": username, "password": password})
        resp = await client.post("/api/login", json={"username": username, "password": password})
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}, username

    return _auth_headers
