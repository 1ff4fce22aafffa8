"""Pytest fixtures for unit and integration tests."""
import hashlib
import hmac
import json
import os
import time
from typing import AsyncGenerator, Optional
from urllib.parse import quote

# Use in-memory SQLite for tests (aiomysql requires MariaDB)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config import get_settings  # noqa: E402
from app.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.base import Base  # noqa: E402

BOT_TOKEN = "123456:TEST-bot-token"
ADMIN_KEY = "admin-test-key"


def make_init_data(
    bot_token: str = BOT_TOKEN,
    user: Optional[dict] = None,
    auth_date: Optional[int] = None,
    **extra: str,
) -> str:
    """Build a query string signed the way Telegram signs Mini App init data."""
    fields = {"auth_date": str(auth_date if auth_date is not None else int(time.time()))}
    if user is not None:
        fields["user"] = json.dumps(user, separators=(",", ":"))
    fields.update(extra)
    data_check_string = "\n".join(f"{k}={fields[k]}" for k in sorted(fields))
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    fields["hash"] = hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()
    return "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in fields.items())


@pytest.fixture
def settings(monkeypatch):
    """Cached settings with test credentials configured."""
    s = get_settings()
    monkeypatch.setattr(s, "TELEGRAM_BOT_TOKEN", BOT_TOKEN)
    monkeypatch.setattr(s, "ADMIN_API_KEY", ADMIN_KEY)
    # get_settings() is lru_cached so the monkeypatch on the instance suffices.
    return s


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    TestSession = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestSession() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db, settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP test client with DB override."""
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def signed_init_data():
    """Factory for init data signed with the test bot token."""
    return make_init_data
