"""测试配置和 fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from readshelf.models import Article, Database, ParseStatus
from readshelf.storage.articles import create_article

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def _mock_client(handler: Handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def mock_client() -> Callable[[Handler], httpx.AsyncClient]:
    """创建使用 MockTransport 的 HTTP 客户端工厂."""
    return _mock_client


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """创建测试用的临时文件数据库."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def sample_article(db: Database) -> Article:
    """创建测试用的文章."""
    return await create_article(
        db,
        url="https://example.com/article-1",
        title="Article 1",
        content_html="<p>Hello</p>",
        content_text="Hello",
        parse_status=ParseStatus.SUCCESS,
    )


@pytest_asyncio.fixture
async def client(db: Database) -> AsyncGenerator[httpx.AsyncClient, None]:
    """创建测试用的 API 客户端（数据库替换为测试库）."""
    from readshelf.main import app
    from readshelf.models.database import get_database

    app.dependency_overrides[get_database] = lambda: db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
