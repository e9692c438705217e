"""数据库初始化、会话管理与写事务."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


class Database:
    """
    数据库句柄.

    所有写事务经同一把锁串行执行（单写者），读操作不加锁。
    """

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._write_lock = asyncio.Lock()

    @property
    def is_memory(self) -> bool:
        """是否为内存数据库."""
        database = make_url(self.url).database
        return not database or database == ":memory:"

    async def create_all(self) -> None:
        """创建所有表."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    def session(self) -> AsyncSession:
        """创建只读用途的会话."""
        return self._session_factory()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        打开一个原子写事务.

        正常退出时提交，异常时回滚并继续抛出。
        """
        async with self._write_lock:
            async with self._session_factory() as session, session.begin():
                yield session

    async def dispose(self) -> None:
        """释放连接池."""
        await self.engine.dispose()


# 全局数据库
_database: Database | None = None


async def init_db(database_url: str) -> Database:
    """初始化数据库，创建所有表."""
    global _database

    # 注册所有表
    import readshelf.models  # noqa: F401

    _database = Database(database_url)
    await _database.create_all()
    logger.info(f"数据库已初始化: {database_url}")
    return _database


def get_database() -> Database:
    """获取全局数据库（用于依赖注入）."""
    if _database is None:
        msg = "数据库未初始化，请先调用 init_db()"
        raise RuntimeError(msg)
    return _database


async def close_db() -> None:
    """关闭全局数据库."""
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None
