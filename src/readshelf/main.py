"""ReadShelf 主应用入口."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from readshelf.api import articles, assets, export, imports, settings, tags
from readshelf.config import get_settings
from readshelf.models.database import close_db, init_db

# 配置日志
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """应用生命周期管理."""
    app_settings = get_settings()

    logger.info("正在初始化数据库...")
    await init_db(app_settings.database_url)

    logger.info("ReadShelf 启动完成！")
    yield

    logger.info("正在关闭...")
    await close_db()
    logger.info("ReadShelf 已关闭")


app = FastAPI(
    title="ReadShelf",
    description="本地优先的稍后读文库 - 书签导入、全文抓取与离线阅读",
    version="0.1.0",
    lifespan=lifespan,
)

# 注册路由
app.include_router(imports.router)
app.include_router(articles.router)
app.include_router(tags.router)
app.include_router(assets.router)
app.include_router(export.router)
app.include_router(settings.router)


@app.get("/")
async def root() -> dict:
    """根路径."""
    return {
        "name": "ReadShelf",
        "version": "0.1.0",
        "description": "本地优先的稍后读文库",
    }


@app.get("/health")
async def health() -> dict:
    """健康检查."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "readshelf.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
