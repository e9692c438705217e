"""数据维护."""

import logging

from sqlalchemy import delete

from readshelf.models import (
    Article,
    ArticleTag,
    Asset,
    ImportFailure,
    ImportJob,
    SettingItem,
    Tag,
)
from readshelf.models.database import Database

logger = logging.getLogger(__name__)


async def clear_all_data(db: Database) -> None:
    """在一个事务中清空所有表."""
    async with db.transaction() as session:
        # 先删关联表
        for model in (ArticleTag, Asset, ImportFailure):
            await session.execute(delete(model))
        for model in (Article, Tag, ImportJob, SettingItem):
            await session.execute(delete(model))

    logger.info("已清空所有数据")
