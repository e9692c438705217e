"""键值配置存储（阅读偏好与存储持久化状态）."""

import logging
from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, ValidationError

from readshelf.models.database import Database
from readshelf.models.settings import SettingItem

logger = logging.getLogger(__name__)

READER_PREFERENCES_KEY = "reader_preferences"
STORAGE_PERSISTENCE_KEY = "storage_persistence"

StoragePersistenceState = Literal["unknown", "granted", "denied", "unsupported"]


class ReaderPreferences(BaseModel):
    """阅读偏好."""

    font_size: float = 1.05
    line_width: int = 72
    dark_mode: bool = False


async def get_setting(db: Database, key: str) -> str | None:
    """读取配置值."""
    async with db.session() as session:
        item = await session.get(SettingItem, key)
        return item.value if item else None


async def set_setting(db: Database, key: str, value: str) -> None:
    """写入配置值（不存在时创建）."""
    async with db.transaction() as session:
        item = await session.get(SettingItem, key)
        if item:
            item.value = value
            item.updated_at = datetime.utcnow()
        else:
            session.add(SettingItem(key=key, value=value))


async def get_reader_preferences(db: Database) -> ReaderPreferences:
    """读取阅读偏好，缺失字段用默认值补齐，数据损坏时返回默认值."""
    raw = await get_setting(db, READER_PREFERENCES_KEY)
    if raw is None:
        return ReaderPreferences()

    try:
        return ReaderPreferences.model_validate_json(raw)
    except ValidationError:
        logger.warning("阅读偏好数据无效，使用默认值")
        return ReaderPreferences()


async def set_reader_preferences(db: Database, preferences: ReaderPreferences) -> None:
    """保存阅读偏好."""
    await set_setting(db, READER_PREFERENCES_KEY, preferences.model_dump_json())


async def get_storage_persistence_state(db: Database) -> StoragePersistenceState:
    """读取存储持久化状态，无法识别的值视为 unknown."""
    raw = await get_setting(db, STORAGE_PERSISTENCE_KEY)
    if raw in ("granted", "denied", "unsupported"):
        return raw  # type: ignore[return-value]
    return "unknown"


async def set_storage_persistence_state(
    db: Database, state: StoragePersistenceState
) -> None:
    """保存存储持久化状态."""
    if state not in get_args(StoragePersistenceState):
        msg = f"未知的持久化状态: {state}"
        raise ValueError(msg)
    await set_setting(db, STORAGE_PERSISTENCE_KEY, state)
