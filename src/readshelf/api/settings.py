"""设置 API."""

from fastapi import APIRouter, Depends

from readshelf.models.database import Database, get_database
from readshelf.storage.settings import (
    ReaderPreferences,
    get_reader_preferences,
    get_storage_persistence_state,
    set_reader_preferences,
)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/reader")
async def get_reader_settings(
    db: Database = Depends(get_database),
) -> ReaderPreferences:
    """获取阅读偏好."""
    return await get_reader_preferences(db)


@router.put("/reader")
async def update_reader_settings(
    preferences: ReaderPreferences,
    db: Database = Depends(get_database),
) -> ReaderPreferences:
    """保存阅读偏好."""
    await set_reader_preferences(db, preferences)
    return preferences


@router.get("/storage")
async def get_storage_settings(db: Database = Depends(get_database)) -> dict:
    """获取存储持久化状态."""
    return {"persistence": await get_storage_persistence_state(db)}
