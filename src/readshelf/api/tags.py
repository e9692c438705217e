"""标签 API."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from readshelf.models.database import Database, get_database
from readshelf.storage.tags import create_tag, delete_tag, list_tags

router = APIRouter(prefix="/api/tags", tags=["tags"])


class CreateTagRequest(BaseModel):
    """创建标签."""

    name: str


@router.get("")
async def get_tags(db: Database = Depends(get_database)) -> dict:
    """获取所有标签."""
    tags = await list_tags(db)
    return {"tags": [{"id": tag.id, "name": tag.name} for tag in tags]}


@router.post("")
async def add_tag(
    request: CreateTagRequest,
    db: Database = Depends(get_database),
) -> dict:
    """创建标签（已存在时返回已有标签）."""
    tag = await create_tag(db, request.name)
    if tag is None:
        raise HTTPException(status_code=400, detail="标签名不能为空")
    return {"id": tag.id, "name": tag.name}


@router.delete("/{tag_id}")
async def remove_tag(tag_id: str, db: Database = Depends(get_database)) -> dict:
    """删除标签及其关联."""
    await delete_tag(db, tag_id)
    return {"id": tag_id, "deleted": True}
