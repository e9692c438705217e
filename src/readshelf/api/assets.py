"""本地图片 API."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from readshelf.models.database import Database, get_database
from readshelf.storage.assets import get_asset_by_id

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("/{asset_id}")
async def get_asset(asset_id: str, db: Database = Depends(get_database)) -> Response:
    """返回缓存图片."""
    asset = await get_asset_by_id(db, asset_id)
    if not asset:
        raise HTTPException(status_code=404, detail="资源不存在")
    return Response(content=asset.blob, media_type=asset.content_type)
