"""图片资源存储."""

from sqlmodel import select

from readshelf.models.asset import Asset
from readshelf.models.database import Database


async def create_asset(
    db: Database,
    *,
    article_id: str,
    url: str,
    content_type: str,
    blob: bytes,
) -> Asset:
    """保存一张缓存图片."""
    asset = Asset(
        article_id=article_id,
        url=url,
        content_type=content_type,
        blob=blob,
    )
    async with db.transaction() as session:
        session.add(asset)
    return asset


async def get_asset_by_id(db: Database, asset_id: str) -> Asset | None:
    """按 ID 获取图片."""
    async with db.session() as session:
        return await session.get(Asset, asset_id)


async def list_assets_for_article(db: Database, article_id: str) -> list[Asset]:
    """获取文章的所有缓存图片."""
    async with db.session() as session:
        result = await session.execute(
            select(Asset).where(Asset.article_id == article_id)
        )
        return list(result.scalars().all())
