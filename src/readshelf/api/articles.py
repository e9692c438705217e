"""文章 API."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from readshelf.models.article import Article
from readshelf.models.database import Database, get_database
from readshelf.search import build_article_search_index, search_articles
from readshelf.storage.articles import (
    archive_article,
    get_article_by_id,
    list_articles,
    mark_read,
)
from readshelf.storage.tags import (
    add_tags_to_article,
    get_tags_for_article,
    set_tags_for_article,
)
from readshelf.utils.asset_url import render_asset_urls

router = APIRouter(prefix="/api/articles", tags=["articles"])


class SetTagsRequest(BaseModel):
    """整体替换标签."""

    tag_ids: list[str]


class AddTagsRequest(BaseModel):
    """按名称追加标签."""

    names: list[str]


def _summary(article: Article) -> dict:
    return {
        "id": article.id,
        "url": article.url,
        "title": article.title,
        "parse_status": article.parse_status,
        "saved_at": article.saved_at.isoformat(),
        "is_read": article.is_read,
        "is_archived": article.is_archived,
    }


async def _require_article(db: Database, article_id: str) -> Article:
    article = await get_article_by_id(db, article_id)
    if not article:
        raise HTTPException(status_code=404, detail="文章不存在")
    return article


@router.get("")
async def get_articles(
    include_archived: bool = Query(False, description="是否包含归档文章"),
    db: Database = Depends(get_database),
) -> dict:
    """获取文章列表（按保存时间倒序）."""
    articles = await list_articles(db, include_archived=include_archived)
    return {
        "total": len(articles),
        "items": [_summary(article) for article in articles],
    }


@router.get("/search")
async def search(
    q: str = Query(..., description="搜索词"),
    limit: int = Query(20, ge=1, le=100, description="最多返回条数"),
    include_archived: bool = Query(False, description="是否包含归档文章"),
    db: Database = Depends(get_database),
) -> dict:
    """全文搜索文章."""
    articles = await list_articles(db, include_archived=include_archived)
    index = build_article_search_index(articles)
    ids = search_articles(index, q, limit)

    by_id = {article.id: article for article in articles}
    return {"total": len(ids), "items": [_summary(by_id[i]) for i in ids]}


@router.get("/{article_id}")
async def get_article(
    article_id: str,
    resolve_assets: bool = Query(False, description="把 asset:// 引用替换为资源地址"),
    db: Database = Depends(get_database),
) -> dict:
    """获取文章详情."""
    article = await _require_article(db, article_id)
    tags = await get_tags_for_article(db, article_id)

    content_html = article.content_html
    if resolve_assets:
        content_html = render_asset_urls(content_html, "/api/assets/")

    return {
        **_summary(article),
        "content_html": content_html,
        "content_text": article.content_text,
        "created_at": article.created_at.isoformat(),
        "updated_at": article.updated_at.isoformat(),
        "tags": [{"id": tag.id, "name": tag.name} for tag in tags],
    }


@router.patch("/{article_id}/read")
async def set_read(
    article_id: str,
    read: bool = Query(True, description="是否已读"),
    db: Database = Depends(get_database),
) -> dict:
    """标记已读/未读."""
    article = await mark_read(db, article_id, read)
    if not article:
        raise HTTPException(status_code=404, detail="文章不存在")
    return {"id": article_id, "is_read": article.is_read}


@router.patch("/{article_id}/archive")
async def set_archived(
    article_id: str,
    archived: bool = Query(True, description="是否归档"),
    db: Database = Depends(get_database),
) -> dict:
    """归档/取消归档."""
    article = await archive_article(db, article_id, archived)
    if not article:
        raise HTTPException(status_code=404, detail="文章不存在")
    return {"id": article_id, "is_archived": article.is_archived}


@router.put("/{article_id}/tags")
async def replace_tags(
    article_id: str,
    request: SetTagsRequest,
    db: Database = Depends(get_database),
) -> dict:
    """整体替换文章标签."""
    await _require_article(db, article_id)
    await set_tags_for_article(db, article_id, request.tag_ids)
    tags = await get_tags_for_article(db, article_id)
    return {"id": article_id, "tags": [{"id": t.id, "name": t.name} for t in tags]}


@router.post("/{article_id}/tags")
async def add_tags(
    article_id: str,
    request: AddTagsRequest,
    db: Database = Depends(get_database),
) -> dict:
    """按名称追加标签."""
    await _require_article(db, article_id)
    await add_tags_to_article(db, article_id, request.names)
    tags = await get_tags_for_article(db, article_id)
    return {"id": article_id, "tags": [{"id": t.id, "name": t.name} for t in tags]}
