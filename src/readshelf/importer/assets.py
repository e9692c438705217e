"""文章图片缓存.

解析正文中的 <img>，按绝对 URL 去重后有界并发地下载，保存为 Asset，
再把成功缓存的图片 src 改写为 asset://<assetId> 并移除 srcset。
下载失败的图片保持原样，只计数不影响其他图片。
"""

import logging
import mimetypes
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel

from readshelf.config import get_settings
from readshelf.errors import AssetFetchFailure, FetchTimeoutError, NetworkError
from readshelf.importer.fetcher import build_client, request_with_deadline
from readshelf.models.database import Database
from readshelf.storage.assets import create_asset
from readshelf.utils.asset_url import build_asset_url
from readshelf.utils.concurrency import run_bounded

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class CacheAssetsResult(BaseModel):
    """图片缓存结果."""

    html: str
    cached_count: int = 0
    failed_count: int = 0


def resolve_image_url(src: str, base_url: str) -> str | None:
    """把 src 解析为绝对 URL；data URI、空值和非 http(s) 地址返回 None."""
    src = src.strip()
    if not src or src.startswith("data:"):
        return None

    try:
        resolved = urljoin(base_url, src)
    except ValueError:
        return None

    if urlparse(resolved).scheme not in ("http", "https"):
        return None
    return resolved


async def fetch_image(
    client: httpx.AsyncClient, url: str, timeout: float
) -> tuple[bytes, str]:
    """
    下载一张图片.

    Returns:
        (内容, content_type)；content_type 依次取响应头、按 URL 推断、通用二进制类型

    Raises:
        AssetFetchFailure: 超时、网络错误或非 2xx 响应
    """
    try:
        response = await request_with_deadline(client, url, timeout)
    except (FetchTimeoutError, NetworkError) as e:
        raise AssetFetchFailure(url, str(e)) from e

    if not response.is_success:
        raise AssetFetchFailure(url, f"HTTP {response.status_code}")

    content_type = (
        response.headers.get("content-type")
        or mimetypes.guess_type(urlparse(url).path)[0]
        or DEFAULT_CONTENT_TYPE
    )
    return response.content, content_type


def _image_targets(soup: BeautifulSoup, base_url: str) -> list[tuple[Tag, str]]:
    targets: list[tuple[Tag, str]] = []
    for image in soup.find_all("img"):
        src = image.get("src")
        if not isinstance(src, str):
            continue
        resolved = resolve_image_url(src, base_url)
        if resolved:
            targets.append((image, resolved))
    return targets


async def cache_article_assets(
    db: Database,
    article_id: str,
    base_url: str,
    html: str,
    concurrency: int | None = None,
    *,
    timeout: float | None = None,
    client: httpx.AsyncClient | None = None,
) -> CacheAssetsResult:
    """
    缓存文章正文中的图片并改写引用.

    没有可缓存的图片时原样返回 html，调用方可据此跳过回写。
    存储失败会直接抛出。
    """
    settings = get_settings()
    if concurrency is None:
        concurrency = settings.asset_concurrency
    if timeout is None:
        timeout = settings.asset_timeout_seconds

    if not html.strip():
        return CacheAssetsResult(html=html)

    soup = BeautifulSoup(html, "lxml")
    targets = _image_targets(soup, base_url)
    if not targets:
        return CacheAssetsResult(html=html)

    if client is None:
        async with build_client() as owned_client:
            return await cache_article_assets(
                db,
                article_id,
                base_url,
                html,
                concurrency,
                timeout=timeout,
                client=owned_client,
            )

    unique_urls = list(dict.fromkeys(url for _, url in targets))
    url_to_asset_id: dict[str, str] = {}

    async def handle(_index: int, url: str) -> None:
        try:
            blob, content_type = await fetch_image(client, url, timeout)
        except AssetFetchFailure as e:
            logger.warning(f"图片缓存失败: article={article_id} {e}")
            return

        asset = await create_asset(
            db,
            article_id=article_id,
            url=url,
            content_type=content_type,
            blob=blob,
        )
        url_to_asset_id[url] = asset.id

    await run_bounded(unique_urls, concurrency, handle)

    cached_count = len(url_to_asset_id)
    failed_count = len(unique_urls) - cached_count
    logger.info(
        f"图片缓存完成: article={article_id}, 成功={cached_count}, 失败={failed_count}"
    )

    if not url_to_asset_id:
        return CacheAssetsResult(html=html, failed_count=failed_count)

    for image, resolved in targets:
        asset_id = url_to_asset_id.get(resolved)
        if asset_id is None:
            continue
        image["src"] = build_asset_url(asset_id)
        if image.has_attr("srcset"):
            del image["srcset"]

    container = soup.body or soup
    return CacheAssetsResult(
        html=container.decode_contents(),
        cached_count=cached_count,
        failed_count=failed_count,
    )
