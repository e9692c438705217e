"""页面抓取（有界并发）."""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Literal

import httpx
from pydantic import BaseModel

from readshelf.config import get_settings
from readshelf.errors import FetchTimeoutError, NetworkError
from readshelf.utils.concurrency import run_bounded

logger = logging.getLogger(__name__)


class FetchResult(BaseModel):
    """单个 URL 的抓取结果."""

    url: str
    status: Literal["success", "timeout", "error"]
    html: str | None = None
    error: str | None = None
    status_code: int | None = None
    duration_ms: float


ResultCallback = Callable[[FetchResult], Awaitable[None] | None]


def build_client(user_agent: str | None = None) -> httpx.AsyncClient:
    """创建抓取用的 HTTP 客户端."""
    headers = {
        "User-Agent": user_agent or get_settings().user_agent,
        "Accept": "text/html,application/xhtml+xml,image/*;q=0.9,*/*;q=0.8",
    }
    return httpx.AsyncClient(follow_redirects=True, headers=headers)


async def request_with_deadline(
    client: httpx.AsyncClient, url: str, timeout: float
) -> httpx.Response:
    """
    在截止时间内完成 GET 请求，超时会中止进行中的请求.

    不检查响应状态码。

    Raises:
        FetchTimeoutError: 超过 timeout 秒
        NetworkError: 传输层失败
    """
    try:
        return await asyncio.wait_for(client.get(url, timeout=timeout), timeout)
    except (TimeoutError, httpx.TimeoutException) as e:
        raise FetchTimeoutError(timeout) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NetworkError(str(e) or type(e).__name__) from e


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


async def fetch_one(
    url: str,
    timeout: float | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> FetchResult:
    """
    抓取单个页面的原始 HTML.

    超时返回 timeout；非 2xx 返回 error 并带上状态码；网络失败返回 error
    并带上底层错误信息。三种结果都记录耗时，不抛出异常。
    """
    if timeout is None:
        timeout = get_settings().fetch_timeout_seconds

    if client is None:
        async with build_client() as owned_client:
            return await fetch_one(url, timeout, client=owned_client)

    started = time.perf_counter()
    try:
        response = await request_with_deadline(client, url, timeout)
    except FetchTimeoutError as e:
        logger.warning(f"抓取超时: {url} ({timeout:g}s)")
        return FetchResult(
            url=url, status="timeout", error=str(e), duration_ms=_elapsed_ms(started)
        )
    except NetworkError as e:
        logger.warning(f"抓取失败: {url} - {e}")
        return FetchResult(
            url=url, status="error", error=str(e), duration_ms=_elapsed_ms(started)
        )

    if not response.is_success:
        logger.warning(f"抓取失败: {url} - HTTP {response.status_code}")
        return FetchResult(
            url=url,
            status="error",
            html=response.text,
            error=f"HTTP {response.status_code}",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )

    duration_ms = _elapsed_ms(started)
    logger.info(f"抓取成功: {url} ({duration_ms:.0f}ms)")
    return FetchResult(
        url=url,
        status="success",
        html=response.text,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )


async def fetch_many(
    urls: list[str],
    concurrency: int | None = None,
    timeout: float | None = None,
    on_result: ResultCallback | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> list[FetchResult]:
    """
    有界并发地批量抓取.

    每完成一个 URL 立即调用 on_result（按完成顺序）；返回值按输入顺序
    排列，results[i].url == urls[i]。

    Args:
        urls: 待抓取的 URL
        concurrency: 并发数，默认取配置，最小为 1
        timeout: 单个请求超时（秒），默认取配置
        on_result: 单条完成回调，可以是协程函数
        client: 复用的 HTTP 客户端
    """
    settings = get_settings()
    if concurrency is None:
        concurrency = settings.fetch_concurrency
    if timeout is None:
        timeout = settings.fetch_timeout_seconds

    if client is None:
        async with build_client() as owned_client:
            return await fetch_many(
                urls, concurrency, timeout, on_result, client=owned_client
            )

    async def handle(_index: int, url: str) -> FetchResult:
        result = await fetch_one(url, timeout, client=client)
        if on_result is not None:
            outcome = on_result(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    logger.info(f"开始批量抓取: {len(urls)} 个 URL, 并发={max(1, concurrency)}")
    return await run_bounded(urls, concurrency, handle)
