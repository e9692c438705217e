"""导入任务执行器.

书签 -> 有界并发抓取 -> 正文提取 -> 保存文章 -> 缓存图片 -> 附加标签 -> 更新导入任务。
单条书签失败只记入任务的失败计数和失败明细，不影响其他书签；
存储失败不会取消其他书签，但全部结束后任务标记为 failed 并继续抛出。
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from readshelf.config import get_settings
from readshelf.importer.assets import cache_article_assets
from readshelf.importer.bookmarks import BookmarkCandidate, load_bookmark_export
from readshelf.importer.extractor import ExtractedArticle, Extractor, extract_article
from readshelf.importer.fetcher import FetchResult, build_client, fetch_many
from readshelf.models.article import ParseStatus
from readshelf.models.database import Database
from readshelf.models.import_job import ImportJob, ImportJobStatus
from readshelf.storage.articles import create_article, update_article
from readshelf.storage.import_jobs import (
    complete_import_job,
    create_import_job,
    record_import_job_result,
    start_import_job,
)
from readshelf.storage.settings import (
    get_storage_persistence_state,
    set_storage_persistence_state,
)
from readshelf.storage.tags import add_tags_to_article

logger = logging.getLogger(__name__)


@dataclass
class ImportItemFailure:
    """导入失败记录."""

    url: str
    title: str
    status: str
    error: str | None
    failed_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ImportReport:
    """一次导入的汇总."""

    job_id: str
    total: int
    completed: int = 0
    failed: int = 0
    cached_assets: int = 0
    failed_assets: int = 0
    article_ids: list[str] = field(default_factory=list)
    errors: list[ImportItemFailure] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None


ProgressCallback = Callable[[FetchResult, ImportReport], Awaitable[None] | None]


async def create_import(
    db: Database, filename: str, document: str
) -> tuple[ImportJob, list[BookmarkCandidate]]:
    """
    解析、校验导出文件并创建导入任务.

    Raises:
        ImportValidationError: 文件无效（此时不会创建任务）
    """
    candidates = load_bookmark_export(filename, document)
    job = await create_import_job(db, len(candidates))
    return job, candidates


class ImportRunner:
    """导入任务执行器."""

    def __init__(
        self,
        db: Database,
        *,
        extractor: Extractor = extract_article,
        client: httpx.AsyncClient | None = None,
        concurrency: int | None = None,
        timeout: float | None = None,
        asset_concurrency: int | None = None,
    ) -> None:
        settings = get_settings()
        self.db = db
        self.extractor = extractor
        self.client = client
        self.concurrency = max(
            1, settings.fetch_concurrency if concurrency is None else concurrency
        )
        self.timeout = settings.fetch_timeout_seconds if timeout is None else timeout
        self.asset_concurrency = max(
            1,
            settings.asset_concurrency if asset_concurrency is None else asset_concurrency,
        )
        self._executor: ThreadPoolExecutor | None = None

    async def run(
        self,
        job_id: str,
        candidates: list[BookmarkCandidate],
        on_progress: ProgressCallback | None = None,
    ) -> ImportReport:
        """
        执行导入.

        Args:
            job_id: create_import 创建的任务
            candidates: 待导入书签
            on_progress: 每条书签处理完后调用（按完成顺序）

        Returns:
            ImportReport: 导入结果
        """
        # 正文提取是同步的 CPU 操作，放到线程池里执行，不阻塞抓取
        executor = ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix="readshelf-extract"
        )
        self._executor = executor
        try:
            if self.client is not None:
                return await self._run(self.client, job_id, candidates, on_progress)
            async with build_client() as client:
                return await self._run(client, job_id, candidates, on_progress)
        finally:
            executor.shutdown(wait=False)
            self._executor = None

    async def _run(
        self,
        client: httpx.AsyncClient,
        job_id: str,
        candidates: list[BookmarkCandidate],
        on_progress: ProgressCallback | None,
    ) -> ImportReport:
        report = ImportReport(job_id=job_id, total=len(candidates))
        items_by_url: dict[str, BookmarkCandidate] = {}
        for candidate in candidates:
            items_by_url.setdefault(candidate.url, candidate)

        await start_import_job(self.db, job_id)
        logger.info(f"开始导入: job={job_id}, 共 {len(candidates)} 条书签")

        async def handle_result(result: FetchResult) -> None:
            await self._handle_result(
                client, report, items_by_url[result.url], result
            )
            if on_progress is not None:
                outcome = on_progress(result, report)
                if inspect.isawaitable(outcome):
                    await outcome

        try:
            await fetch_many(
                [candidate.url for candidate in candidates],
                self.concurrency,
                self.timeout,
                on_result=handle_result,
                client=client,
            )
        except Exception:
            logger.error(f"导入出现致命错误，任务标记为 failed: job={job_id}")
            await complete_import_job(self.db, job_id, ImportJobStatus.FAILED)
            raise

        await complete_import_job(self.db, job_id)
        report.completed_at = datetime.utcnow()
        logger.info(
            f"导入完成: job={job_id}, 成功={report.completed}, 失败={report.failed}, "
            f"图片={report.cached_assets}"
        )

        if report.completed > 0:
            await self._resolve_storage_persistence()

        return report

    async def _handle_result(
        self,
        client: httpx.AsyncClient,
        report: ImportReport,
        item: BookmarkCandidate,
        result: FetchResult,
    ) -> None:
        """处理单条抓取结果."""
        if result.status != "success" or result.html is None:
            await record_import_job_result(
                self.db,
                report.job_id,
                "failed",
                url=item.url,
                title=item.title,
                status=result.status,
                error=result.error,
            )
            report.failed += 1
            report.errors.append(
                ImportItemFailure(
                    url=item.url,
                    title=item.title,
                    status=result.status,
                    error=result.error,
                )
            )
            return

        try:
            article_id = await self._store_article(client, report, item, result.html)
        except Exception:
            logger.exception(f"保存文章失败: job={report.job_id}, url={item.url}")
            raise

        await record_import_job_result(self.db, report.job_id, "success")
        report.completed += 1
        report.article_ids.append(article_id)

    async def _extract(self, item: BookmarkCandidate, html: str) -> ExtractedArticle:
        """在线程池中提取正文，异常按解析失败处理."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self._executor, self.extractor, html, item.url
            )
        except Exception as e:
            logger.warning(f"正文提取异常: {item.url} - {e}")
            return ExtractedArticle(parse_status=ParseStatus.FAILED)

    async def _store_article(
        self,
        client: httpx.AsyncClient,
        report: ImportReport,
        item: BookmarkCandidate,
        html: str,
    ) -> str:
        """保存文章、缓存图片并附加标签，返回文章 ID."""
        extracted = await self._extract(item, html)

        # 书签没有标题时（标题即 URL）用页面标题
        title = item.title
        if title == item.url and extracted.title:
            title = extracted.title

        article = await create_article(
            self.db,
            url=item.url,
            title=title,
            content_html=extracted.content_html,
            content_text=extracted.content_text,
            parse_status=extracted.parse_status,
        )

        cached = await cache_article_assets(
            self.db,
            article.id,
            item.url,
            extracted.content_html,
            self.asset_concurrency,
            client=client,
        )
        if cached.html != extracted.content_html:
            await update_article(self.db, article.id, content_html=cached.html)
        report.cached_assets += cached.cached_count
        report.failed_assets += cached.failed_count

        await add_tags_to_article(self.db, article.id, item.tags)
        return article.id

    async def _resolve_storage_persistence(self) -> None:
        """首次成功导入后确定存储持久化状态."""
        state = await get_storage_persistence_state(self.db)
        if state != "unknown":
            return
        await set_storage_persistence_state(
            self.db, "unsupported" if self.db.is_memory else "granted"
        )


async def run_import(
    db: Database,
    filename: str,
    document: str,
    on_progress: ProgressCallback | None = None,
    **runner_options: object,
) -> ImportReport:
    """解析导出文件并完整执行一次导入."""
    job, candidates = await create_import(db, filename, document)
    runner = ImportRunner(db, **runner_options)  # type: ignore[arg-type]
    return await runner.run(job.id, candidates, on_progress)
