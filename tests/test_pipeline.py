"""测试完整导入流程."""

import asyncio
import threading
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlmodel import select

from readshelf.config import get_settings
from readshelf.errors import ImportValidationError
from readshelf.importer.extractor import ExtractedArticle
from readshelf.importer.fetcher import FetchResult
from readshelf.importer.pipeline import ImportReport, ImportRunner, create_import, run_import
from readshelf.models import Article, ImportJob, ImportJobStatus, ParseStatus
from readshelf.storage.articles import list_articles
from readshelf.storage.assets import list_assets_for_article
from readshelf.storage.import_jobs import get_import_job, list_import_failures
from readshelf.storage.settings import get_storage_persistence_state
from readshelf.storage.tags import get_tags_for_article

PNG = b"\x89PNG\r\n\x1a\nfake"

EXPORT_HTML = """
<html><body><ul>
<li><a href="https://blog.example.com/post" tags="reading,tech">A post</a></li>
<li><a href="https://blog.example.com/gone">Gone</a></li>
</ul></body></html>
"""


def fake_extractor(html: str, url: str) -> ExtractedArticle:
    """测试用提取器：把页面原样作为正文."""
    return ExtractedArticle(
        title="Page title",
        content_html='<p>Body</p><img src="/img/cover.png">',
        content_text="Body",
        parse_status=ParseStatus.SUCCESS,
    )


def site(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/post":
        return httpx.Response(200, text="<html><body><p>Body</p></body></html>")
    if request.url.path == "/img/cover.png":
        return httpx.Response(200, content=PNG, headers={"Content-Type": "image/png"})
    return httpx.Response(404)


class TestImportPipeline:
    """测试导入执行器."""

    async def test_end_to_end(self, db, mock_client) -> None:
        """一条成功一条 404：一篇文章、一张图片、任务 completed."""
        progress: list[str] = []

        def on_progress(result: FetchResult, report: ImportReport) -> None:
            progress.append(result.status)

        async with mock_client(site) as client:
            report = await run_import(
                db,
                "ril_export.html",
                EXPORT_HTML,
                on_progress,
                extractor=fake_extractor,
                client=client,
                concurrency=2,
                timeout=5,
            )

        assert report.total == 2
        assert report.completed == 1
        assert report.failed == 1
        assert report.cached_assets == 1
        assert sorted(progress) == ["error", "success"]

        articles = await list_articles(db)
        assert len(articles) == 1
        article = articles[0]
        assert article.url == "https://blog.example.com/post"
        assert article.title == "A post"
        assert report.article_ids == [article.id]

        assets = await list_assets_for_article(db, article.id)
        assert len(assets) == 1
        assert assets[0].url == "https://blog.example.com/img/cover.png"
        assert f"asset://{assets[0].id}" in article.content_html

        tags = await get_tags_for_article(db, article.id)
        assert [tag.name for tag in tags] == ["reading", "tech"]

        job = await get_import_job(db, report.job_id)
        assert job is not None
        assert job.status == ImportJobStatus.COMPLETED
        assert job.total_count == 2
        assert job.completed_count == 1
        assert job.failed_count == 1
        assert job.completed_at is not None

        failures = await list_import_failures(db, report.job_id)
        assert [(f.url, f.title, f.error) for f in failures] == [
            ("https://blog.example.com/gone", "Gone", "HTTP 404")
        ]

        assert await get_storage_persistence_state(db) == "granted"

    async def test_page_title_used_when_bookmark_has_none(
        self, db, mock_client
    ) -> None:
        """书签标题就是 URL 时使用页面标题."""
        document = '<a href="https://blog.example.com/post"></a>'
        async with mock_client(site) as client:
            await run_import(
                db, "ril_export.html", document, extractor=fake_extractor, client=client
            )

        articles = await list_articles(db)
        assert [a.title for a in articles] == ["Page title"]

    async def test_extractor_exception_saves_failed_article(
        self, db, mock_client
    ) -> None:
        """提取器异常时文章仍被保存，状态为 failed."""

        def broken(html: str, url: str) -> ExtractedArticle:
            raise RuntimeError("parser crashed")

        document = '<a href="https://blog.example.com/post">Post</a>'
        async with mock_client(site) as client:
            report = await run_import(
                db, "ril_export.html", document, extractor=broken, client=client
            )

        assert report.completed == 1
        articles = await list_articles(db)
        assert articles[0].parse_status == ParseStatus.FAILED
        assert articles[0].content_html == ""

    async def test_all_failed_leaves_persistence_unknown(
        self, db, mock_client
    ) -> None:
        """没有成功的书签时不确定持久化状态."""
        document = '<a href="https://blog.example.com/gone">Gone</a>'
        async with mock_client(site) as client:
            report = await run_import(
                db, "ril_export.html", document, extractor=fake_extractor, client=client
            )

        job = await get_import_job(db, report.job_id)
        assert job is not None
        assert job.status == ImportJobStatus.COMPLETED
        assert job.failed_count == 1
        assert await get_storage_persistence_state(db) == "unknown"

    async def test_storage_error_fails_job(self, db, mock_client) -> None:
        """存储失败中止导入，任务标记为 failed."""
        job, candidates = await create_import(db, "ril_export.html", EXPORT_HTML)
        runner = ImportRunner(db, extractor=fake_extractor)

        with patch(
            "readshelf.importer.pipeline.create_article",
            AsyncMock(side_effect=RuntimeError("disk full")),
        ):
            async with mock_client(site) as client:
                runner.client = client
                with pytest.raises(RuntimeError, match="disk full"):
                    await runner.run(job.id, candidates)

        stored = await get_import_job(db, job.id)
        assert stored is not None
        assert stored.status == ImportJobStatus.FAILED
        assert stored.completed_at is not None

    async def test_invalid_file_creates_no_job(self, db) -> None:
        """文件无效时不创建任务."""
        with pytest.raises(ImportValidationError):
            await run_import(db, "ril_export.html", "<html><body></body></html>")

        async with db.session() as session:
            result = await session.execute(select(ImportJob))
            assert result.scalars().all() == []
            result = await session.execute(select(Article))
            assert result.scalars().all() == []


class TestImportRunnerOptions:
    """测试执行器参数."""

    async def test_defaults_from_settings(self, db) -> None:
        """未指定时使用配置."""
        settings = get_settings()
        runner = ImportRunner(db)

        assert runner.concurrency == settings.fetch_concurrency
        assert runner.timeout == settings.fetch_timeout_seconds
        assert runner.asset_concurrency == settings.asset_concurrency

    async def test_explicit_zero_is_not_replaced_by_defaults(self, db) -> None:
        """显式传入 0 或负数时并发数下限为 1，超时原样保留."""
        runner = ImportRunner(db, concurrency=0, timeout=0, asset_concurrency=-2)

        assert runner.concurrency == 1
        assert runner.asset_concurrency == 1
        assert runner.timeout == 0


class TestExtractionOffLoop:
    """测试正文提取不阻塞事件循环."""

    async def test_extractor_runs_in_worker_thread(self, db, mock_client) -> None:
        """提取器在线程池中执行."""
        threads: list[str] = []

        def recording_extractor(html: str, url: str) -> ExtractedArticle:
            threads.append(threading.current_thread().name)
            return fake_extractor(html, url)

        document = '<a href="https://blog.example.com/post">Post</a>'
        async with mock_client(site) as client:
            await run_import(
                db,
                "ril_export.html",
                document,
                extractor=recording_extractor,
                client=client,
            )

        assert len(threads) == 1
        assert threads[0].startswith("readshelf-extract")

    async def test_event_loop_keeps_running_during_extraction(
        self, db, mock_client
    ) -> None:
        """提取过程中其他协程仍可运行."""
        released = threading.Event()
        waited: list[bool] = []

        def waiting_extractor(html: str, url: str) -> ExtractedArticle:
            # 只有事件循环在提取期间继续运转，release 才能执行
            waited.append(released.wait(timeout=2))
            return fake_extractor(html, url)

        async def release() -> None:
            await asyncio.sleep(0.05)
            released.set()

        document = '<a href="https://blog.example.com/post">Post</a>'
        async with mock_client(site) as client:
            report, _ = await asyncio.gather(
                run_import(
                    db,
                    "ril_export.html",
                    document,
                    extractor=waiting_extractor,
                    client=client,
                ),
                release(),
            )

        assert waited == [True]
        assert report.completed == 1
