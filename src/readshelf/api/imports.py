"""导入 API."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile

from readshelf.errors import ImportValidationError
from readshelf.importer.bookmarks import BookmarkCandidate
from readshelf.importer.pipeline import ImportRunner, create_import
from readshelf.models.database import Database, get_database
from readshelf.storage.import_jobs import get_import_job, list_import_failures

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/imports", tags=["imports"])


@router.post("")
async def upload_export(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="ril_export.html"),
    db: Database = Depends(get_database),
) -> dict:
    """上传导出文件并在后台开始导入."""
    document = (await file.read()).decode("utf-8", errors="replace")

    try:
        job, candidates = await create_import(db, file.filename or "", document)
    except ImportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    background_tasks.add_task(_run_import, db, job.id, candidates)

    return {
        "job_id": job.id,
        "total": job.total_count,
        "message": f"开始导入 {job.total_count} 条书签",
    }


@router.get("/{job_id}")
async def get_import_status(
    job_id: str,
    db: Database = Depends(get_database),
) -> dict:
    """获取导入进度和失败明细."""
    job = await get_import_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="导入任务不存在")

    failures = await list_import_failures(db, job_id)
    return {
        "job_id": job.id,
        "status": job.status,
        "total": job.total_count,
        "completed": job.completed_count,
        "failed": job.failed_count,
        "started_at": job.started_at.isoformat(),
        "completed_at": job.completed_at.isoformat() if job.completed_at else None,
        "failures": [
            {
                "url": failure.url,
                "title": failure.title,
                "status": failure.status,
                "error": failure.error,
            }
            for failure in failures
        ],
    }


async def _run_import(
    db: Database, job_id: str, candidates: list[BookmarkCandidate]
) -> None:
    """后台执行导入."""
    runner = ImportRunner(db)
    try:
        await runner.run(job_id, candidates)
    except Exception:
        logger.exception(f"后台导入失败: job={job_id}")
