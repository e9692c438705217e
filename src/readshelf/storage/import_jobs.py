"""导入任务账本.

状态机: pending -> in_progress -> completed | failed。
计数器只增不减，自增由单条 UPDATE 在串行写事务中完成。
"""

import logging
from datetime import datetime
from typing import Literal

from sqlalchemy import update
from sqlmodel import select

from readshelf.errors import ImportJobStateError, NotFoundError
from readshelf.models.database import Database
from readshelf.models.import_job import ImportFailure, ImportJob, ImportJobStatus

logger = logging.getLogger(__name__)

# 合法的状态迁移
_TRANSITIONS: dict[str, set[str]] = {
    ImportJobStatus.PENDING: {ImportJobStatus.IN_PROGRESS, ImportJobStatus.FAILED},
    ImportJobStatus.IN_PROGRESS: {ImportJobStatus.COMPLETED, ImportJobStatus.FAILED},
    ImportJobStatus.COMPLETED: set(),
    ImportJobStatus.FAILED: set(),
}

_TERMINAL = {ImportJobStatus.COMPLETED, ImportJobStatus.FAILED}


async def create_import_job(db: Database, total_count: int) -> ImportJob:
    """创建导入任务（在抓取开始前）."""
    job = ImportJob(total_count=total_count)
    async with db.transaction() as session:
        session.add(job)
    logger.info(f"创建导入任务: job={job.id}, total={total_count}")
    return job


async def get_import_job(db: Database, job_id: str) -> ImportJob | None:
    """按 ID 获取导入任务."""
    async with db.session() as session:
        return await session.get(ImportJob, job_id)


async def update_import_job(db: Database, job_id: str, status: str) -> ImportJob:
    """
    迁移导入任务状态.

    进入终态时写入 completed_at。

    Raises:
        NotFoundError: 任务不存在
        ImportJobStateError: 迁移不合法（例如重复开始或重复结束）
    """
    async with db.transaction() as session:
        job = await session.get(ImportJob, job_id)
        if job is None:
            msg = f"导入任务不存在: {job_id}"
            raise NotFoundError(msg)

        if status not in _TRANSITIONS.get(job.status, set()):
            msg = f"导入任务 {job_id} 不能从 {job.status} 迁移到 {status}"
            raise ImportJobStateError(msg)

        job.status = status
        if status in _TERMINAL:
            job.completed_at = datetime.utcnow()

    logger.info(f"导入任务状态: job={job_id}, status={status}")
    return job


async def start_import_job(db: Database, job_id: str) -> ImportJob:
    """标记任务开始抓取."""
    return await update_import_job(db, job_id, ImportJobStatus.IN_PROGRESS)


async def complete_import_job(
    db: Database, job_id: str, status: str = ImportJobStatus.COMPLETED
) -> ImportJob:
    """结束导入任务."""
    if status not in _TERMINAL:
        msg = f"不是终态: {status}"
        raise ImportJobStateError(msg)
    return await update_import_job(db, job_id, status)


async def record_import_job_result(
    db: Database,
    job_id: str,
    outcome: Literal["success", "failed"],
    *,
    url: str | None = None,
    title: str | None = None,
    status: str | None = None,
    error: str | None = None,
) -> None:
    """
    记录单条书签的结果.

    failed 且给出 url 时，同一事务内写入失败明细。
    """
    counter = (
        ImportJob.completed_count if outcome == "success" else ImportJob.failed_count
    )
    stmt = (
        update(ImportJob)
        .where(ImportJob.id == job_id)
        .values({counter: counter + 1})
    )

    async with db.transaction() as session:
        result = await session.execute(stmt)
        if result.rowcount == 0:
            msg = f"导入任务不存在: {job_id}"
            raise NotFoundError(msg)

        if outcome == "failed" and url is not None:
            session.add(
                ImportFailure(
                    job_id=job_id,
                    url=url,
                    title=title,
                    status=status or "error",
                    error=error,
                )
            )


async def list_import_failures(db: Database, job_id: str) -> list[ImportFailure]:
    """获取任务的失败明细."""
    stmt = (
        select(ImportFailure)
        .where(ImportFailure.job_id == job_id)
        .order_by(ImportFailure.id)  # type: ignore[arg-type]
    )
    async with db.session() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())
