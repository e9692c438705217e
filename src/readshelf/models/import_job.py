"""ImportJob 导入任务模型."""

from datetime import datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel


class ImportJobStatus:
    """导入任务状态."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class ImportJob(SQLModel, table=True):
    """一次导入的进度账本（只有计数，不关联文章）."""

    __tablename__ = "import_jobs"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    status: str = Field(
        default=ImportJobStatus.PENDING,
        index=True,
        description="状态: pending|in_progress|completed|failed",
    )
    total_count: int = Field(default=0, ge=0)
    completed_count: int = Field(default=0, ge=0)
    failed_count: int = Field(default=0, ge=0)
    started_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    completed_at: datetime | None = Field(default=None)


class ImportFailure(SQLModel, table=True):
    """导入失败的单条书签."""

    __tablename__ = "import_failures"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    job_id: str = Field(foreign_key="import_jobs.id", index=True)
    url: str
    title: str | None = Field(default=None)
    status: str = Field(description="抓取状态: timeout|error")
    error: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
