"""键值设置表.

目前保存两类值：阅读偏好（JSON）和存储持久化状态。
"""

from datetime import datetime

from sqlmodel import Field, SQLModel


class SettingItem(SQLModel, table=True):
    """一条设置，值一律按字符串保存."""

    __tablename__ = "settings"  # type: ignore[assignment]

    key: str = Field(primary_key=True, description="设置键，如 reader_preferences")
    value: str = Field(description="序列化后的设置值")
    updated_at: datetime = Field(
        default_factory=datetime.utcnow, description="最后写入时间"
    )
