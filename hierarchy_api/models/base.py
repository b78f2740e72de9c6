"""
表模型公共字段

字符串 UUID 主键和 UTC 时间戳，以混入类形式提供给各表模型
"""
import uuid
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class IDMixin(SQLModel):
    id: str = Field(default_factory=new_id, primary_key=True, description="主键ID，创建后不可变")


class TimestampMixin(SQLModel):
    created_at: datetime = Field(default_factory=utc_now, nullable=False, description="创建时间")
    updated_at: datetime = Field(default_factory=utc_now, nullable=False, description="最近修改时间")

    def touch(self) -> None:
        """标记为刚刚修改"""
        self.updated_at = utc_now()
