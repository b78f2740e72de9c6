"""
岗位表模型

岗位之间通过 parent_id 自关联构成森林，表模型只保存 ID，
不声明 parent/children 导航关系，层级视图在查询时按需组装。
字段校验在 schemas.position 的请求模型中完成，这里只描述表结构
"""
from typing import Optional
from sqlalchemy import String
from sqlmodel import SQLModel, Field

from .base import TimestampMixin, IDMixin

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class PositionBase(SQLModel):
    name: str = Field(sa_type=String(NAME_MAX_LENGTH), nullable=False, description="岗位名称")
    description: str = Field(
        default="", sa_type=String(DESCRIPTION_MAX_LENGTH), nullable=False, description="岗位描述"
    )
    parent_id: Optional[str] = Field(
        default=None,
        foreign_key="positions.id",
        index=True,
        nullable=True,
        description="上级岗位ID，为空表示根岗位"
    )


class Position(PositionBase, TimestampMixin, IDMixin, table=True):
    __tablename__ = "positions"

    def __repr__(self) -> str:
        return f"<Position(id={self.id}, name={self.name}, parent_id={self.parent_id})>"
