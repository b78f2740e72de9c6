"""
岗位相关 Schema
"""
from typing import List, Optional
from pydantic import Field

from hierarchy_api.models.position import NAME_MAX_LENGTH, DESCRIPTION_MAX_LENGTH
from .base import BaseSchema, TimestampSchema


class PositionCreate(BaseSchema):
    """创建/更新岗位请求（PUT 为整体替换，字段与创建一致）"""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="岗位名称")
    description: str = Field("", max_length=DESCRIPTION_MAX_LENGTH, description="岗位描述")
    parent_id: Optional[str] = Field(None, description="上级岗位ID，为空表示根岗位")


PositionUpdate = PositionCreate


class PositionResponse(TimestampSchema):
    """
    岗位响应

    parent_name 只在单条/列表查询中解析；child_count 只在列表查询中统计；
    children 只在层级查询中组装
    """

    name: str
    description: str
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None
    child_count: Optional[int] = Field(None, description="直接下级数量")
    children: List["PositionResponse"] = Field(default_factory=list, description="下级岗位")
