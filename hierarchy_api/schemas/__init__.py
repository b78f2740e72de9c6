"""
Pydantic Schemas 模块

定义 API 请求/响应的数据验证模型
"""
from .base import BaseSchema, TimestampSchema
from .position import (
    PositionCreate,
    PositionUpdate,
    PositionResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampSchema",
    # Position
    "PositionCreate",
    "PositionUpdate",
    "PositionResponse",
]
