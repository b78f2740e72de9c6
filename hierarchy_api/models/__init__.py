"""
SQLModel 表模型
"""
from .base import TimestampMixin, IDMixin, utc_now
from .position import Position, PositionBase, NAME_MAX_LENGTH, DESCRIPTION_MAX_LENGTH

__all__ = [
    "TimestampMixin",
    "IDMixin",
    "utc_now",
    "Position",
    "PositionBase",
    "NAME_MAX_LENGTH",
    "DESCRIPTION_MAX_LENGTH",
]
