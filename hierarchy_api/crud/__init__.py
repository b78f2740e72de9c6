"""
CRUD 操作模块
"""
from .position import position_crud

__all__ = [
    "position_crud",
]
