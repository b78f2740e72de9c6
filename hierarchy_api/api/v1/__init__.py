"""
API v1 路由模块
"""
from . import positions

__all__ = [
    "positions",
]
