"""
API 路由模块
"""
from fastapi import APIRouter

from .v1 import positions

# 创建主路由
api_router = APIRouter()

# 注册各模块路由
api_router.include_router(
    positions.router,
    prefix="/positions",
    tags=["岗位层级"]
)
