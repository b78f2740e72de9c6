"""
FastAPI 应用入口

组织岗位层级管理后端，启动方式见项目根目录 run.py
"""
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from hierarchy_api.core.config import settings
from hierarchy_api.core.database import get_db, init_db, close_db
from hierarchy_api.core.response import success_response, DictResponse
from hierarchy_api.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from hierarchy_api.api import api_router

API_VERSION = "1.0.0"


def route_name_as_operation_id(route: APIRoute) -> str:
    """OpenAPI operationId 直接使用路由函数名，前端生成的客户端方法更短"""
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "启动 {} (env={}, db={}, sqlite_foreign_keys={})",
        settings.app_name, settings.app_env, settings.database_url, settings.sqlite_foreign_keys,
    )
    await init_db()
    yield
    await close_db()
    logger.info("{} 已关闭", settings.app_name)


def create_app() -> FastAPI:
    """创建应用：异常处理器、/api/v1 路由、健康检查和 CORS"""
    app = FastAPI(
        title=settings.app_name,
        description="组织岗位层级管理 API",
        version=API_VERSION,
        docs_url="/docs" if settings.show_docs else None,
        redoc_url="/redoc" if settings.show_docs else None,
        openapi_url="/openapi.json" if settings.show_docs else None,
        lifespan=lifespan,
        generate_unique_id_function=route_name_as_operation_id,
    )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["系统"], response_model=DictResponse)
    async def health_check(db: AsyncSession = Depends(get_db)):
        """健康检查，同时确认数据库可连接"""
        await db.execute(text("SELECT 1"))
        return success_response(data={"status": "healthy", "database": "ok"})

    @app.get("/", tags=["系统"], response_model=DictResponse)
    async def root():
        return success_response(data={
            "name": settings.app_name,
            "version": API_VERSION,
            "docs": "/docs" if settings.show_docs else None,
        })

    # CORS 最后添加，最先执行
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()
