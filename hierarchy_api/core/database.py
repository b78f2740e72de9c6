"""
数据库配置模块

使用 SQLAlchemy 2.0 异步模式，表结构由 SQLModel 元数据统一创建
"""
from pathlib import Path
from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlmodel import SQLModel

from .config import settings


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """每个新连接执行 PRAGMA foreign_keys=ON"""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# 创建异步引擎
engine = create_async_engine(
    settings.database_url,
    echo=settings.sql_echo,
    future=True,
)
if settings.is_sqlite and settings.sqlite_foreign_keys:
    enable_sqlite_foreign_keys(engine)

# 创建异步会话工厂
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    数据库会话依赖注入

    岗位修改由 HierarchyService 在锁内自行提交；这里负责在请求结束时
    提交剩余工作，并在任何异常时回滚尚未提交的写入

    使用方式:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def ensure_sqlite_dir(database_url: str) -> None:
    """SQLite 文件库需要先创建所在目录"""
    url = make_url(database_url)
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db():
    """创建所有表"""
    # 导入模型，确保表已注册到 SQLModel.metadata
    from hierarchy_api import models  # noqa: F401

    if settings.is_sqlite:
        ensure_sqlite_dir(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db():
    await engine.dispose()
