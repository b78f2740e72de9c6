"""
测试配置文件

提供测试用的 fixtures：内存数据库、测试客户端、测试数据工厂等
"""
from typing import AsyncGenerator, Optional
from dataclasses import dataclass, field

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlmodel import SQLModel

from hierarchy_api import models  # noqa: F401  注册表模型
from hierarchy_api.core.database import get_db, enable_sqlite_foreign_keys
from hierarchy_api.main import create_app


# 使用内存 SQLite 作为测试数据库
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ========== 测试数据工厂 ==========

@dataclass
class DataFactory:
    """
    测试数据工厂类

    集中管理测试数据创建，避免各测试文件重复代码
    """
    client: AsyncClient
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        """生成唯一后缀，避免数据冲突"""
        self._counter += 1
        return str(self._counter)

    async def create_position(self, parent_id: Optional[str] = None, **overrides) -> dict:
        """创建岗位，返回完整响应数据"""
        suffix = self._next_id()
        data = {
            "name": f"测试岗位{suffix}",
            "description": "测试用岗位描述",
            "parentId": parent_id,
            **overrides
        }
        resp = await self.client.post("/api/v1/positions", json=data)
        assert resp.status_code == 201, f"创建岗位失败: {resp.text}"
        return resp.json()["data"]

    async def create_chain(self, *names: str) -> list:
        """按顺序创建一条上下级链路，第一个为根岗位"""
        chain = []
        parent_id = None
        for name in names:
            position = await self.create_position(parent_id=parent_id, name=name)
            chain.append(position)
            parent_id = position["id"]
        return chain


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    为每个测试函数提供独立的数据库会话

    每个测试使用新的内存数据库，确保测试隔离
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, future=True)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    提供测试用的 HTTP 客户端

    覆盖 get_db 依赖，使用测试数据库
    """
    app = create_app()

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def factory(client: AsyncClient) -> DataFactory:
    """提供测试数据工厂实例"""
    return DataFactory(client=client)
