"""
应用配置模块

通过 pydantic-settings 从环境变量和项目根目录的 .env 读取配置
"""
from functools import lru_cache
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import json

# 项目根目录（hierarchy_api 的上一级）
BASE_DIR = Path(__file__).resolve().parent.parent.parent
DATA_DIR = BASE_DIR / "data"


class Settings(BaseSettings):
    """岗位层级服务配置"""

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "Org-Hierarchy-API"
    app_env: str = "development"
    debug: bool = True

    # 服务监听地址，run.py 的命令行参数可覆盖
    host: str = "127.0.0.1"
    port: int = 8000

    # 存储
    database_url: str = f"sqlite+aiosqlite:///{DATA_DIR / 'hierarchy.db'}"
    sql_echo: bool = False
    # SQLite 默认不检查外键，开启后 parent_id 悬空引用由数据库兜底拒绝
    sqlite_foreign_keys: bool = True

    # 前端来源，支持 JSON 数组或逗号分隔
    cors_origins: List[str] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        if not isinstance(v, str):
            return v
        try:
            return json.loads(v)
        except json.JSONDecodeError:
            return [origin.strip() for origin in v.split(",") if origin.strip()]

    @field_validator("database_url", mode="before")
    @classmethod
    def resolve_relative_data_dir(cls, v):
        # .env 里的 ./data/ 相对路径统一解析到项目根目录
        if isinstance(v, str) and "./data/" in v:
            return v.replace("./data/", f"{DATA_DIR}/")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def show_docs(self) -> bool:
        """生产环境不暴露 OpenAPI 文档"""
        return self.debug and self.app_env != "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
