#!/usr/bin/env python
"""
岗位层级 API 启动脚本

用法:
    python run.py                    # 使用配置中的 host/port（默认 127.0.0.1:8000）
    python run.py -p 8080            # 指定端口
    python run.py --host 0.0.0.0     # 允许外网访问
    python run.py --reload           # 开发模式热重载

岗位修改锁只在单个进程内生效，因此这里固定单 worker 运行
"""
import argparse
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).parent
sys.path.insert(0, str(ROOT_DIR))

from hierarchy_api.core.config import settings  # noqa: E402


def parse_args():
    parser = argparse.ArgumentParser(description=f"{settings.app_name} 启动脚本")
    parser.add_argument("-p", "--port", type=int, default=settings.port, help=f"服务端口 (默认: {settings.port})")
    parser.add_argument("--host", default=settings.host, help=f"服务地址 (默认: {settings.host})")
    parser.add_argument("--reload", action="store_true", help="开启热重载")
    return parser.parse_args()


def main():
    args = parse_args()

    print(f"🚀 {settings.app_name} [{settings.app_env}] -> http://{args.host}:{args.port}")
    print(f"   数据库: {settings.database_url}")
    if settings.show_docs:
        print(f"   文档: http://{args.host}:{args.port}/docs")

    import uvicorn
    uvicorn.run(
        "hierarchy_api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
