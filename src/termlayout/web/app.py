"""FastAPI 应用初始化"""

import asyncio
import logging
from pathlib import Path

import uvicorn

from termlayout import config
from termlayout.telemetry import setup_logging
from termlayout.web.server import WebServer
from termlayout.workspace import WorkspaceManager, persistence

logger = logging.getLogger(__name__)


def create_app(manager: WorkspaceManager | None = None, persist_path: Path | None = None) -> WebServer:
    """创建 Web 应用"""
    return WebServer(manager or WorkspaceManager(), persist_path=persist_path)


def load_workspace(path: Path | None = None) -> WorkspaceManager:
    """加载持久化的工作区，失败时新建"""
    if not config.PERSIST_ENABLED:
        return WorkspaceManager()

    snapshot = persistence.load(path)
    if snapshot is None:
        return WorkspaceManager()
    try:
        return WorkspaceManager.from_dict(snapshot)
    except (KeyError, ValueError) as e:
        logger.warning(f"[Web] Ignoring stored workspace: {e}")
        return WorkspaceManager()


async def start_server(manager: WorkspaceManager):
    """启动服务器"""
    server = create_app(manager)

    uvicorn_config = uvicorn.Config(
        server.app, host=config.WEB_HOST, port=config.WEB_PORT, log_level="info"
    )
    uvicorn_server = uvicorn.Server(uvicorn_config)

    print(f"termlayout Web Server starting at http://{config.WEB_HOST}:{config.WEB_PORT}")
    await uvicorn_server.serve()


def main():
    """入口函数"""
    setup_logging()
    try:
        asyncio.run(start_server(load_workspace()))
    except KeyboardInterrupt:
        print("\nServer stopped")
