"""HTTP 工作区 API - 供宿主工具栏/脚本调用"""

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel

from termlayout.workspace import Direction, WorkspaceManager

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


class SplitRequest(BaseModel):
    """拆分请求体"""

    direction: Direction
    group_id: str | None = None  # 默认拆分当前聚焦的 group


class CloseRequest(BaseModel):
    """关闭 pane 请求体"""

    group_id: str


class ResizeRequest(BaseModel):
    """调整比例请求体"""

    split_id: str
    sizes: list[float]


class FocusRequest(BaseModel):
    """聚焦请求体"""

    group_id: str


class WorkspaceResponse(BaseModel):
    """工作区操作响应"""

    success: bool
    message: str
    workspace: dict


class WorkspaceApi:
    """HTTP 工作区 API

    提供 `/api/workspace` 系列端点。
    """

    def __init__(self, manager: WorkspaceManager, flush: Callable[[], Awaitable[None]]):
        self.manager = manager
        self._flush = flush

    async def _respond(self, success: bool, message: str) -> WorkspaceResponse:
        await self._flush()
        return WorkspaceResponse(success=success, message=message, workspace=self.manager.to_dict())

    def setup_routes(self, app: "FastAPI") -> None:
        """设置 API 路由"""

        @app.get("/api/workspace")
        async def get_workspace():
            """获取工作区快照"""
            return self.manager.to_dict()

        @app.post("/api/workspace/split", response_model=WorkspaceResponse)
        async def split_group(request: SplitRequest):
            group_id = request.group_id or self.manager.focused_group_id
            new_group_id = self.manager.split_group(group_id, request.direction)
            if new_group_id is None:
                return await self._respond(False, f"Unknown group: {group_id}")
            return await self._respond(True, new_group_id)

        @app.post("/api/workspace/close", response_model=WorkspaceResponse)
        async def close_group(request: CloseRequest):
            if self.manager.get_group(request.group_id) is None:
                return await self._respond(False, f"Unknown group: {request.group_id}")
            closed = self.manager.close_group(request.group_id)
            return await self._respond(True, f"Closed {len(closed)} tabs")

        @app.post("/api/workspace/resize", response_model=WorkspaceResponse)
        async def resize_split(request: ResizeRequest):
            try:
                self.manager.resize_split_node(request.split_id, request.sizes)
            except ValueError as e:
                logger.warning(f"[WorkspaceApi] Resize rejected: {e}")
                return await self._respond(False, str(e))
            return await self._respond(True, "Resized")

        @app.post("/api/workspace/focus", response_model=WorkspaceResponse)
        async def focus_group(request: FocusRequest):
            self.manager.focus_group(request.group_id)
            success = self.manager.focused_group_id == request.group_id
            return await self._respond(success, request.group_id)
