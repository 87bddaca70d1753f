"""Web 服务器"""

from pathlib import Path

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from markupsafe import Markup, escape

from termlayout import config
from termlayout.preview import LayoutPreviewRenderer
from termlayout.telemetry import get_logger, metrics
from termlayout.web.api import WorkspaceApi
from termlayout.web.handlers import MessageHandler
from termlayout.workspace import (
    Axis,
    ContentRenderers,
    DragController,
    Rect,
    WorkspaceManager,
    compute_rects,
    layout_measurement,
    persistence,
    render_workspace,
)

logger = get_logger(__name__)


def html_renderers() -> ContentRenderers:
    """页面占位内容：真实内容由前端按 data 属性挂载"""

    def placeholder(kind: str, label: str) -> Markup:
        return Markup('<div class="content" data-kind="{}">{}</div>').format(kind, escape(label))

    return ContentRenderers(
        terminal=lambda pty_id, active, tab_type: placeholder("terminal", f"{tab_type}: {pty_id}"),
        sftp=lambda session_id: placeholder("sftp", session_id),
        tunnel=lambda session_id, name: placeholder("tunnel", name),
        settings=lambda: placeholder("settings", "Settings"),
        empty=lambda: placeholder("empty", "Empty pane"),
    )


class WebServer:
    """WebSocket 服务器

    同一时刻只有一个 DragController 会话；测量基于客户端上报的视口。
    """

    def __init__(
        self,
        manager: WorkspaceManager,
        persist_path: Path | None = None,
        autosave: bool = config.PERSIST_ENABLED,
    ):
        self.app = FastAPI(title="termlayout")
        self.manager = manager
        self.clients: list[WebSocket] = []
        self.viewport = Rect(0.0, 0.0, config.DEFAULT_VIEWPORT_WIDTH, config.DEFAULT_VIEWPORT_HEIGHT)
        self._persist_path = persist_path
        self._autosave = autosave
        self._dirty = False
        self._preview = LayoutPreviewRenderer()

        templates_dir = Path(__file__).parent.parent / "templates"
        self.templates = Jinja2Templates(directory=str(templates_dir))

        self.drag = DragController(
            measure=self._measure,
            get_tree=lambda: self.manager.tree,
            on_resize_split=self.manager.resize_split_node,
        )
        self._handler = MessageHandler(
            manager=manager,
            drag=self.drag,
            set_viewport=self.set_viewport,
            flush=self.flush,
        )
        self._api = WorkspaceApi(manager, flush=self.flush)
        self._api.setup_routes(self.app)

        self._setup_routes()
        manager.add_listener(self._on_workspace_change)

    def _measure(self, container_id: str, axis: Axis) -> float:
        return layout_measurement(compute_rects(self.manager.tree, self.viewport))(container_id, axis)

    def set_viewport(self, width: float, height: float) -> None:
        """客户端上报工作区容器尺寸"""
        self.viewport = Rect(0.0, 0.0, width, height)
        logger.debug(f"[Web] Viewport {width}x{height}")

    def _on_workspace_change(self, manager: WorkspaceManager) -> None:
        """工作区变化回调：标记待广播并自动保存"""
        self._dirty = True
        if self._autosave:
            persistence.save(manager.to_dict(), self._persist_path)

    def snapshot(self) -> dict:
        """广播给前端的工作区消息"""
        rects = compute_rects(self.manager.tree, self.viewport)
        return {
            "type": "workspace",
            **self.manager.to_dict(),
            "rects": {node_id: rect.to_dict() for node_id, rect in rects.items()},
        }

    async def flush(self) -> None:
        """有变化时广播最新工作区"""
        if not self._dirty:
            return
        self._dirty = False
        await self.broadcast(self.snapshot())

    def _setup_routes(self):
        @self.app.get("/", response_class=HTMLResponse)
        async def index(request: Request):
            view = render_workspace(
                self.manager.tree,
                self.manager.groups,
                html_renderers(),
                self.manager.focused_group_id,
            )
            return self.templates.TemplateResponse(request, "index.html", {"view": view})

        @self.app.get("/api/workspace/svg")
        async def get_workspace_svg():
            """获取工作区布局的 SVG 预览。"""
            svg = self._preview.render_svg(self.manager)
            return Response(content=svg, media_type="image/svg+xml", headers={"Cache-Control": "no-cache"})

        @self.app.websocket("/ws")
        async def websocket_endpoint(websocket: WebSocket):
            await websocket.accept()
            self.clients.append(websocket)
            try:
                await websocket.send_json(self.snapshot())
                while True:
                    data = await websocket.receive_text()
                    await self._handler.handle(websocket, data)
            except WebSocketDisconnect:
                if websocket in self.clients:
                    self.clients.remove(websocket)
                if not self.clients:
                    # 持有 pointer 的客户端断开，会话随之结束
                    self.drag.end()

    async def broadcast(self, data: dict):
        """广播消息给所有客户端，发送失败的客户端被移除"""
        for client in list(self.clients):
            try:
                await client.send_json(data)
            except (RuntimeError, WebSocketDisconnect) as e:
                logger.debug(f"[Web] Dropping client: {e}")
                metrics.inc("web.client_dropped")
                self.clients.remove(client)
