"""WebSocket 消息处理器"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import WebSocket

from termlayout.telemetry import get_logger, metrics
from termlayout.workspace import Direction, DragController, Dragging, WorkspaceManager

logger = get_logger(__name__)


@dataclass
class MessageHandler:
    """WebSocket 消息处理器

    消息均为 JSON：{"action": "...", ...}
    """

    manager: WorkspaceManager
    drag: DragController
    set_viewport: Callable[[float, float], None]
    flush: Callable[[], Awaitable[None]]

    async def handle(self, websocket: WebSocket, data: str):
        """处理 WebSocket 消息"""
        try:
            msg = json.loads(data)
            if not isinstance(msg, dict):
                raise ValueError("Message must be a JSON object")
            action = msg.get("action", "")
            handler = getattr(self, f"_handle_{action}", None)
            if handler is None:
                raise ValueError(f"Unknown action: {action}")
            reply = handler(msg)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"[Web] Bad message: {e}")
            metrics.inc("web.bad_message")
            await websocket.send_json({"type": "error", "message": str(e)})
            return

        if reply is not None:
            await websocket.send_json(reply)
        await self.flush()

    def _handle_viewport(self, msg: dict) -> None:
        self.set_viewport(float(msg["width"]), float(msg["height"]))

    def _handle_split(self, msg: dict) -> dict:
        direction = Direction(msg["direction"])
        group_id = msg.get("group_id") or self.manager.focused_group_id
        new_group_id = self.manager.split_group(group_id, direction)
        return {"type": "split_result", "group_id": new_group_id, "success": new_group_id is not None}

    def _handle_close(self, msg: dict) -> dict:
        closed = self.manager.close_group(msg["group_id"])
        return {"type": "close_result", "closed_tabs": [tab.id for tab in closed]}

    def _handle_resize(self, msg: dict) -> None:
        self.manager.resize_split_node(msg["split_id"], [float(s) for s in msg["sizes"]])

    def _handle_focus(self, msg: dict) -> None:
        self.manager.focus_group(msg["group_id"])

    def _handle_select_tab(self, msg: dict) -> None:
        self.manager.select_tab(msg["group_id"], msg["tab_id"])

    def _handle_close_tab(self, msg: dict) -> None:
        self.manager.close_tab(msg["tab_id"])

    def _handle_drag_start(self, msg: dict) -> dict:
        session = self.drag.start(msg["split_id"], int(msg["index"]))
        return {
            "type": "drag_state",
            "dragging": isinstance(session, Dragging),
            "container_size": session.container_size if isinstance(session, Dragging) else 0,
        }

    def _handle_drag_move(self, msg: dict) -> None:
        self.drag.move(float(msg["delta"]))

    def _handle_drag_end(self, msg: dict) -> dict:
        self.drag.end()
        return {"type": "drag_state", "dragging": False, "container_size": 0}
