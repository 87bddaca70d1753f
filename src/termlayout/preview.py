"""Workspace layout preview using Rich library.

Maps the view produced by render_workspace onto a rich Layout so a workspace
can be inspected in a terminal or exported as SVG/text.
"""

import logging

from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from termlayout.core.ids import short_id
from termlayout.telemetry import setup_logging
from termlayout.workspace import (
    ContentRenderers,
    Direction,
    GroupView,
    MissingGroupView,
    SplitView,
    TabType,
    WorkspaceManager,
    render_workspace,
)
from termlayout.workspace.render import View

logger = logging.getLogger(__name__)

# rich 的 ratio 只接受整数，百分比乘以该系数后取整
RATIO_SCALE = 10


def text_renderers() -> ContentRenderers:
    """纯文本内容渲染函数（preview 没有真实 session）"""
    return ContentRenderers(
        terminal=lambda pty_id, active, tab_type: Text(
            f"{tab_type} terminal\npty {pty_id}" + ("\n(active)" if active else ""),
            style="bold" if active else "",
        ),
        sftp=lambda session_id: Text(f"sftp {session_id}", style="cyan"),
        tunnel=lambda session_id, name: Text(f"tunnels: {name}", style="magenta"),
        settings=lambda: Text("settings", style="yellow"),
        empty=lambda: Text("empty pane", style="dim"),
    )


class LayoutPreviewRenderer:
    """工作区预览渲染器，将视图结构转换为 rich Layout。"""

    def __init__(self, renderers: ContentRenderers | None = None):
        self.renderers = renderers or text_renderers()

    def build(self, manager: WorkspaceManager) -> Layout:
        """为当前工作区构建 rich Layout。"""
        view = render_workspace(
            manager.tree, manager.groups, self.renderers, manager.focused_group_id
        )
        return self._to_layout(view)

    def _to_layout(self, view: View, ratio: int = 1) -> Layout:
        if isinstance(view, SplitView):
            layout = Layout(name=view.split_id, ratio=ratio)
            children = [
                self._to_layout(item.child, max(1, round(item.size * RATIO_SCALE)))
                for item in view.children
            ]
            if view.direction == Direction.HORIZONTAL:
                layout.split_column(*children)
            else:
                layout.split_row(*children)
            return layout

        if isinstance(view, MissingGroupView):
            return Layout(Text(""), name=view.group_id, ratio=ratio)

        return Layout(self._group_panel(view), name=view.group_id, ratio=ratio)

    def _group_panel(self, view: GroupView) -> Panel:
        titles = [
            f"[{tab.title}]" if tab.id == view.active_tab_id else tab.title for tab in view.tabs
        ]
        content: RenderableType = view.content if view.content is not None else Text("")
        return Panel(
            content,
            title=Text(" ".join(titles) or short_id(view.group_id)),
            title_align="left",
            border_style="bold green" if view.focused else "grey50",
        )

    def render_text(self, manager: WorkspaceManager, width: int = 100, height: int = 30) -> str:
        """渲染为纯文本（无 ANSI 样式）。"""
        console = Console(record=True, width=width, height=height, color_system=None)
        console.print(self.build(manager), end="")
        return console.export_text()

    def render_svg(self, manager: WorkspaceManager, width: int = 100, height: int = 30) -> str:
        """渲染为 SVG。"""
        console = Console(
            record=True,
            width=width,
            height=height,
            force_terminal=True,
            color_system="truecolor",
        )
        console.print(self.build(manager), end="")
        return console.export_svg(title="termlayout")


def demo_workspace() -> WorkspaceManager:
    """构建一个示例工作区：左侧本地终端，右侧上下拆分为 ssh 与 sftp"""
    manager = WorkspaceManager()
    left = manager.focused_group_id
    manager.add_tab_to_group(left, TabType.LOCAL, "zsh", "local-1", pty_session_id="pty-1")

    right = manager.split_group(left, Direction.VERTICAL)
    assert right is not None
    manager.add_tab_to_group(right, TabType.SSH, "prod", "ssh-1", pty_session_id="pty-2")

    bottom = manager.split_group(right, Direction.HORIZONTAL)
    assert bottom is not None
    manager.add_tab_to_group(bottom, TabType.SFTP, "prod files", "sftp-1")
    return manager


def main():
    """入口函数"""
    setup_logging()
    console = Console()
    console.print(LayoutPreviewRenderer().build(demo_workspace()), height=console.height - 1)


if __name__ == "__main__":
    main()
