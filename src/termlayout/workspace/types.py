"""Workspace 数据类型定义

包含：
- Direction / Axis: split 方向与测量轴
- GroupNode / SplitNode: 布局树节点（WorkspaceNode 联合类型）
- TabType / PaneGroupTab / PaneGroup: 宿主侧 pane group 数据
- WorkspaceCallbacks: 引擎向宿主暴露的回调集合

节点均为 frozen dataclass，树的每次变更都生成新值。
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Axis(Enum):
    """测量轴"""
    WIDTH = "width"
    HEIGHT = "height"


class Direction(Enum):
    """Split 方向

    - HORIZONTAL: 子节点上下堆叠，各自占满宽度（交叉轴为高度）
    - VERTICAL: 子节点左右排列，各自占满高度（交叉轴为宽度）
    """
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def cross_axis(self) -> Axis:
        """拖拽时测量的轴"""
        return Axis.HEIGHT if self == Direction.HORIZONTAL else Axis.WIDTH

    @property
    def flex_direction(self) -> str:
        """flex 容器方向"""
        return "column" if self == Direction.HORIZONTAL else "row"


@dataclass(frozen=True)
class GroupNode:
    """叶子节点，指向一个外部持有的 PaneGroup"""
    id: str
    pane_group_id: str

    def to_dict(self) -> dict:
        return {"type": "group", "id": self.id, "pane_group_id": self.pane_group_id}


@dataclass(frozen=True)
class SplitNode:
    """内部节点，沿一个轴按 sizes（百分比）划分空间

    Attributes:
        id: 节点 ID
        direction: 方向
        children: 子节点（>= 2 个）
        sizes: 与 children 一一对应的百分比，总和 100
    """
    id: str
    direction: Direction
    children: tuple["WorkspaceNode", ...]
    sizes: tuple[float, ...]

    def to_dict(self) -> dict:
        return {
            "type": "split",
            "id": self.id,
            "direction": self.direction.value,
            "children": [child.to_dict() for child in self.children],
            "sizes": list(self.sizes),
        }


WorkspaceNode = Union[GroupNode, SplitNode]


def group_node(pane_group_id: str) -> GroupNode:
    """创建指向 pane group 的叶子节点（节点 ID 与 group ID 相同）"""
    return GroupNode(id=pane_group_id, pane_group_id=pane_group_id)


def node_from_dict(data: dict) -> WorkspaceNode:
    """从字典还原节点（to_dict 的逆操作）

    Raises:
        ValueError: 未知节点类型或方向
        KeyError: 缺少必需字段
    """
    node_type = data["type"]
    if node_type == "group":
        return GroupNode(id=data["id"], pane_group_id=data.get("pane_group_id", data["id"]))
    if node_type == "split":
        return SplitNode(
            id=data["id"],
            direction=Direction(data["direction"]),
            children=tuple(node_from_dict(child) for child in data["children"]),
            sizes=tuple(float(size) for size in data["sizes"]),
        )
    raise ValueError(f"Unknown node type: {node_type}")


class TabType(Enum):
    """Tab 内容类型"""
    LOCAL = "local"
    SSH = "ssh"
    SFTP = "sftp"
    TUNNEL = "tunnel"
    TELNET = "telnet"
    SERIAL = "serial"
    SETTINGS = "settings"

    @property
    def is_terminal(self) -> bool:
        """是否为终端类 tab（需要 pty session）"""
        return self in {
            TabType.LOCAL,
            TabType.SSH,
            TabType.TELNET,
            TabType.SERIAL,
        }


@dataclass(frozen=True)
class PaneGroupTab:
    """PaneGroup 中的单个 tab

    Attributes:
        id: tab ID
        type: 内容类型
        title: 显示标题
        session_id: 后端 session 标识
        pty_session_id: 终端类 tab 的 pty session
        config: 连接配置（由宿主解释）
    """
    id: str
    type: TabType
    title: str
    session_id: str
    pty_session_id: str | None = None
    config: dict = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "session_id": self.session_id,
            "pty_session_id": self.pty_session_id,
            "config": dict(self.config),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaneGroupTab":
        return cls(
            id=data["id"],
            type=TabType(data["type"]),
            title=data.get("title", ""),
            session_id=data.get("session_id", ""),
            pty_session_id=data.get("pty_session_id"),
            config=dict(data.get("config") or {}),
        )


@dataclass(frozen=True)
class PaneGroup:
    """带独立 tab 栏的一组 tab"""
    id: str
    tabs: tuple[PaneGroupTab, ...] = ()
    active_tab_id: str | None = None

    @property
    def active_tab(self) -> PaneGroupTab | None:
        for tab in self.tabs:
            if tab.id == self.active_tab_id:
                return tab
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tabs": [tab.to_dict() for tab in self.tabs],
            "active_tab_id": self.active_tab_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaneGroup":
        return cls(
            id=data["id"],
            tabs=tuple(PaneGroupTab.from_dict(tab) for tab in data.get("tabs", [])),
            active_tab_id=data.get("active_tab_id"),
        )


# 回调类型
OnResizeSplit = Callable[[str, list[float]], Any]
OnTabSelect = Callable[[str, str], Any]
OnTabClose = Callable[[str], Any]
OnFocusGroup = Callable[[str], Any]
OnClosePane = Callable[[str], Any]


@dataclass
class WorkspaceCallbacks:
    """引擎暴露给宿主的回调

    Attributes:
        on_resize_split: (split_id, normalized_sizes) 拖拽提交新比例
        on_tab_select: (group_id, tab_id) 选中 tab
        on_tab_close: (tab_id) 关闭 tab
        on_focus_group: (group_id) 聚焦 group
        on_close_pane: (group_id) 请求关闭整个 pane
    """
    on_resize_split: OnResizeSplit
    on_tab_select: OnTabSelect | None = None
    on_tab_close: OnTabClose | None = None
    on_focus_group: OnFocusGroup | None = None
    on_close_pane: OnClosePane | None = None
