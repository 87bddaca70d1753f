"""布局树 → 视图结构

纯结构递归，不依赖任何 UI 框架：
- Split → SplitView：flex 容器，子项按 sizes 百分比排布，相邻子项之间插入 handle
- Group → GroupView：在宿主提供的 PaneGroup 表中查找，内容交给宿主渲染函数

渲染函数按内容类型（terminal / sftp / tunnel / settings / empty）提供，
引擎本身不知道 pane 显示什么。
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar, Union

from ..config import TUNNEL_TITLE_PREFIX
from .types import Direction, GroupNode, PaneGroup, PaneGroupTab, SplitNode, TabType, WorkspaceNode

T = TypeVar("T")


def fold_tree(
    node: WorkspaceNode,
    on_group: Callable[[GroupNode], T],
    on_split: Callable[[SplitNode, list[T]], T],
) -> T:
    """后序遍历：先处理子节点，再把结果交给 on_split"""
    if isinstance(node, GroupNode):
        return on_group(node)
    return on_split(node, [fold_tree(child, on_group, on_split) for child in node.children])


class ContentKind(Enum):
    """Pane 内容类型"""
    TERMINAL = "terminal"
    SFTP = "sftp"
    TUNNEL = "tunnel"
    SETTINGS = "settings"
    EMPTY = "empty"


def content_kind_for(tab: PaneGroupTab | None) -> ContentKind:
    if tab is None:
        return ContentKind.EMPTY
    if tab.type == TabType.SETTINGS:
        return ContentKind.SETTINGS
    if tab.type == TabType.SFTP:
        return ContentKind.SFTP
    if tab.type == TabType.TUNNEL:
        return ContentKind.TUNNEL
    return ContentKind.TERMINAL


@dataclass
class ContentRenderers:
    """宿主提供的内容渲染函数

    Attributes:
        terminal: (pty_session_id, is_active, tab_type) -> 内容
        sftp: (session_id) -> 内容
        tunnel: (session_id, session_name) -> 内容
        settings: () -> 内容
        empty: () -> 内容
    """
    terminal: Callable[[str, bool, str], Any]
    sftp: Callable[[str], Any]
    tunnel: Callable[[str, str], Any]
    settings: Callable[[], Any]
    empty: Callable[[], Any]

    def render(self, tab: PaneGroupTab | None, is_focused: bool) -> Any:
        """按 tab 类型分派；终端 tab 尚无 pty session 时不渲染内容"""
        kind = content_kind_for(tab)
        if kind == ContentKind.EMPTY:
            return self.empty()
        assert tab is not None
        if kind == ContentKind.SETTINGS:
            return self.settings()
        if kind == ContentKind.SFTP:
            return self.sftp(tab.session_id)
        if kind == ContentKind.TUNNEL:
            return self.tunnel(tab.session_id, tab.title.replace(TUNNEL_TITLE_PREFIX, ""))
        if tab.pty_session_id:
            return self.terminal(tab.pty_session_id, is_focused, tab.type.value)
        return None


@dataclass
class HandleView:
    """相邻子项之间的拖拽 handle"""
    split_id: str
    index: int
    direction: Direction


@dataclass
class GroupView:
    """Group 叶子视图"""
    group_id: str
    focused: bool
    tabs: tuple[PaneGroupTab, ...]
    active_tab_id: str | None
    kind: ContentKind
    content: Any = None


@dataclass
class MissingGroupView:
    """PaneGroup 不在表中（已被宿主移除），渲染为空白区域"""
    group_id: str


@dataclass
class SplitItemView:
    """Split 中的一个子项

    Attributes:
        node_id: 子节点 ID
        size: 占比（百分比）
        dimension: 占比作用的样式维度（height / width）
        child: 子视图
    """
    node_id: str
    size: float
    dimension: str
    child: "View"


@dataclass
class SplitView:
    """Split 视图：items 为子项与 handle 交替排列"""
    split_id: str
    direction: Direction
    flex_direction: str
    items: list[Union[SplitItemView, HandleView]] = field(default_factory=list)

    @property
    def children(self) -> list[SplitItemView]:
        return [item for item in self.items if isinstance(item, SplitItemView)]

    @property
    def handles(self) -> list[HandleView]:
        return [item for item in self.items if isinstance(item, HandleView)]


View = Union[SplitView, GroupView, MissingGroupView]


def render_workspace(
    node: WorkspaceNode,
    groups: dict[str, PaneGroup],
    renderers: ContentRenderers,
    focused_group_id: str | None = None,
) -> View:
    """把布局树映射为视图结构

    Args:
        node: 树根
        groups: 宿主持有的 PaneGroup 表
        renderers: 内容渲染函数
        focused_group_id: 当前聚焦的 group

    Returns:
        嵌套视图
    """

    def on_group(leaf: GroupNode) -> View:
        group = groups.get(leaf.pane_group_id)
        if group is None:
            return MissingGroupView(group_id=leaf.pane_group_id)
        focused = leaf.pane_group_id == focused_group_id
        active_tab = group.active_tab
        return GroupView(
            group_id=group.id,
            focused=focused,
            tabs=group.tabs,
            active_tab_id=group.active_tab_id,
            kind=content_kind_for(active_tab),
            content=renderers.render(active_tab, focused),
        )

    def on_split(split_node: SplitNode, children: list[View]) -> View:
        dimension = split_node.direction.cross_axis.value
        items: list[Union[SplitItemView, HandleView]] = []
        last = len(children) - 1
        for index, (child_node, size, child_view) in enumerate(
            zip(split_node.children, split_node.sizes, children)
        ):
            items.append(SplitItemView(child_node.id, size, dimension, child_view))
            if index < last:
                items.append(HandleView(split_node.id, index, split_node.direction))
        return SplitView(
            split_id=split_node.id,
            direction=split_node.direction,
            flex_direction=split_node.direction.flex_direction,
            items=items,
        )

    return fold_tree(node, on_group, on_split)
