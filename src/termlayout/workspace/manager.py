"""WorkspaceManager - 宿主侧工作区状态

持有：
- tree: 布局树
- groups: PaneGroup 表 {group_id: PaneGroup}
- focused_group_id: 当前聚焦的 group（不属于树）

职责：
- tab 增删改选、group 拆分/关闭/聚焦
- 通过 mutations 修改树，整体替换状态（不原地修改）
- 状态变化后通知监听者
- 快照序列化（to_dict / from_dict）
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..config import SETTINGS_SESSION_ID, SETTINGS_TAB_TITLE
from ..core.ids import make_group_id, make_tab_id, short_id
from ..telemetry import get_logger, metrics
from . import mutations
from .tree import get_all_group_ids, validate_tree
from .types import (
    Direction,
    PaneGroup,
    PaneGroupTab,
    TabType,
    WorkspaceCallbacks,
    WorkspaceNode,
    group_node,
    node_from_dict,
)

logger = get_logger(__name__)

# 回调类型
OnWorkspaceChange = Callable[["WorkspaceManager"], Any]


class WorkspaceManager:
    """工作区状态管理器

    Attributes:
        tree: 布局树
        groups: PaneGroup 表
        focused_group_id: 当前聚焦的 group
    """

    def __init__(
        self,
        tree: WorkspaceNode | None = None,
        groups: dict[str, PaneGroup] | None = None,
        focused_group_id: str | None = None,
    ):
        if tree is None:
            initial = PaneGroup(id=make_group_id())
            tree = group_node(initial.id)
            groups = {initial.id: initial}

        self._tree = tree
        self._groups: dict[str, PaneGroup] = dict(groups or {})
        group_ids = get_all_group_ids(tree)
        self._focused_group_id = (
            focused_group_id if focused_group_id in group_ids else group_ids[0]
        )
        self._listeners: list[OnWorkspaceChange] = []

    # === 属性 ===

    @property
    def tree(self) -> WorkspaceNode:
        return self._tree

    @property
    def groups(self) -> dict[str, PaneGroup]:
        return dict(self._groups)

    @property
    def focused_group_id(self) -> str:
        return self._focused_group_id

    @property
    def focused_group(self) -> PaneGroup | None:
        return self._groups.get(self._focused_group_id)

    def get_group(self, group_id: str) -> PaneGroup | None:
        return self._groups.get(group_id)

    # === 监听 ===

    def add_listener(self, callback: OnWorkspaceChange) -> None:
        """注册状态变化回调"""
        self._listeners.append(callback)

    def _commit(
        self,
        tree: WorkspaceNode | None = None,
        groups: dict[str, PaneGroup] | None = None,
        focused_group_id: str | None = None,
    ) -> None:
        """整体替换状态并通知监听者"""
        if tree is not None:
            self._tree = tree
        if groups is not None:
            self._groups = groups
        if focused_group_id is not None:
            self._focused_group_id = focused_group_id
        metrics.gauge("workspace.groups", len(self._groups))
        for callback in self._listeners:
            callback(self)

    def callbacks(self) -> WorkspaceCallbacks:
        """绑定到本管理器的引擎回调"""
        return WorkspaceCallbacks(
            on_resize_split=self.resize_split_node,
            on_tab_select=self.select_tab,
            on_tab_close=self.close_tab,
            on_focus_group=self.focus_group,
            on_close_pane=self.close_group,
        )

    # === Tab 操作 ===

    def add_tab_to_group(
        self,
        group_id: str,
        tab_type: TabType,
        title: str,
        session_id: str,
        pty_session_id: str | None = None,
        config: dict | None = None,
    ) -> PaneGroupTab | None:
        """向指定 group 添加 tab 并激活、聚焦该 group

        Returns:
            新 tab；group 不存在时返回 None
        """
        group = self._groups.get(group_id)
        if group is None:
            logger.debug(f"[Workspace] add_tab: unknown group {short_id(group_id)}")
            return None

        tab = PaneGroupTab(
            id=make_tab_id(),
            type=tab_type,
            title=title,
            session_id=session_id,
            pty_session_id=pty_session_id,
            config=dict(config or {}),
        )
        groups = dict(self._groups)
        groups[group_id] = replace(group, tabs=group.tabs + (tab,), active_tab_id=tab.id)
        logger.debug(f"[Workspace] add tab {short_id(tab.id)} ({tab_type.value}) -> {short_id(group_id)}")
        self._commit(groups=groups, focused_group_id=group_id)
        return tab

    def add_tab_to_focused_group(
        self,
        tab_type: TabType,
        title: str,
        session_id: str,
        pty_session_id: str | None = None,
        config: dict | None = None,
    ) -> PaneGroupTab | None:
        return self.add_tab_to_group(
            self._focused_group_id, tab_type, title, session_id, pty_session_id, config
        )

    def close_tab(self, tab_id: str) -> PaneGroupTab | None:
        """关闭 tab

        group 因此变空时从树中移除；若是最后一个 group 则保留为空 group。
        被关闭的是激活 tab 时，激活同位置（或最后一个）tab。

        Returns:
            被关闭的 tab；未找到返回 None
        """
        group_id = self.find_group_for_tab(tab_id)
        if group_id is None:
            return None

        group = self._groups[group_id]
        index = next(i for i, tab in enumerate(group.tabs) if tab.id == tab_id)
        closed = group.tabs[index]
        remaining = group.tabs[:index] + group.tabs[index + 1:]

        if not remaining:
            self._remove_group(group_id)
            return closed

        active_tab_id = group.active_tab_id
        if active_tab_id == tab_id:
            active_tab_id = remaining[min(len(remaining) - 1, index)].id

        groups = dict(self._groups)
        groups[group_id] = replace(group, tabs=remaining, active_tab_id=active_tab_id)
        self._commit(groups=groups)
        return closed

    def select_tab(self, group_id: str, tab_id: str) -> None:
        """激活 tab 并聚焦其 group"""
        group = self._groups.get(group_id)
        if group is None:
            return
        groups = dict(self._groups)
        groups[group_id] = replace(group, active_tab_id=tab_id)
        self._commit(groups=groups, focused_group_id=group_id)

    def rename_tab(self, tab_id: str, new_title: str) -> None:
        group_id = self.find_group_for_tab(tab_id)
        if group_id is None:
            return
        group = self._groups[group_id]
        tabs = tuple(
            replace(tab, title=new_title) if tab.id == tab_id else tab for tab in group.tabs
        )
        groups = dict(self._groups)
        groups[group_id] = replace(group, tabs=tabs)
        self._commit(groups=groups)

    def open_settings(self) -> None:
        """打开 settings tab：已存在则聚焦，否则在聚焦的 group 中新建"""
        for group_id, group in self._groups.items():
            for tab in group.tabs:
                if tab.type == TabType.SETTINGS:
                    self.select_tab(group_id, tab.id)
                    return

        self.add_tab_to_focused_group(TabType.SETTINGS, SETTINGS_TAB_TITLE, SETTINGS_SESSION_ID)

    def get_all_tabs(self) -> list[PaneGroupTab]:
        return [tab for group in self._groups.values() for tab in group.tabs]

    def find_group_for_tab(self, tab_id: str) -> str | None:
        for group_id, group in self._groups.items():
            if any(tab.id == tab_id for tab in group.tabs):
                return group_id
        return None

    def cycle_focused_group_tab(self, direction: str = "next") -> None:
        """在聚焦的 group 内循环切换 tab（direction: next / prev）"""
        group = self.focused_group
        if group is None or len(group.tabs) <= 1:
            return
        ids = [tab.id for tab in group.tabs]
        current = ids.index(group.active_tab_id) if group.active_tab_id in ids else -1
        if direction == "next":
            target = (current + 1) % len(ids)
        else:
            target = len(ids) - 1 if current <= 0 else current - 1
        groups = dict(self._groups)
        groups[group.id] = replace(group, active_tab_id=ids[target])
        self._commit(groups=groups)

    # === Group 操作 ===

    def split_group(self, group_id: str, direction: Direction) -> str | None:
        """拆分指定 group，新建空 group 并聚焦

        Returns:
            新 group ID；group 不在树中返回 None
        """
        new_group = PaneGroup(id=make_group_id())
        tree = mutations.split(self._tree, group_id, direction, new_group.id)
        if tree is self._tree:
            return None

        groups = dict(self._groups)
        groups[new_group.id] = new_group
        logger.info(
            f"[Workspace] Split {short_id(group_id)} {direction.value} -> {short_id(new_group.id)}"
        )
        self._commit(tree=tree, groups=groups, focused_group_id=new_group.id)
        return new_group.id

    def split_focused_group(self, direction: Direction) -> str | None:
        return self.split_group(self._focused_group_id, direction)

    def close_group(self, group_id: str) -> list[PaneGroupTab]:
        """关闭 group 及其全部 tab

        最后一个 group 不会从树中移除，只清空 tab。

        Returns:
            被关闭的 tab 列表（由宿主负责 session 清理）
        """
        group = self._groups.get(group_id)
        if group is None:
            return []
        closed = list(group.tabs)
        self._remove_group(group_id)
        return closed

    def _remove_group(self, group_id: str) -> None:
        group = self._groups[group_id]
        groups = dict(self._groups)

        if len(get_all_group_ids(self._tree)) <= 1:
            groups[group_id] = replace(group, tabs=(), active_tab_id=None)
            self._commit(groups=groups)
            return

        tree = mutations.close(self._tree, group_id)
        del groups[group_id]
        focused = self._focused_group_id
        if focused == group_id:
            focused = get_all_group_ids(tree)[0]
        logger.info(f"[Workspace] Closed group {short_id(group_id)}")
        self._commit(tree=tree, groups=groups, focused_group_id=focused)

    def focus_group(self, group_id: str) -> None:
        """聚焦 group（不修改树）"""
        if group_id not in get_all_group_ids(self._tree):
            return
        self._commit(focused_group_id=group_id)

    def cycle_focused_pane_group(self, direction: str = "next") -> None:
        """按树的从左到右顺序循环切换聚焦的 group"""
        ids = get_all_group_ids(self._tree)
        if len(ids) <= 1:
            return
        current = ids.index(self._focused_group_id) if self._focused_group_id in ids else -1
        if direction == "next":
            target = (current + 1) % len(ids)
        else:
            target = len(ids) - 1 if current <= 0 else current - 1
        self._commit(focused_group_id=ids[target])

    def resize_split_node(self, split_id: str, sizes: list[float]) -> None:
        tree = mutations.resize(self._tree, split_id, sizes)
        if tree is self._tree:
            return
        self._commit(tree=tree)

    # === 序列化 ===

    def to_dict(self) -> dict:
        """转换为可序列化的快照"""
        return {
            "tree": self._tree.to_dict(),
            "groups": {gid: group.to_dict() for gid, group in self._groups.items()},
            "focused_group_id": self._focused_group_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkspaceManager":
        """从快照还原

        Raises:
            ValueError: 树不满足不变量或 group 表与树不一致
        """
        tree = node_from_dict(data["tree"])
        problems = validate_tree(tree)
        if problems:
            raise ValueError(f"Invalid workspace tree: {'; '.join(problems)}")

        # 只保留树中引用的 group，缺失的补为空 group
        stored = data.get("groups", {})
        groups = {
            gid: PaneGroup.from_dict(stored[gid]) if gid in stored else PaneGroup(id=gid)
            for gid in get_all_group_ids(tree)
        }

        return cls(tree=tree, groups=groups, focused_group_id=data.get("focused_group_id"))
