"""WorkspaceManager 测试"""

import pytest

from termlayout.telemetry import metrics
from termlayout.workspace import (
    Direction,
    GroupNode,
    PaneGroup,
    SplitNode,
    TabType,
    WorkspaceManager,
    get_all_group_ids,
)


@pytest.fixture
def manager():
    """单 group 工作区，含一个 ssh tab"""
    mgr = WorkspaceManager()
    mgr.add_tab_to_focused_group(TabType.SSH, "prod", "ssh-1", pty_session_id="pty-1")
    return mgr


class TestInitialState:
    """初始状态"""

    def test_default_single_group(self):
        mgr = WorkspaceManager()
        assert isinstance(mgr.tree, GroupNode)
        assert list(mgr.groups) == [mgr.tree.pane_group_id]
        assert mgr.focused_group_id == mgr.tree.pane_group_id

    def test_unknown_focus_falls_back_to_first(self, pair):
        mgr = WorkspaceManager(pair, {"g1": PaneGroup("g1"), "g2": PaneGroup("g2")}, "zzz")
        assert mgr.focused_group_id == "g1"

    def test_groups_property_is_a_copy(self, manager):
        manager.groups.clear()
        assert len(manager.groups) == 1


class TestTabs:
    """tab 操作"""

    def test_add_tab_activates_it(self, manager):
        tab = manager.add_tab_to_focused_group(TabType.LOCAL, "shell", "local-1")
        group = manager.focused_group
        assert [t.title for t in group.tabs] == ["prod", "shell"]
        assert group.active_tab_id == tab.id

    def test_add_tab_unknown_group(self, manager):
        assert manager.add_tab_to_group("nope", TabType.LOCAL, "x", "y") is None

    def test_close_active_tab_selects_neighbor(self, manager):
        second = manager.add_tab_to_focused_group(TabType.LOCAL, "a", "s-a")
        third = manager.add_tab_to_focused_group(TabType.LOCAL, "b", "s-b")
        manager.select_tab(manager.focused_group_id, second.id)
        manager.close_tab(second.id)
        assert manager.focused_group.active_tab_id == third.id

    def test_close_last_active_tab_selects_previous(self, manager):
        first = manager.focused_group.tabs[0]
        second = manager.add_tab_to_focused_group(TabType.LOCAL, "a", "s-a")
        manager.close_tab(second.id)
        assert manager.focused_group.active_tab_id == first.id

    def test_close_only_tab_of_last_group_keeps_group(self, manager):
        group_id = manager.focused_group_id
        tab = manager.focused_group.tabs[0]
        assert manager.close_tab(tab.id) == tab
        assert get_all_group_ids(manager.tree) == [group_id]
        assert manager.get_group(group_id).tabs == ()
        assert manager.get_group(group_id).active_tab_id is None

    def test_close_only_tab_removes_group(self, manager):
        new_id = manager.split_focused_group(Direction.VERTICAL)
        tab = manager.add_tab_to_group(new_id, TabType.SFTP, "files", "sftp-1")
        manager.close_tab(tab.id)
        assert new_id not in get_all_group_ids(manager.tree)
        assert new_id not in manager.groups
        assert isinstance(manager.tree, GroupNode)

    def test_close_unknown_tab(self, manager):
        assert manager.close_tab("missing") is None

    def test_rename_tab(self, manager):
        tab = manager.focused_group.tabs[0]
        manager.rename_tab(tab.id, "staging")
        assert manager.focused_group.tabs[0].title == "staging"

    def test_open_settings_reuses_tab(self, manager):
        manager.open_settings()
        manager.open_settings()
        settings = [t for t in manager.get_all_tabs() if t.type == TabType.SETTINGS]
        assert len(settings) == 1
        assert manager.focused_group.active_tab_id == settings[0].id

    def test_cycle_group_tabs(self, manager):
        first = manager.focused_group.tabs[0]
        second = manager.add_tab_to_focused_group(TabType.LOCAL, "a", "s-a")
        manager.cycle_focused_group_tab("next")
        assert manager.focused_group.active_tab_id == first.id
        manager.cycle_focused_group_tab("prev")
        assert manager.focused_group.active_tab_id == second.id


class TestGroups:
    """group 操作"""

    def test_split_focuses_new_group(self, manager):
        original = manager.focused_group_id
        new_id = manager.split_focused_group(Direction.VERTICAL)
        assert isinstance(manager.tree, SplitNode)
        assert get_all_group_ids(manager.tree) == [original, new_id]
        assert manager.focused_group_id == new_id
        assert manager.get_group(new_id) == PaneGroup(id=new_id)

    def test_split_unknown_group(self, manager):
        tree = manager.tree
        assert manager.split_group("nope", Direction.HORIZONTAL) is None
        assert manager.tree is tree

    def test_close_group_returns_tabs(self, manager):
        original = manager.focused_group_id
        new_id = manager.split_group(original, Direction.HORIZONTAL)
        manager.add_tab_to_group(new_id, TabType.LOCAL, "a", "s-a")
        closed = manager.close_group(new_id)
        assert [tab.title for tab in closed] == ["a"]
        assert manager.focused_group_id == original
        assert manager.tree == GroupNode(id=original, pane_group_id=original)

    def test_close_last_group_clears_tabs(self, manager):
        closed = manager.close_group(manager.focused_group_id)
        assert len(closed) == 1
        assert manager.focused_group.tabs == ()

    def test_focus_group(self, manager):
        original = manager.focused_group_id
        manager.split_focused_group(Direction.VERTICAL)
        manager.focus_group(original)
        assert manager.focused_group_id == original
        manager.focus_group("missing")
        assert manager.focused_group_id == original

    def test_cycle_focus(self, manager):
        first = manager.focused_group_id
        second = manager.split_focused_group(Direction.VERTICAL)
        manager.cycle_focused_pane_group("next")
        assert manager.focused_group_id == first
        manager.cycle_focused_pane_group("prev")
        assert manager.focused_group_id == second

    def test_resize_split_node(self, manager):
        manager.split_focused_group(Direction.VERTICAL)
        manager.resize_split_node(manager.tree.id, [5.0, 95.0])
        assert manager.tree.sizes == pytest.approx((10.0, 90.0))

    def test_listeners_notified(self, manager):
        seen = []
        manager.add_listener(lambda mgr: seen.append(mgr.focused_group_id))
        new_id = manager.split_focused_group(Direction.VERTICAL)
        assert seen == [new_id]
        assert metrics.get_gauge("workspace.groups") == 2

    def test_callbacks_bound(self, manager):
        callbacks = manager.callbacks()
        new_id = manager.split_focused_group(Direction.VERTICAL)
        callbacks.on_close_pane(new_id)
        assert len(get_all_group_ids(manager.tree)) == 1


class TestSnapshot:
    """to_dict / from_dict"""

    def test_round_trip(self, manager):
        manager.split_focused_group(Direction.HORIZONTAL)
        restored = WorkspaceManager.from_dict(manager.to_dict())
        assert restored.tree == manager.tree
        assert restored.groups == manager.groups
        assert restored.focused_group_id == manager.focused_group_id

    def test_orphans_dropped_and_missing_filled(self, pair):
        data = {
            "tree": pair.to_dict(),
            "groups": {"g1": PaneGroup("g1").to_dict(), "old": PaneGroup("old").to_dict()},
            "focused_group_id": "g2",
        }
        restored = WorkspaceManager.from_dict(data)
        assert set(restored.groups) == {"g1", "g2"}
        assert restored.focused_group_id == "g2"

    def test_invalid_tree_rejected(self, pair):
        data = pair.to_dict()
        data["sizes"] = [50.0, 10.0]
        with pytest.raises(ValueError):
            WorkspaceManager.from_dict({"tree": data})
