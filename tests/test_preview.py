"""Tests for the rich layout preview."""

from rich.layout import Layout

from termlayout.preview import RATIO_SCALE, LayoutPreviewRenderer, demo_workspace
from termlayout.workspace import Direction, TabType, WorkspaceManager


class TestLayoutPreviewRenderer:
    """Test LayoutPreviewRenderer"""

    def test_single_group_uses_tab_titles(self):
        manager = WorkspaceManager()
        manager.add_tab_to_focused_group(TabType.SSH, "prod", "ssh-1", pty_session_id="pty-1")
        manager.add_tab_to_focused_group(TabType.LOCAL, "zsh", "local-1", pty_session_id="pty-2")

        text = LayoutPreviewRenderer().render_text(manager, width=60, height=10)
        assert "prod" in text
        assert "[zsh]" in text
        assert "local terminal" in text

    def test_split_maps_to_ratios(self):
        manager = WorkspaceManager()
        manager.split_focused_group(Direction.VERTICAL)
        manager.resize_split_node(manager.tree.id, [30.0, 70.0])

        layout = LayoutPreviewRenderer().build(manager)
        assert isinstance(layout, Layout)
        ratios = [child.ratio for child in layout.children]
        assert ratios == [30 * RATIO_SCALE, 70 * RATIO_SCALE]

    def test_empty_group(self):
        text = LayoutPreviewRenderer().render_text(WorkspaceManager(), width=40, height=6)
        assert "empty pane" in text

    def test_demo_workspace(self):
        manager = demo_workspace()
        assert len(manager.groups) == 3
        text = LayoutPreviewRenderer().render_text(manager, width=100, height=20)
        for title in ("zsh", "prod", "prod files"):
            assert title in text

    def test_svg(self):
        svg = LayoutPreviewRenderer().render_svg(demo_workspace())
        assert "<svg" in svg
