"""持久化测试"""

import json

from termlayout.telemetry import metrics
from termlayout.workspace import Direction, TabType, WorkspaceManager, persistence


def build_workspace():
    mgr = WorkspaceManager()
    mgr.add_tab_to_focused_group(TabType.SSH, "prod", "ssh-1", config={"host": "10.0.0.2"})
    mgr.split_focused_group(Direction.VERTICAL)
    return mgr


class TestSaveLoad:
    """保存与加载"""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "workspace.json"
        mgr = build_workspace()
        assert persistence.save(mgr.to_dict(), path) is True

        loaded = persistence.load(path)
        assert loaded == mgr.to_dict()
        restored = WorkspaceManager.from_dict(loaded)
        assert restored.tree == mgr.tree

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "workspace.json"
        assert persistence.save(build_workspace().to_dict(), path)
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path):
        path = tmp_path / "workspace.json"
        persistence.save(build_workspace().to_dict(), path)
        assert [p.name for p in tmp_path.iterdir()] == ["workspace.json"]

    def test_file_shape(self, tmp_path):
        path = tmp_path / "workspace.json"
        persistence.save(build_workspace().to_dict(), path)
        data = json.loads(path.read_text())
        assert set(data) == {"version", "saved_at", "workspace", "checksum"}

    def test_unserializable_workspace(self, tmp_path):
        path = tmp_path / "workspace.json"
        assert persistence.save({"tree": object()}, path) is False
        assert metrics.get_counter("persist.error", {"op": "save"}) == 1


class TestLoadFailures:
    """加载失败时返回 None"""

    def test_missing_file(self, tmp_path):
        assert persistence.load(tmp_path / "none.json") is None

    def test_corrupt_json(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text("{not json")
        assert persistence.load(path) is None
        assert metrics.get_counter("persist.error", {"op": "load", "reason": "json"}) == 1

    def test_top_level_not_object(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text("[1, 2]")
        assert persistence.load(path) is None

    def test_version_mismatch(self, tmp_path):
        path = tmp_path / "workspace.json"
        persistence.save(build_workspace().to_dict(), path, version=99)
        assert persistence.load(path) is None
        assert metrics.get_counter("persist.error", {"op": "load", "reason": "version"}) == 1

    def test_checksum_mismatch(self, tmp_path):
        path = tmp_path / "workspace.json"
        persistence.save(build_workspace().to_dict(), path)
        data = json.loads(path.read_text())
        data["workspace"]["focused_group_id"] = "tampered"
        path.write_text(json.dumps(data))
        assert persistence.load(path) is None
        assert metrics.get_counter("persist.error", {"op": "load", "reason": "checksum"}) == 1

    def test_invalid_tree(self, tmp_path):
        path = tmp_path / "workspace.json"
        snapshot = build_workspace().to_dict()
        snapshot["tree"]["sizes"] = [99.0, 99.0]
        persistence.save(snapshot, path)
        assert persistence.load(path) is None
        assert metrics.get_counter("persist.error", {"op": "load", "reason": "tree"}) == 1

    def test_non_finite_sizes(self, tmp_path):
        path = tmp_path / "workspace.json"
        snapshot = build_workspace().to_dict()
        snapshot["tree"]["sizes"] = [float("nan"), 10.0]
        persistence.save(snapshot, path)
        assert persistence.load(path) is None
        assert metrics.get_counter("persist.error", {"op": "load", "reason": "tree"}) == 1

    def test_missing_workspace_key(self, tmp_path):
        path = tmp_path / "workspace.json"
        path.write_text(json.dumps({"version": 1}))
        assert persistence.load(path) is None


class TestDelete:
    """删除"""

    def test_delete(self, tmp_path):
        path = tmp_path / "workspace.json"
        persistence.save(build_workspace().to_dict(), path)
        assert persistence.delete(path) is True
        assert not path.exists()

    def test_delete_missing(self, tmp_path):
        assert persistence.delete(tmp_path / "none.json") is True
