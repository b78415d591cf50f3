import json

from boardsync.server.services.persistence import SnapshotStore


def test_restore_missing_file_returns_none(tmp_path):
    store = SnapshotStore(tmp_path / "board.json")
    assert store.restore() is None


def test_snapshot_then_restore(tmp_path):
    path = tmp_path / "board.json"
    store = SnapshotStore(path)
    board = {"tasks": [{"id": "t1", "status": "todo", "comments": []}], "teamMembers": []}

    assert store.snapshot(board) is True
    assert store.restore() == board


def test_snapshot_is_pretty_printed(tmp_path):
    path = tmp_path / "board.json"
    SnapshotStore(path).snapshot({"tasks": [], "teamMembers": []})
    assert path.read_text(encoding="utf-8") == json.dumps({"tasks": [], "teamMembers": []}, indent=2)


def test_restore_corrupt_json_returns_none(tmp_path):
    path = tmp_path / "board.json"
    path.write_text("{not json", encoding="utf-8")
    assert SnapshotStore(path).restore() is None


def test_restore_wrong_shape_returns_none(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert SnapshotStore(path).restore() is None

    path.write_text(json.dumps({"tasks": "oops"}), encoding="utf-8")
    assert SnapshotStore(path).restore() is None


def test_restore_fills_missing_keys(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps({"tasks": [{"id": "t1"}]}), encoding="utf-8")
    assert SnapshotStore(path).restore() == {"tasks": [{"id": "t1"}], "teamMembers": []}


def test_snapshot_write_failure_is_swallowed(tmp_path):
    # Parent directory does not exist, so the write fails
    store = SnapshotStore(tmp_path / "missing" / "board.json")
    assert store.snapshot({"tasks": [], "teamMembers": []}) is False


def test_snapshot_unserializable_board_is_swallowed(tmp_path):
    path = tmp_path / "board.json"
    store = SnapshotStore(path)
    assert store.snapshot({"tasks": [object()], "teamMembers": []}) is False
    assert not path.exists()
