import pytest
import asyncio
import json
from unittest.mock import MagicMock

from boardsync.server.services.persistence import SnapshotStore
from boardsync.server.utils.debouncer import DebouncedSnapshotWriter


def test_schedule_without_loop_writes_immediately(tmp_path):
    path = tmp_path / "board.json"
    writer = DebouncedSnapshotWriter(SnapshotStore(path), delay=10)

    writer.schedule({"tasks": [], "teamMembers": []})

    assert path.exists()
    assert writer.writes_completed == 1
    assert not writer.is_pending()


@pytest.mark.asyncio
async def test_single_snapshot_written_after_delay(tmp_path):
    """
    A scheduled snapshot is not written before the quiet period elapses.
    """
    delay = 0.05
    path = tmp_path / "board.json"
    writer = DebouncedSnapshotWriter(SnapshotStore(path), delay=delay)

    writer.schedule({"tasks": [{"id": "t1"}], "teamMembers": []})

    assert not path.exists()
    assert writer.is_pending()

    await writer.flush()

    assert json.loads(path.read_text(encoding="utf-8"))["tasks"] == [{"id": "t1"}]
    assert not writer.is_pending()


@pytest.mark.asyncio
async def test_rapid_snapshots_coalesce(tmp_path):
    """
    Multiple rapid requests coalesce into a single write of the last board.
    """
    store = SnapshotStore(tmp_path / "board.json")
    store.write = MagicMock(wraps=store.write)
    writer = DebouncedSnapshotWriter(store, delay=0.05)

    for i in range(5):
        writer.schedule({"tasks": [{"id": f"t{i}"}], "teamMembers": []})

    await writer.flush()

    store.write.assert_called_once()
    written = json.loads(store.write.call_args[0][0])
    assert written["tasks"] == [{"id": "t4"}]
    assert writer.writes_completed == 1


@pytest.mark.asyncio
async def test_board_serialized_at_write_time(tmp_path):
    """
    Mutations made to the scheduled board before the write are included.
    """
    path = tmp_path / "board.json"
    writer = DebouncedSnapshotWriter(SnapshotStore(path), delay=0.02)
    board = {"tasks": [], "teamMembers": []}

    writer.schedule(board)
    board["tasks"].append({"id": "late"})
    await writer.flush()

    assert json.loads(path.read_text(encoding="utf-8"))["tasks"] == [{"id": "late"}]


@pytest.mark.asyncio
async def test_request_during_write_triggers_another_write(tmp_path):
    path = tmp_path / "board.json"
    writer = DebouncedSnapshotWriter(SnapshotStore(path), delay=0.01)

    writer.schedule({"tasks": [{"id": "first"}], "teamMembers": []})
    await asyncio.sleep(0.03)
    writer.schedule({"tasks": [{"id": "second"}], "teamMembers": []})
    await writer.flush()

    assert json.loads(path.read_text(encoding="utf-8"))["tasks"] == [{"id": "second"}]
    assert writer.writes_completed == 2


@pytest.mark.asyncio
async def test_write_failure_is_counted_not_raised(tmp_path):
    writer = DebouncedSnapshotWriter(SnapshotStore(tmp_path / "missing" / "board.json"), delay=0.01)

    writer.schedule({"tasks": [], "teamMembers": []})
    await writer.flush()

    assert writer.writes_failed == 1
    assert writer.writes_completed == 0


@pytest.mark.asyncio
async def test_flush_with_nothing_pending_returns():
    writer = DebouncedSnapshotWriter(MagicMock(), delay=0.01)
    await writer.flush()
    assert not writer.is_pending()
