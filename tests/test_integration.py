"""End-to-end tests against a real WebSocket server on an ephemeral port."""

import asyncio
import json
import urllib.request

import pytest
import pytest_asyncio
from websockets.asyncio.client import connect

from boardsync.server import BoardServer


RECV_TIMEOUT = 2.0


async def recv_json(ws, timeout=RECV_TIMEOUT):
    return json.loads(await asyncio.wait_for(ws.recv(), timeout=timeout))


async def assert_silent(ws, timeout=0.2):
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(ws.recv(), timeout=timeout)


def send(ws, msg_type, payload):
    return ws.send(json.dumps({"type": msg_type, "payload": payload}))


@pytest_asyncio.fixture
async def board_server(tmp_path):
    server = BoardServer(
        data_file=tmp_path / "board.json",
        enable_websocket=True,
        ws_host="127.0.0.1",
        ws_port=0,
        snapshot_delay=0,
    )
    await server.start_websocket_server()
    yield server
    await server.stop_websocket_server()
    await server.flush()


def url(server):
    return f"ws://127.0.0.1:{server.websocket_server.port}"


@pytest.mark.asyncio
async def test_new_client_receives_init(board_server):
    async with connect(url(board_server)) as ws:
        message = await recv_json(ws)

    assert message == {"type": "INIT", "payload": {"tasks": [], "teamMembers": []}}


@pytest.mark.asyncio
async def test_add_task_scenario(board_server):
    task = {"id": "t1", "status": "todo", "comments": []}

    async with connect(url(board_server)) as a, connect(url(board_server)) as other:
        await recv_json(a)
        await recv_json(other)

        await send(a, "ADD_TASK", task)

        expected = {"type": "TASK_ADDED", "payload": task}
        assert await recv_json(a) == expected
        assert await recv_json(other) == expected
        # Broadcast-inclusive delivery: exactly one copy for the sender
        await assert_silent(a)

        async with connect(url(board_server)) as b:
            init = await recv_json(b)

    assert init["type"] == "INIT"
    assert init["payload"]["tasks"] == [task]


@pytest.mark.asyncio
async def test_user_activity_not_echoed(board_server):
    async with connect(url(board_server)) as sender, connect(url(board_server)) as peer:
        await recv_json(sender)
        await recv_json(peer)

        await send(sender, "USER_ACTIVITY", {"user": "ana", "status": "online"})

        assert await recv_json(peer) == {"type": "USER_ACTIVITY", "payload": {"user": "ana", "status": "online"}}
        await assert_silent(sender)


@pytest.mark.asyncio
async def test_move_unknown_task_produces_no_traffic(board_server, tmp_path):
    async with connect(url(board_server)) as ws:
        await recv_json(ws)
        await board_server.flush()
        before = (tmp_path / "board.json").read_text(encoding="utf-8")

        await send(ws, "MOVE_TASK", {"id": "ghost", "status": "done"})
        await assert_silent(ws)

    await board_server.flush()
    assert (tmp_path / "board.json").read_text(encoding="utf-8") == before


@pytest.mark.asyncio
async def test_malformed_frame_keeps_connection_usable(board_server):
    async with connect(url(board_server)) as ws:
        await recv_json(ws)

        await ws.send("this is not json")
        await assert_silent(ws)

        await send(ws, "UPDATE_TEAM_MEMBER", {"name": "ana", "role": "dev"})
        assert await recv_json(ws) == {"type": "TEAM_UPDATED", "payload": [{"name": "ana", "role": "dev"}]}



@pytest.mark.asyncio
async def test_deeply_nested_frame_keeps_connection_usable(board_server):
    async with connect(url(board_server)) as ws:
        await recv_json(ws)

        await ws.send("[" * 100000)
        await assert_silent(ws)

        await send(ws, "UPDATE_TEAM_MEMBER", {"name": "ana", "role": "dev"})
        assert await recv_json(ws) == {"type": "TEAM_UPDATED", "payload": [{"name": "ana", "role": "dev"}]}
        assert board_server.websocket_server.get_client_count() == 1


@pytest.mark.asyncio
async def test_disconnect_unregisters_client(board_server):
    async with connect(url(board_server)) as ws:
        await recv_json(ws)
        assert board_server.websocket_server.get_client_count() == 1

    for _ in range(50):
        if board_server.websocket_server.get_client_count() == 0:
            break
        await asyncio.sleep(0.01)
    assert board_server.websocket_server.get_client_count() == 0


@pytest.mark.asyncio
async def test_health_endpoint(board_server):
    def fetch():
        with urllib.request.urlopen(f"http://127.0.0.1:{board_server.websocket_server.port}/healthz", timeout=2) as resp:
            return resp.status, resp.read()

    status, body = await asyncio.to_thread(fetch)

    assert status == 200
    assert body == b"OK\n"


@pytest.mark.asyncio
async def test_board_survives_restart(tmp_path):
    data_file = tmp_path / "board.json"
    first = BoardServer(data_file=data_file, enable_websocket=True, ws_host="127.0.0.1", ws_port=0, snapshot_delay=0)
    await first.start_websocket_server()
    async with connect(url(first)) as ws:
        await recv_json(ws)
        await send(ws, "ADD_TASK", {"id": "t1", "status": "todo", "comments": []})
        await recv_json(ws)
    await first.stop_websocket_server()
    await first.flush()

    second = BoardServer(data_file=data_file, enable_websocket=True, ws_host="127.0.0.1", ws_port=0)
    await second.start_websocket_server()
    try:
        async with connect(url(second)) as ws:
            init = await recv_json(ws)
    finally:
        await second.stop_websocket_server()
        await second.flush()

    assert [t["id"] for t in init["payload"]["tasks"]] == ["t1"]
