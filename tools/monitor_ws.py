import asyncio
import websockets
import json
import sys

async def listen(uri):
    print(f"Connecting to {uri}...")
    try:
        async with websockets.connect(uri) as websocket:
            print(f"Connected to {uri}")
            async for message in websocket:
                try:
                    data = json.loads(message)
                    msg_type = data.get('type')
                    payload = data.get('payload')
                    if msg_type == 'INIT':
                        print(f"Received: INIT ({len(payload.get('tasks', []))} tasks, "
                              f"{len(payload.get('teamMembers', []))} members)")
                        for task in payload.get('tasks', []):
                            print(f"  - {task.get('id')} [{task.get('status')}]")
                    elif msg_type == 'TEAM_UPDATED':
                        names = [m.get('name') for m in payload]
                        print(f"Received: TEAM_UPDATED -> {', '.join(map(str, names))}")
                    elif msg_type in ('TASK_ADDED', 'TASK_UPDATED', 'TASK_DELETED', 'TASK_MOVED'):
                        print(f"Received: {msg_type} {payload.get('id')} (status: {payload.get('status')})")
                    elif msg_type == 'COMMENT_ADDED':
                        print(f"Received: COMMENT_ADDED on {payload.get('taskId')}")
                    else:
                        print(f"Received: {msg_type} {payload}")
                except json.JSONDecodeError:
                    print("Received non-JSON message")
    except Exception as e:
        print(f"Connection Error: {e}")

if __name__ == "__main__":
    uri = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:3000"
    try:
        asyncio.run(listen(uri))
    except KeyboardInterrupt:
        pass
