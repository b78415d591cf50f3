import asyncio
import os
import sys
import signal
import logging
from pathlib import Path
from typing import Optional

from boardsync.server import BoardServer
from boardsync.server.constants import EventConstants


# Configure logging
logger = logging.getLogger(__name__)


def setup_logging(log_file: Path = None, level: str = "INFO"):
    """
    Configure logging to both file and console.

    Args:
        log_file: Path to log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter(
        '%(levelname)s: %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")

    return root_logger


async def run_server(
    host: str,
    port: int,
    data_file: Optional[Path],
    snapshot_delay: float = EventConstants.SNAPSHOT_DELAY_SECONDS,
    use_signals: bool = True,
):
    """Run the board server until SIGINT/SIGTERM."""
    server = BoardServer(
        data_file=data_file,
        enable_websocket=True,
        ws_host=host,
        ws_port=port,
        snapshot_delay=snapshot_delay,
    )

    await server.start_websocket_server()

    status = server.get_status()
    print("\nBoard Server:")
    print(f"  URL: ws://{status['websocket']['host']}:{status['websocket']['port']}")
    print(f"  Data file: {status['data_file'] or '(memory only)'}")
    print(f"  Tasks: {status['tasks']}")
    print(f"  Team members: {status['team_members']}")

    print("\nServer is running. Press Ctrl+C to stop." if use_signals else "\nServer is running.")

    # Set up graceful shutdown
    stop_event = asyncio.Event()

    def signal_handler():
        print("\nShutting down...")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    await stop_event.wait()

    print("Stopping WebSocket server...")
    await server.stop_websocket_server()

    print("Writing final snapshot...")
    await server.flush()

    print("Server stopped.")


def print_usage():
    print("Usage: boardsync [OPTIONS]")
    print("\nServer Options:")
    print(f"  --host=HOST          - Bind address (default: {EventConstants.DEFAULT_HOST})")
    print(f"  --port=PORT          - Listen port (default: ${EventConstants.ENV_PORT} or {EventConstants.DEFAULT_PORT})")
    print("  --no-signals         - Do not print the Ctrl+C hint (for process supervisors)")
    print("\nPersistence Options:")
    print(f"  --data-file=PATH     - Snapshot file (default: ${EventConstants.ENV_DATA_FILE} or {EventConstants.DEFAULT_DATA_FILE})")
    print("  --memory-only        - Never read or write a snapshot file")
    print(f"  --snapshot-delay=SEC - Quiet period before writing a snapshot (default: {EventConstants.SNAPSHOT_DELAY_SECONDS})")
    print("\nLogging Options:")
    print("  --log-file=PATH      - Log to file (default: stdout only)")
    print("  --log-level=LEVEL    - Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    host = EventConstants.DEFAULT_HOST
    port = int(os.environ.get(EventConstants.ENV_PORT) or EventConstants.DEFAULT_PORT)
    data_file: Optional[Path] = Path(os.environ.get(EventConstants.ENV_DATA_FILE) or EventConstants.DEFAULT_DATA_FILE)
    snapshot_delay = EventConstants.SNAPSHOT_DELAY_SECONDS
    use_signals = True
    log_file = None
    log_level = "INFO"

    # Parse optional arguments
    for arg in argv:
        if arg in ("-h", "--help"):
            print_usage()
            return
        elif arg.startswith("--host="):
            host = arg.split("=", 1)[1]
        elif arg.startswith("--port="):
            port = int(arg.split("=", 1)[1])
        elif arg.startswith("--data-file="):
            data_file = Path(arg.split("=", 1)[1])
        elif arg == "--memory-only":
            data_file = None
        elif arg.startswith("--snapshot-delay="):
            snapshot_delay = float(arg.split("=", 1)[1])
        elif arg == "--no-signals":
            use_signals = False
        elif arg.startswith("--log-file="):
            log_file = Path(arg.split("=", 1)[1])
        elif arg.startswith("--log-level="):
            log_level = arg.split("=", 1)[1]
        else:
            print(f"Unknown option: {arg}\n")
            print_usage()
            sys.exit(1)

    setup_logging(log_file=log_file, level=log_level)

    try:
        asyncio.run(run_server(host, port, data_file, snapshot_delay, use_signals))
    except KeyboardInterrupt:
        print("\nShutdown complete.")


if __name__ == "__main__":
    main()
