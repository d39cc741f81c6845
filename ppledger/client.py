"""Ledger client component and its command-line entry point."""

from __future__ import annotations

import sys

from ppledger.lib import Lib
from ppledger.logger import Level, get_logger, get_root_logger
from ppledger.module import Module


class Client(Module):
    """Client component tracking whether it is connected to a server."""

    def __init__(self) -> None:
        super().__init__("client")
        self._connected = False

    def connect(self, address: str, port: int) -> bool:
        """Mark the client as connected to ``address``:``port``."""
        self._connected = True
        return True

    def disconnect(self) -> None:
        if self._connected:
            self._connected = False

    def is_connected(self) -> bool:
        return self._connected


def _print_usage() -> None:
    sys.stdout.write(
        "Usage: pp-ledger-client <host> <port>\n"
        "  <host> - Server hostname or IP address\n"
        "  <port> - Server port number\n"
    )


def main(argv: list[str] | None = None) -> int:
    """Run the client command; returns the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    get_root_logger().info(f"PP-Ledger Client v{Lib().version()}")

    if len(args) < 2:
        sys.stderr.write("Error: Host and port required.\n")
        _print_usage()
        return 1

    host = args[0]
    try:
        port = int(args[1])
    except ValueError:
        sys.stderr.write(f"Error: Invalid port: {args[1]}\n")
        _print_usage()
        return 1

    logger = get_logger("client")
    logger.level = Level.INFO
    logger.add_file_handler("client.log", Level.DEBUG)

    logger.info(f"Connecting to {host}:{port}")

    client = Client()
    if not client.connect(host, port):
        logger.error("Failed to connect")
        return 1

    logger.info("Connected successfully")
    sys.stdout.write("Press Enter to disconnect...\n")
    sys.stdout.flush()
    sys.stdin.readline()
    client.disconnect()
    logger.info("Disconnected")
    return 0


if __name__ == "__main__":
    sys.exit(main())