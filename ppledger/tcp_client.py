"""Blocking TCP client with line-oriented reading."""

from __future__ import annotations

import socket

from ppledger.errors import LedgerError


class TcpClient:
    """A single outgoing TCP connection over IPv4."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._connected = False

    def connect(self, host: str, port: int) -> None:
        """Resolve ``host`` and connect to it on ``port``."""
        if self._connected:
            raise LedgerError("Already connected")
        self._release_socket()
        try:
            address = socket.gethostbyname(host)
        except (OSError, UnicodeError) as exc:
            raise LedgerError(f"Failed to resolve hostname: {host}") from exc
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise LedgerError("Failed to create socket") from exc
        try:
            sock.connect((address, port))
        except (OSError, OverflowError) as exc:
            sock.close()
            raise LedgerError(f"Failed to connect to {host}:{port}") from exc
        self._sock = sock
        self._connected = True

    def send(self, data: bytes | str) -> int:
        """Send ``data`` (text is UTF-8 encoded) and return the number of bytes sent."""
        if not self._connected or self._sock is None:
            raise LedgerError("Not connected")
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        try:
            return self._sock.send(payload)
        except OSError as exc:
            raise LedgerError("Failed to send data") from exc

    def receive(self, max_length: int = 4096) -> bytes:
        """Receive at most ``max_length`` bytes; a closed peer ends the connection."""
        if not self._connected or self._sock is None:
            raise LedgerError("Not connected")
        try:
            chunk = self._sock.recv(max_length)
        except OSError as exc:
            raise LedgerError("Failed to receive data") from exc
        if not chunk:
            self._connected = False
            raise LedgerError("Connection closed by peer")
        return chunk

    def receive_line(self) -> str:
        """Read up to the next newline; carriage returns are dropped."""
        line = bytearray()
        while True:
            byte = self.receive(1)
            if byte == b"\n":
                break
            if byte != b"\r":
                line += byte
        return line.decode("utf-8", errors="replace")

    def close(self) -> None:
        """Close the connection, if any."""
        self._release_socket()
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def _release_socket(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> TcpClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()