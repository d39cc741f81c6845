"""Non-blocking TCP listener and the connections it accepts."""

from __future__ import annotations

import selectors
import socket

from ppledger.errors import LedgerError


class TcpConnection:
    """One accepted client connection."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock: socket.socket | None = sock
        self._client_address = ""
        self._client_port = 0
        try:
            host, port = sock.getpeername()[:2]
        except OSError:
            pass
        else:
            self._client_address = host
            self._client_port = port

    def send(self, data: bytes | str) -> int:
        """Send ``data`` (text is UTF-8 encoded) and return the number of bytes sent."""
        if self._sock is None:
            raise LedgerError("Connection closed")
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        try:
            return self._sock.send(payload)
        except OSError as exc:
            raise LedgerError("Failed to send data") from exc

    def receive(self, max_length: int = 4096) -> bytes:
        """Receive at most ``max_length`` bytes."""
        if self._sock is None:
            raise LedgerError("Connection closed")
        try:
            chunk = self._sock.recv(max_length)
        except OSError as exc:
            raise LedgerError("Failed to receive data") from exc
        if not chunk:
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
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    @property
    def client_address(self) -> str:
        """The peer's IPv4 address, or an empty string if unknown."""
        return self._client_address

    @property
    def client_port(self) -> int:
        """The peer's port, or 0 if unknown."""
        return self._client_port


class TcpServer:
    """A listening IPv4 socket accepting connections without blocking."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._selector: selectors.BaseSelector | None = None
        self._listening = False
        self._port = 0

    def listen(self, port: int, backlog: int = 10) -> None:
        """Bind to ``port`` on all interfaces and start listening."""
        if self._listening:
            raise LedgerError("Server already listening")
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise LedgerError("Failed to create socket") from exc
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as exc:
            sock.close()
            raise LedgerError("Failed to set socket options") from exc
        try:
            sock.bind(("", port))
        except (OSError, OverflowError) as exc:
            sock.close()
            raise LedgerError(f"Failed to bind to port {port}") from exc
        try:
            sock.listen(backlog)
        except OSError as exc:
            sock.close()
            raise LedgerError(f"Failed to listen on port {port}") from exc
        try:
            sock.setblocking(False)
        except OSError as exc:
            sock.close()
            raise LedgerError("Failed to set socket to non-blocking mode") from exc
        selector = selectors.DefaultSelector()
        try:
            selector.register(sock, selectors.EVENT_READ)
        except (OSError, ValueError) as exc:
            selector.close()
            sock.close()
            raise LedgerError("Failed to add socket to epoll") from exc
        self._sock = sock
        self._selector = selector
        self._listening = True
        self._port = sock.getsockname()[1]

    def accept(self) -> TcpConnection:
        """Accept a pending connection; raises if none is waiting."""
        if not self._listening or self._sock is None:
            raise LedgerError("Server not listening")
        try:
            client, _ = self._sock.accept()
        except BlockingIOError as exc:
            raise LedgerError("No pending connections") from exc
        except OSError as exc:
            raise LedgerError("Failed to accept connection") from exc
        client.setblocking(True)
        return TcpConnection(client)

    def wait_for_events(self, timeout_ms: int = -1) -> None:
        """Wait until a connection is pending; a negative timeout waits forever."""
        if not self._listening or self._selector is None:
            raise LedgerError("Server not listening")
        timeout = None if timeout_ms < 0 else timeout_ms / 1000.0
        try:
            events = self._selector.select(timeout)
        except OSError as exc:
            raise LedgerError("epoll_wait failed") from exc
        if not events:
            raise LedgerError("Timeout waiting for events")

    def stop(self) -> None:
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        self._listening = False

    def is_listening(self) -> bool:
        return self._listening

    @property
    def port(self) -> int:
        """The port bound by the last successful ``listen``."""
        return self._port

    def __enter__(self) -> TcpServer:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()