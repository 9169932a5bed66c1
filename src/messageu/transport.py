"""
Byte stream transports.

The protocol core only needs a reliable, ordered stream. SocketTransport
speaks TCP; LoopbackTransport replays canned responses for tests and tooling.
"""

import logging
import socket
from abc import ABC, abstractmethod
from typing import List, Optional

from .types import TransportTruncatedError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Interface for a blocking request/response byte stream."""

    @abstractmethod
    def send_all(self, data: bytes) -> None:
        """Send every byte of data."""
        ...

    @abstractmethod
    def read_exact(self, size: int) -> bytes:
        """
        Read exactly size bytes.

        Raises:
            TransportTruncatedError: If the stream closes first.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the stream."""
        ...

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SocketTransport(Transport):
    """Transport over a blocking TCP socket."""

    # Largest single recv() request
    CHUNK_SIZE = 64 * 1024

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> "SocketTransport":
        """Open a TCP connection to host:port."""
        sock = socket.create_connection((host, port), timeout=timeout)
        logger.info("Connected to %s:%d", host, port)
        return cls(sock)

    def send_all(self, data: bytes) -> None:
        self._sock.sendall(data)

    def read_exact(self, size: int) -> bytes:
        buffer = bytearray()
        while len(buffer) < size:
            chunk = self._sock.recv(min(size - len(buffer), self.CHUNK_SIZE))
            if not chunk:
                raise TransportTruncatedError(size, len(buffer))
            buffer += chunk
        return bytes(buffer)

    def close(self) -> None:
        self._sock.close()


class LoopbackTransport(Transport):
    """
    In-memory transport that serves pre-loaded response bytes.

    Every frame passed to send_all() is recorded in `sent`.
    """

    def __init__(self, responses: bytes = b"") -> None:
        self._incoming = bytearray(responses)
        self.sent: List[bytes] = []
        self.closed = False

    def feed(self, data: bytes) -> None:
        """Queue more response bytes."""
        self._incoming += data

    def send_all(self, data: bytes) -> None:
        self.sent.append(bytes(data))

    def read_exact(self, size: int) -> bytes:
        if len(self._incoming) < size:
            received = len(self._incoming)
            self._incoming.clear()
            raise TransportTruncatedError(size, received)
        data = bytes(self._incoming[:size])
        del self._incoming[:size]
        return data

    def close(self) -> None:
        self.closed = True
