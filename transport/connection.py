"""
Device Simulator Transport - Connection Abstraction
===================================================

Persistent connection to the telemetry ingestion endpoint.

The pipeline only depends on the Connection interface:

    await connection.open()
    await connection.send(payload, {"data-type": "gzip"})
    await connection.close()

Implementations:
----------------
1. TcpConnection    - tcp://host:port, length-prefixed messages
2. MemoryConnection - memory://, keeps messages in process (dry runs, tests)

TCP Message Layout:
-------------------
    uint32 LE   properties length (P)
    P bytes     UTF-8 JSON object of message properties
    uint32 LE   payload length (L)
    L bytes     payload

All failures surface as DeviceConnectionError.

Author: Device Simulator Team
"""

import asyncio
import json
import struct
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit
import logging

from utils.config import ConfigError
from utils.errors import DeviceConnectionError

logger = logging.getLogger(__name__)


LENGTH_PREFIX = struct.Struct("<I")


class Connection(ABC):
    """Base class for ingestion endpoint connections."""

    def __init__(self, target: str):
        """
        Initialize connection.

        Args:
            target: Connection target string (for logging)
        """
        self.target = target
        self._open = False

    @property
    def is_open(self) -> bool:
        """True between a successful open() and close()."""
        return self._open

    @abstractmethod
    async def open(self) -> None:
        """
        Open the transport session.

        Raises:
            DeviceConnectionError: If the endpoint cannot be reached
        """
        pass

    @abstractmethod
    async def send(self, payload: bytes, properties: Dict[str, str]) -> None:
        """
        Send one message.

        Args:
            payload: Message body
            properties: Message metadata

        Raises:
            DeviceConnectionError: If the write fails or the session is closed
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the transport session."""
        pass

    def _require_open(self) -> None:
        if not self._open:
            raise DeviceConnectionError(f"Connection to {self.target} is not open")


def encode_message(payload: bytes, properties: Dict[str, str]) -> bytes:
    """Frame one message for the TCP stream."""
    header = json.dumps(properties, separators=(",", ":")).encode("utf-8")
    return (LENGTH_PREFIX.pack(len(header)) + header
            + LENGTH_PREFIX.pack(len(payload)) + payload)


async def read_message(reader: asyncio.StreamReader) -> Tuple[Dict[str, str], bytes]:
    """
    Read one message written by TcpConnection.

    Args:
        reader: Stream positioned at a message boundary

    Returns:
        Tuple of (properties, payload)
    """
    (header_len,) = LENGTH_PREFIX.unpack(await reader.readexactly(LENGTH_PREFIX.size))
    properties = json.loads((await reader.readexactly(header_len)).decode("utf-8"))
    (payload_len,) = LENGTH_PREFIX.unpack(await reader.readexactly(LENGTH_PREFIX.size))
    payload = await reader.readexactly(payload_len)
    return properties, payload


class TcpConnection(Connection):
    """
    Length-prefixed message stream over TCP.

    Example:
    --------
    >>> conn = TcpConnection("127.0.0.1", 9000)
    >>> await conn.open()
    >>> await conn.send(frame.payload, frame.properties)
    >>> await conn.close()
    """

    def __init__(self,
                 host: str,
                 port: int,
                 connect_timeout: float = 10.0):
        """
        Initialize TCP connection.

        Args:
            host: Endpoint host
            port: Endpoint port
            connect_timeout: Seconds to wait for the TCP handshake
        """
        super().__init__(f"tcp://{host}:{port}")
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    async def open(self) -> None:
        """Connect to the endpoint."""
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.connect_timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise DeviceConnectionError(f"Cannot connect to {self.target}: {e}") from e

        self._open = True
        logger.debug(f"Opened {self.target}")

    async def send(self, payload: bytes, properties: Dict[str, str]) -> None:
        """Write one message and wait for the transport buffer to drain."""
        self._require_open()
        try:
            self._writer.write(encode_message(payload, properties))
            await self._writer.drain()
        except OSError as e:
            raise DeviceConnectionError(f"Send to {self.target} failed: {e}") from e

    async def close(self) -> None:
        """Close the socket."""
        if self._writer is None:
            self._open = False
            return

        writer = self._writer
        self._writer = None
        self._reader = None
        self._open = False
        try:
            writer.close()
            await writer.wait_closed()
        except OSError as e:
            raise DeviceConnectionError(f"Close of {self.target} failed: {e}") from e

        logger.debug(f"Closed {self.target}")


class MemoryConnection(Connection):
    """
    In-process connection that records every message.

    Used for dry runs (memory:// target) and tests.
    """

    def __init__(self, target: str = "memory://"):
        super().__init__(target)
        self.messages: List[Tuple[bytes, Dict[str, str]]] = []
        self.open_count = 0
        self.close_count = 0

    async def open(self) -> None:
        self._open = True
        self.open_count += 1

    async def send(self, payload: bytes, properties: Dict[str, str]) -> None:
        self._require_open()
        self.messages.append((bytes(payload), dict(properties)))

    async def close(self) -> None:
        self._open = False
        self.close_count += 1


def create_connection(target: str) -> Connection:
    """
    Create a connection from a target string.

    Args:
        target: "tcp://host:port" or "memory://"

    Returns:
        Unopened Connection

    Raises:
        ConfigError: If the target is malformed or its scheme unknown
    """
    parts = urlsplit(target)

    if parts.scheme == "memory":
        return MemoryConnection(target)

    if parts.scheme == "tcp":
        try:
            port = parts.port
        except ValueError as e:
            raise ConfigError(f"Invalid port in connection target {target!r}") from e
        if not parts.hostname or port is None:
            raise ConfigError(f"Connection target must be tcp://host:port, got {target!r}")
        return TcpConnection(parts.hostname, port)

    raise ConfigError(f"Unsupported connection target: {target!r}")
