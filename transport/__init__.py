"""
Device Simulator Transport Module - Initialization
==================================================

Delivery of compressed frames to the ingestion endpoint.

Components:
-----------
1. Connection (abstract)
   - open() / send(payload, properties) / close()
   - TcpConnection, MemoryConnection
   - create_connection(target) from "tcp://host:port" or "memory://"

2. Transmitter
   - One outbound write per frame, tagged data-type = "gzip"
   - Optional <YYYYmmddHHMMSS>.gzip copy on local disk

Usage:
------
from transport import create_connection, Transmitter

connection = create_connection("tcp://127.0.0.1:9000")
await connection.open()
result = await Transmitter(connection).send(frame)
await connection.close()

Version: 1.0.0
Author: Device Simulator Team
"""

from .connection import (
    Connection,
    TcpConnection,
    MemoryConnection,
    create_connection,
    encode_message,
    read_message,
)

from .transmitter import (
    Transmitter,
    TransmitResult,
)

__all__ = [
    # Connection
    "Connection",
    "TcpConnection",
    "MemoryConnection",
    "create_connection",
    "encode_message",
    "read_message",
    # Transmitter
    "Transmitter",
    "TransmitResult",
]

__version__ = "1.0.0"
