"""
Device Simulator Transport - Frame Transmitter
==============================================

Sends compressed frames over the open connection and optionally keeps a
local copy of each frame.

Failure Semantics:
------------------
- Connection failure on send  → DeviceConnectionError (propagates)
- Local write failure         → logged, reported in TransmitResult
                                (the frame was already sent)

Persisted Files:
----------------
<persist_dir>/<YYYYmmddHHMMSS>.gzip, local time, raw compressed bytes
identical to what was transmitted. Two frames stored within the same
second share a name; the later one overwrites the earlier.

Author: Device Simulator Team
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import logging

from telemetry.compression import CompressedFrame
from utils.errors import DeviceConnectionError, PersistenceError

from .connection import Connection

logger = logging.getLogger(__name__)


FILENAME_FORMAT = "%Y%m%d%H%M%S"
FILE_SUFFIX = ".gzip"


@dataclass
class TransmitResult:
    """Outcome of one frame transmission."""
    bytes_sent: int
    stored_path: Optional[Path] = None
    persist_error: Optional[str] = None


class Transmitter:
    """
    Frame sender with optional local persistence.

    Example:
    --------
    >>> transmitter = Transmitter(connection)
    >>> result = await transmitter.send(frame, persist=True, persist_dir="frames/")
    >>> result.stored_path
    PosixPath('frames/20261019123045.gzip')
    """

    def __init__(self,
                 connection: Connection,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize transmitter.

        Args:
            connection: Opened connection
            clock: Local-time source for persisted file names
        """
        self.connection = connection
        self.clock = clock

    async def send(self,
                   frame: CompressedFrame,
                   persist: bool = False,
                   persist_dir: Optional[str] = None) -> TransmitResult:
        """
        Send a frame, then store it if requested.

        Args:
            frame: Compressed frame
            persist: Also write the frame to persist_dir
            persist_dir: Target directory for stored frames

        Returns:
            TransmitResult

        Raises:
            DeviceConnectionError: If the connection write fails
        """
        try:
            await self.connection.send(frame.payload, frame.properties)
        except DeviceConnectionError:
            raise
        except OSError as e:
            raise DeviceConnectionError(f"Send failed: {e}") from e

        logger.info(f"Send - {len(frame)} bytes")
        result = TransmitResult(bytes_sent=len(frame))

        if persist:
            try:
                result.stored_path = self.persist(frame, persist_dir)
            except PersistenceError as e:
                logger.error(f"Store failed: {e}")
                result.persist_error = str(e)

        return result

    def frame_path(self, persist_dir: str) -> Path:
        """File name for a frame stored now."""
        return Path(persist_dir) / f"{self.clock().strftime(FILENAME_FORMAT)}{FILE_SUFFIX}"

    def persist(self,
                frame: CompressedFrame,
                persist_dir: Optional[str]) -> Path:
        """
        Write the frame bytes to a timestamp-named file.

        Raises:
            PersistenceError: If no directory is set or the write fails
        """
        if not persist_dir:
            raise PersistenceError("No persist directory configured")

        path = self.frame_path(persist_dir)
        try:
            with open(path, "wb") as f:
                f.write(frame.payload)
        except OSError as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e

        logger.info(f"Stored - {path}")
        return path
