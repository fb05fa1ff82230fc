"""
Device Simulator Telemetry - Frame Compression
==============================================

gzip compression of encoded frames.

Every compressed frame is a complete gzip member (header, deflate stream,
CRC32 and size trailer), so it can be decompressed on its own by any gzip
reader. The header mtime is pinned to 0: identical frames compress to
identical bytes.

Author: Device Simulator Team
"""

import gzip
import io
import zlib
from dataclasses import dataclass
from typing import Dict
import logging

from utils.errors import CompressionError

logger = logging.getLogger(__name__)


DATA_TYPE = "gzip"
DATA_TYPE_PROPERTY = "data-type"


@dataclass(frozen=True)
class CompressedFrame:
    """Compressed frame bytes plus their algorithm tag."""
    payload: bytes
    data_type: str = DATA_TYPE

    @property
    def properties(self) -> Dict[str, str]:
        """Message metadata sent alongside the payload."""
        return {DATA_TYPE_PROPERTY: self.data_type}

    def __len__(self) -> int:
        return len(self.payload)


class FrameCompressor:
    """
    gzip frame compressor.

    Example:
    --------
    >>> compressor = FrameCompressor(level=6)
    >>> frame = compressor.compress(encoded)
    >>> decompress(frame.payload) == encoded
    True
    """

    def __init__(self, level: int = 6):
        """
        Initialize compressor.

        Args:
            level: zlib compression level (0-9)
        """
        if not 0 <= level <= 9:
            raise ValueError(f"Compression level must be in 0-9, got {level}")
        self.level = level

    def compress(self, data: bytes) -> CompressedFrame:
        """
        Compress an encoded frame.

        The gzip stream is closed (flushed and trailer written) before the
        bytes are returned.

        Args:
            data: Encoded frame bytes

        Returns:
            CompressedFrame

        Raises:
            CompressionError: On any failure while compressing
        """
        buffer = io.BytesIO()
        try:
            with gzip.GzipFile(fileobj=buffer, mode="wb",
                               compresslevel=self.level, mtime=0) as stream:
                stream.write(data)
        except (OSError, ValueError, TypeError, zlib.error, MemoryError) as e:
            raise CompressionError(f"Failed to compress frame: {e}") from e

        return CompressedFrame(payload=buffer.getvalue())


def decompress(payload: bytes) -> bytes:
    """
    Decompress a gzip frame payload.

    Raises:
        CompressionError: If the payload is not a complete gzip stream
    """
    try:
        return gzip.decompress(payload)
    except (OSError, EOFError, zlib.error) as e:
        raise CompressionError(f"Failed to decompress frame: {e}") from e
