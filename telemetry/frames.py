"""
Device Simulator Telemetry - Binary Frame Encoding
==================================================

Serializes a batch of samples into the compact frame layout and back.

Frame Layout:
-------------
N records, no header, no padding, little-endian:

    offset  size  field
    0       8     timestamp ticks (int64)
    8       4     x (float32)
    12      4     y (float32)
    16      4     z (float32)

Record size: 20 bytes. Frame size: N × 20 bytes.

Timestamp Ticks:
----------------
100-nanosecond intervals since 0001-01-01T00:00:00 UTC. Python datetimes
carry microseconds, so ticks written by this module are always multiples
of 10 and decode back to the identical datetime. Naive datetimes are taken
as UTC.

Ticks are always UTC-based. Consumers that expect ticks of the device's
local wall clock (DateTime.Now.Ticks) must apply the local UTC offset
themselves.

Example:
--------
>>> from telemetry import FrameEncoder
>>>
>>> encoder = FrameEncoder()
>>> frame = encoder.encode(batch)
>>> len(frame) == len(batch) * 20
True
>>> samples = encoder.decode(frame)

Author: Device Simulator Team
"""

import numpy as np
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional
import logging

from utils.errors import FrameFormatError

from .generator import Sample
from .compression import decompress

logger = logging.getLogger(__name__)


FRAME_DTYPE = np.dtype([
    ("ticks", "<i8"),
    ("x", "<f4"),
    ("y", "<f4"),
    ("z", "<f4"),
])
RECORD_SIZE = FRAME_DTYPE.itemsize  # 20

TICKS_PER_SECOND = 10_000_000
TICKS_PER_MICROSECOND = 10
TICK_EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)


def to_ticks(timestamp: datetime) -> int:
    """
    Convert a datetime to 100 ns ticks since 0001-01-01 UTC.

    Args:
        timestamp: Aware or naive (UTC) datetime

    Returns:
        Tick count
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    delta = timestamp - TICK_EPOCH
    return ((delta.days * 86400 + delta.seconds) * TICKS_PER_SECOND
            + delta.microseconds * TICKS_PER_MICROSECOND)


def from_ticks(ticks: int) -> datetime:
    """
    Convert ticks back to an aware UTC datetime.

    Sub-microsecond remainders (ticks not divisible by 10) are truncated.
    """
    return TICK_EPOCH + timedelta(microseconds=ticks // TICKS_PER_MICROSECOND)


class FrameEncoder:
    """
    Batch <-> frame bytes codec.

    Encoding is deterministic: the same batch always yields the same bytes.
    x/y/z are narrowed from float64 to float32 (round to nearest).
    """

    dtype = FRAME_DTYPE
    record_size = RECORD_SIZE

    def frame_size(self, n_samples: int) -> int:
        """Expected encoded length for n_samples."""
        return n_samples * self.record_size

    def encode(self, batch: List[Sample]) -> bytes:
        """
        Encode a batch into frame bytes.

        Args:
            batch: Samples in tick order

        Returns:
            Encoded frame (len(batch) × 20 bytes)

        Raises:
            FrameFormatError: If a sample cannot be represented in the layout
        """
        records = np.empty(len(batch), dtype=self.dtype)
        try:
            records["ticks"] = [to_ticks(s.timestamp) for s in batch]
            records["x"] = [s.x for s in batch]
            records["y"] = [s.y for s in batch]
            records["z"] = [s.z for s in batch]
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            raise FrameFormatError(f"Cannot encode batch: {e}") from e

        return records.tobytes()

    def decode(self,
               frame: bytes,
               expected_samples: Optional[int] = None) -> List[Sample]:
        """
        Decode frame bytes back into samples.

        Args:
            frame: Encoded frame
            expected_samples: Optional sample count to enforce

        Returns:
            Samples in frame order

        Raises:
            FrameFormatError: If the length does not match the layout
        """
        if len(frame) % self.record_size:
            raise FrameFormatError(
                f"Frame length {len(frame)} is not a multiple of {self.record_size}"
            )

        records = np.frombuffer(frame, dtype=self.dtype)
        if expected_samples is not None and len(records) != expected_samples:
            raise FrameFormatError(
                f"Expected {expected_samples} samples, frame holds {len(records)}"
            )

        try:
            return [
                Sample(
                    timestamp=from_ticks(int(r["ticks"])),
                    x=float(r["x"]),
                    y=float(r["y"]),
                    z=float(r["z"]),
                )
                for r in records
            ]
        except (OverflowError, ValueError) as e:
            raise FrameFormatError(f"Invalid timestamp in frame: {e}") from e


def read_frame_file(path: str) -> List[Sample]:
    """
    Load a persisted frame file back into samples.

    Args:
        path: Path to a <YYYYmmddHHMMSS>.gzip file

    Returns:
        Decoded samples
    """
    path = Path(path)
    payload = path.read_bytes()
    samples = FrameEncoder().decode(decompress(payload))

    logger.info(f"Read {len(samples)} samples from {path}")
    return samples
