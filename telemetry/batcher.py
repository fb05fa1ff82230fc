"""
Device Simulator Telemetry - Frame Batching
===========================================

Accumulates samples and releases fixed-size batches.

Batching Policy:
----------------
- Samples are appended in tick order
- A batch is released only when N samples are buffered
- The released batch owns its samples; the batcher starts a new buffer
- Partial batches are never released; discard() drops them

Author: Device Simulator Team
"""

from typing import List, Optional
import logging

from .generator import Sample

logger = logging.getLogger(__name__)


Batch = List[Sample]


class FrameBatcher:
    """
    Fixed-size sample batcher.

    Example:
    --------
    >>> batcher = FrameBatcher(batch_size=100)
    >>> for _ in range(250):
    ...     batcher.add(gen.next())
    ...     batch = batcher.try_take_full()
    >>> batcher.pending
    50
    """

    def __init__(self, batch_size: int = 100):
        """
        Initialize batcher.

        Args:
            batch_size: Number of samples per batch (N)
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.batch_size = batch_size
        self._buffer: Batch = []
        self.batches_released = 0

    @property
    def pending(self) -> int:
        """Number of buffered samples not yet released."""
        return len(self._buffer)

    def add(self, sample: Sample) -> None:
        """Append a sample to the buffer."""
        self._buffer.append(sample)

    def try_take_full(self) -> Optional[Batch]:
        """
        Release a full batch if one is ready.

        Returns:
            Batch of exactly batch_size samples, or None
        """
        if len(self._buffer) < self.batch_size:
            return None

        batch = self._buffer[:self.batch_size]
        self._buffer = self._buffer[self.batch_size:]
        self.batches_released += 1

        return batch

    def discard(self) -> int:
        """
        Drop buffered samples without releasing them.

        Returns:
            Number of samples dropped
        """
        dropped = len(self._buffer)
        self._buffer = []
        if dropped:
            logger.debug(f"Discarded {dropped} buffered samples")
        return dropped
