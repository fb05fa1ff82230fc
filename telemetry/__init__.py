"""
Device Simulator Telemetry Module - Initialization
==================================================

Synthetic accelerometer signal and frame preparation.

Components:
-----------
1. SignalGenerator
   - One 3-axis sample per tick
   - Triangular oscillation bounded in [-1, 1]
   - Axes started at different phases

2. FrameBatcher
   - Accumulates samples in tick order
   - Releases exactly N samples at a time
   - Never releases a partial batch

3. FrameEncoder
   - int64 ticks + 3 × float32 per sample, little-endian
   - N × 20 bytes, no header
   - Exact inverse via decode()

4. FrameCompressor
   - Complete gzip member per frame
   - Tagged data-type = "gzip"

Telemetry Pipeline:
-------------------
SignalGenerator.next()
    ↓
FrameBatcher.add() / try_take_full()
    ↓  (on full)
FrameEncoder.encode()
    ↓
FrameCompressor.compress()
    ↓
CompressedFrame → Transmitter

Usage:
------
from telemetry import SignalGenerator, FrameBatcher, FrameEncoder, FrameCompressor

gen = SignalGenerator()
batcher = FrameBatcher(batch_size=100)
for _ in range(100):
    batcher.add(gen.next())
frame = FrameCompressor().compress(FrameEncoder().encode(batcher.try_take_full()))

Version: 1.0.0
Author: Device Simulator Team
"""

from .generator import (
    SignalGenerator,
    OscillatorState,
    Sample,
    utc_now,
)

from .batcher import (
    FrameBatcher,
    Batch,
)

from .compression import (
    FrameCompressor,
    CompressedFrame,
    decompress,
    DATA_TYPE,
)

from .frames import (
    FrameEncoder,
    FRAME_DTYPE,
    RECORD_SIZE,
    to_ticks,
    from_ticks,
    read_frame_file,
)

__all__ = [
    # Generator
    "SignalGenerator",
    "OscillatorState",
    "Sample",
    "utc_now",
    # Batcher
    "FrameBatcher",
    "Batch",
    # Compression
    "FrameCompressor",
    "CompressedFrame",
    "decompress",
    "DATA_TYPE",
    # Frames
    "FrameEncoder",
    "FRAME_DTYPE",
    "RECORD_SIZE",
    "to_ticks",
    "from_ticks",
    "read_frame_file",
]

__version__ = "1.0.0"
