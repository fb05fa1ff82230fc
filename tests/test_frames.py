"""
Device Simulator Tests - Frame Encoding & Compression
=====================================================

Unit tests for the binary frame layout and gzip stage:
- Bit-exact little-endian layout (int64 ticks + 3 × float32)
- Tick conversion against known reference values
- Decode round-trip (exact timestamps, float32 axes)
- Deterministic encoding and compression
- Independently decompressible gzip output
- Error mapping (FrameFormatError, CompressionError)

Author: Device Simulator Team
"""

import gzip
import struct
import tempfile
import unittest
import zlib
from datetime import datetime, timedelta, timezone
from pathlib import Path
import logging

import numpy as np

from telemetry.compression import CompressedFrame, FrameCompressor, decompress
from telemetry.frames import (
    FrameEncoder,
    RECORD_SIZE,
    from_ticks,
    read_frame_file,
    to_ticks,
)
from telemetry.generator import Sample
from tests.helpers import START_TIME, make_samples
from utils.errors import CompressionError, FrameFormatError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class TestTicks(unittest.TestCase):
    """Test timestamp tick conversion."""

    def test_epoch_is_zero(self):
        self.assertEqual(to_ticks(datetime(1, 1, 1, tzinfo=timezone.utc)), 0)

    def test_unix_epoch(self):
        """1970-01-01 UTC is 621355968000000000 ticks."""
        unix_epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(to_ticks(unix_epoch), 621355968000000000)

    def test_microsecond_resolution(self):
        """One microsecond is ten ticks."""
        a = datetime(2026, 10, 19, 12, 0, 0, 0, tzinfo=timezone.utc)
        b = datetime(2026, 10, 19, 12, 0, 0, 1, tzinfo=timezone.utc)
        self.assertEqual(to_ticks(b) - to_ticks(a), 10)

    def test_naive_is_utc(self):
        naive = datetime(2026, 10, 19, 12, 0, 0)
        self.assertEqual(to_ticks(naive), to_ticks(naive.replace(tzinfo=timezone.utc)))

    def test_offset_aware_is_utc_based(self):
        """Ticks do not depend on the wall-clock offset of the timestamp."""
        local = datetime(2026, 10, 19, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        utc = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
        self.assertEqual(to_ticks(local), to_ticks(utc))
        self.assertEqual(from_ticks(to_ticks(local)).utcoffset(), timedelta(0))

    def test_round_trip(self):
        ts = datetime(2026, 10, 19, 12, 30, 45, 123456, tzinfo=timezone.utc)
        self.assertEqual(from_ticks(to_ticks(ts)), ts)


class TestFrameEncoder(unittest.TestCase):
    """Test frame layout and decoding."""

    def setUp(self):
        """Set up test fixtures."""
        self.encoder = FrameEncoder()
        self.batch = make_samples(100)

    def test_record_size(self):
        self.assertEqual(RECORD_SIZE, 20)

    def test_frame_length(self):
        """Frame is exactly N × 20 bytes."""
        frame = self.encoder.encode(self.batch)
        self.assertEqual(len(frame), 100 * 20)
        self.assertEqual(self.encoder.frame_size(100), 2000)

    def test_empty_batch(self):
        self.assertEqual(self.encoder.encode([]), b"")

    def test_bit_exact_layout(self):
        """Each record matches struct '<qfff' packing, in sample order."""
        frame = self.encoder.encode(self.batch)
        expected = b"".join(
            struct.pack("<qfff", to_ticks(s.timestamp), s.x, s.y, s.z)
            for s in self.batch
        )
        self.assertEqual(frame, expected)

    def test_field_offsets(self):
        """Ticks at offset 0, x/y/z at 8/12/16 of each record."""
        frame = self.encoder.encode(self.batch[:2])

        ticks = struct.unpack_from("<q", frame, 20)[0]
        x, y, z = struct.unpack_from("<fff", frame, 28)

        self.assertEqual(ticks, to_ticks(self.batch[1].timestamp))
        self.assertAlmostEqual(x, self.batch[1].x, places=6)
        self.assertAlmostEqual(y, self.batch[1].y, places=6)
        self.assertAlmostEqual(z, self.batch[1].z, places=6)

    def test_decode_round_trip(self):
        """Timestamps exact, axes equal to their float32 narrowing."""
        decoded = self.encoder.decode(self.encoder.encode(self.batch))

        self.assertEqual(len(decoded), len(self.batch))
        for original, restored in zip(self.batch, decoded):
            self.assertEqual(restored.timestamp, original.timestamp)
            self.assertEqual(restored.x, float(np.float32(original.x)))
            self.assertEqual(restored.y, float(np.float32(original.y)))
            self.assertEqual(restored.z, float(np.float32(original.z)))

    def test_encoding_idempotent(self):
        """Encoding the same batch twice yields identical bytes."""
        self.assertEqual(self.encoder.encode(self.batch), self.encoder.encode(self.batch))

    def test_decode_bad_length(self):
        frame = self.encoder.encode(self.batch)
        with self.assertRaises(FrameFormatError):
            self.encoder.decode(frame[:-3])

    def test_decode_expected_count(self):
        frame = self.encoder.encode(self.batch)
        self.assertEqual(len(self.encoder.decode(frame, expected_samples=100)), 100)
        with self.assertRaises(FrameFormatError):
            self.encoder.decode(frame, expected_samples=99)

    def test_encode_bad_sample(self):
        """Samples without a datetime are rejected as FrameFormatError."""
        bad = [Sample(timestamp="not a time", x=0.0, y=0.0, z=0.0)]
        with self.assertRaises(FrameFormatError):
            self.encoder.encode(bad)


class TestFrameCompressor(unittest.TestCase):
    """Test gzip compression of encoded frames."""

    def setUp(self):
        """Set up test fixtures."""
        self.compressor = FrameCompressor()
        self.encoded = FrameEncoder().encode(make_samples(100))

    def test_round_trip(self):
        """Decompression yields the identical encoded frame."""
        frame = self.compressor.compress(self.encoded)
        self.assertEqual(decompress(frame.payload), self.encoded)

    def test_complete_gzip_member(self):
        """Output is a finished gzip stream readable by other decoders."""
        frame = self.compressor.compress(self.encoded)

        self.assertEqual(frame.payload[:2], b"\x1f\x8b")
        self.assertEqual(gzip.decompress(frame.payload), self.encoded)
        self.assertEqual(zlib.decompress(frame.payload, 16 + zlib.MAX_WBITS), self.encoded)

    def test_data_type_tag(self):
        frame = self.compressor.compress(self.encoded)
        self.assertEqual(frame.data_type, "gzip")
        self.assertEqual(frame.properties, {"data-type": "gzip"})

    def test_deterministic(self):
        a = self.compressor.compress(self.encoded)
        b = self.compressor.compress(self.encoded)
        self.assertEqual(a.payload, b.payload)

    def test_compresses(self):
        """The triangular signal compresses below its raw size."""
        frame = self.compressor.compress(self.encoded)
        self.assertLess(len(frame), len(self.encoded))

    def test_levels(self):
        for level in (0, 1, 9):
            frame = FrameCompressor(level=level).compress(self.encoded)
            self.assertEqual(decompress(frame.payload), self.encoded)

        with self.assertRaises(ValueError):
            FrameCompressor(level=10)

    def test_compress_failure(self):
        """Invalid input surfaces as CompressionError."""
        with self.assertRaises(CompressionError):
            self.compressor.compress("not bytes")

    def test_decompress_garbage(self):
        with self.assertRaises(CompressionError):
            decompress(b"definitely not gzip")

    def test_decompress_truncated(self):
        frame = self.compressor.compress(self.encoded)
        with self.assertRaises(CompressionError):
            decompress(frame.payload[:-8])


class TestFrameFile(unittest.TestCase):
    """Test reading persisted frames."""

    def test_read_frame_file(self):
        samples = make_samples(100)
        frame = FrameCompressor().compress(FrameEncoder().encode(samples))

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "20261019120000.gzip"
            path.write_bytes(frame.payload)

            restored = read_frame_file(str(path))

        self.assertEqual(len(restored), 100)
        self.assertEqual(restored[0].timestamp, START_TIME)
        self.assertEqual([s.timestamp for s in restored], [s.timestamp for s in samples])

    def test_compressed_frame_len(self):
        frame = CompressedFrame(payload=b"abc")
        self.assertEqual(len(frame), 3)


if __name__ == "__main__":
    unittest.main()
