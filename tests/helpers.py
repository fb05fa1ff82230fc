"""
Shared fixtures for the device simulator tests.

Author: Device Simulator Team
"""

from datetime import datetime, timedelta, timezone
from typing import List

from telemetry.generator import Sample, SignalGenerator


START_TIME = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class StepClock:
    """Deterministic clock advancing a fixed interval per call."""

    def __init__(self,
                 start: datetime = START_TIME,
                 step: timedelta = timedelta(milliseconds=100)):
        self.current = start - step
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


def make_generator(**kwargs) -> SignalGenerator:
    """SignalGenerator with a deterministic clock."""
    kwargs.setdefault("clock", StepClock())
    return SignalGenerator(**kwargs)


def make_samples(n: int) -> List[Sample]:
    """n deterministic samples from the default oscillator phases."""
    generator = make_generator()
    return [generator.next() for _ in range(n)]
