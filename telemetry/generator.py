"""
Device Simulator Telemetry - Synthetic Accelerometer Signal
===========================================================

Generates one 3-axis accelerometer sample per tick from a bounded
triangular oscillation model.

Oscillator Model:
-----------------
Per axis, on every tick:

    value(k+1) = clip(value(k) + da × direction(k), -1, 1)

    direction(k+1) = -1   if direction(k) > 0 and value(k+1) >= 1
                     +1   if direction(k) < 0 and value(k+1) <= -1
                     direction(k) otherwise

The clip keeps the bound exact when floating point accumulation would
otherwise overshoot by one step.

Initial Phases:
---------------
- x: -1.0, rising
- y: +1.0, falling
- z:  0.0, rising
- da: 0.01 per tick (200 ticks per half period)

Example:
--------
>>> from telemetry import SignalGenerator
>>>
>>> gen = SignalGenerator()
>>> s = gen.next()
>>> round(s.x, 2), round(s.y, 2), round(s.z, 2)
(-0.99, 0.99, 0.01)

Author: Device Simulator Team
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


DEFAULT_STEP = 0.01
DEFAULT_PHASES: Dict[str, Tuple[float, float]] = {
    "x": (-1.0, 1.0),
    "y": (1.0, -1.0),
    "z": (0.0, 1.0),
}


def utc_now() -> datetime:
    """Wall-clock timestamp used for generated samples."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Sample:
    """Single accelerometer reading."""
    timestamp: datetime
    x: float
    y: float
    z: float

    def to_dict(self) -> Dict:
        """JSON-friendly representation (used for per-sample logging)."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "accelx": self.x,
            "accely": self.y,
            "accelz": self.z,
        }


@dataclass
class OscillatorState:
    """Value and travel direction of one axis."""
    value: float
    direction: float

    def advance(self, step: float) -> float:
        """
        Move one step and apply the bounce rule.

        Args:
            step: Step magnitude (da)

        Returns:
            New value
        """
        self.value = min(1.0, max(-1.0, self.value + step * self.direction))

        if self.direction > 0 and self.value >= 1.0:
            self.direction = -1.0
        elif self.direction < 0 and self.value <= -1.0:
            self.direction = 1.0

        return self.value


class SignalGenerator:
    """
    Synthetic 3-axis accelerometer.

    Each axis is an independent OscillatorState; the axes start at
    different phases so they are never synchronized.

    Example:
    --------
    >>> gen = SignalGenerator(step=0.01)
    >>> samples = [gen.next() for _ in range(500)]
    >>> all(-1.0 <= s.x <= 1.0 for s in samples)
    True
    """

    def __init__(self,
                 step: float = DEFAULT_STEP,
                 initial_phases: Optional[Dict[str, Tuple[float, float]]] = None,
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize signal generator.

        Args:
            step: Step magnitude per tick (da)
            initial_phases: {axis: (value, direction)} for x, y, z
            clock: Timestamp source
        """
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")

        self.step = step
        self.initial_phases = dict(DEFAULT_PHASES)
        if initial_phases:
            self.initial_phases.update(initial_phases)
        self.clock = clock

        self.axes: Dict[str, OscillatorState] = {}
        self.tick_count = 0
        self.reset()

    def next(self) -> Sample:
        """
        Produce the sample for one tick.

        Returns:
            Sample stamped with the current clock time
        """
        x = self.axes["x"].advance(self.step)
        y = self.axes["y"].advance(self.step)
        z = self.axes["z"].advance(self.step)
        self.tick_count += 1

        return Sample(timestamp=self.clock(), x=x, y=y, z=z)

    def reset(self) -> None:
        """Restore the initial phases."""
        for axis, (value, direction) in self.initial_phases.items():
            if not -1.0 <= value <= 1.0:
                raise ValueError(f"Initial {axis} value {value} outside [-1, 1]")
            self.axes[axis] = OscillatorState(value=float(value),
                                              direction=float(direction))
        self.tick_count = 0
