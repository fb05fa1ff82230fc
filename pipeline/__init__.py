"""
Device Simulator Pipeline Module - Initialization
=================================================

Orchestration of the simulated telemetry device.

Components:
-----------
1. SimulationLoop
   - IDLE → RUNNING → STOPPING → IDLE
   - One asyncio task drives the ticks
   - Back-pressure: a full batch is sent before the next tick

2. CancellationToken
   - Cooperative stop signal checked between ticks and after each sample

3. CLI (device-simulator)
   - run / inspect commands

Usage:
------
from pipeline import SimulationLoop, RunOutcome
from transport import create_connection
from utils import SimulatorConfig

sim = SimulationLoop(SimulatorConfig(), create_connection("memory://"))
await sim.start()
...
outcome = await sim.stop()
assert outcome == RunOutcome.CANCELLED

Version: 1.0.0
Author: Device Simulator Team
"""

from .simulation import (
    SimulationLoop,
    SimulationState,
    RunOutcome,
    RunStatistics,
    CancellationToken,
)

__all__ = [
    "SimulationLoop",
    "SimulationState",
    "RunOutcome",
    "RunStatistics",
    "CancellationToken",
]

__version__ = "1.0.0"
