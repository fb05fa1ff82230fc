"""
Device Simulator Pipeline - Simulation Loop
===========================================

Orchestrates the telemetry pipeline on a fixed cadence:
Generate → Batch → Encode → Compress → Transmit

State Machine:
--------------
    IDLE ──start()──> RUNNING ──stop()──> STOPPING ──(task done)──> IDLE

- start(): opens the connection; on failure the loop stays IDLE and the
  DeviceConnectionError propagates. No samples are generated.
- stop(): sets the cancellation token, awaits the tick task (which ends
  with SimulationCancelled), closes the connection.
- A pipeline error inside the task halts the run, closes the connection
  and returns the loop to IDLE; stop() then reports RunOutcome.FAILED.
  start() may also be called directly; it collects the halted run first.

Tick Cycle:
-----------
1. Check cancellation
2. SignalGenerator.next() → FrameBatcher.add()
3. Check cancellation (discards the partial buffer)
4. FrameBatcher.try_take_full(); on a full batch:
   encode → compress → Transmitter.send() (awaited, one frame in flight)
5. Delay tick_interval after the cycle ends

The delay is counted from the end of a cycle, so the effective period is
tick_interval plus the cycle's processing time.

Example:
--------
>>> from pipeline import SimulationLoop
>>> from transport import create_connection
>>> from utils import SimulatorConfig
>>>
>>> config = SimulatorConfig(batch_size=100, tick_interval_ms=100)
>>> sim = SimulationLoop(config, create_connection("tcp://127.0.0.1:9000"))
>>> await sim.start()
>>> await asyncio.sleep(30)
>>> outcome = await sim.stop()

Author: Device Simulator Team
"""

import asyncio
import json
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional
import logging

from telemetry.batcher import Batch, FrameBatcher
from telemetry.compression import FrameCompressor
from telemetry.frames import FrameEncoder
from telemetry.generator import SignalGenerator
from transport.connection import Connection
from transport.transmitter import Transmitter, TransmitResult
from utils.config import SimulatorConfig
from utils.errors import DeviceConnectionError, PipelineError, SimulationCancelled
from utils.logging import log_error

logger = logging.getLogger(__name__)


class SimulationState(Enum):
    """Lifecycle state of the simulation loop."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


class RunOutcome(Enum):
    """How a run ended."""
    CANCELLED = "cancelled"
    FAILED = "failed"


class CancellationToken:
    """
    Cooperative stop signal.

    Setting the token never interrupts in-flight work; the loop observes it
    at its check points. The inter-tick delay ends early once it is set.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise SimulationCancelled if a stop was requested."""
        if self._event.is_set():
            raise SimulationCancelled("Simulation cancelled by stop request")

    async def sleep(self, delay: float) -> None:
        """Wait for delay seconds or until cancelled, whichever comes first."""
        if delay <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass


@dataclass
class RunStatistics:
    """Counters for one run."""
    samples_generated: int = 0
    frames_sent: int = 0
    bytes_sent: int = 0
    files_stored: int = 0
    persist_failures: int = 0


class SimulationLoop:
    """
    Telemetry device simulation.

    Owns the pipeline components and the connection for the duration of a
    run. A single asyncio task drives the ticks; start()/stop() are called
    from the controlling context.
    """

    def __init__(self,
                 config: SimulatorConfig,
                 connection: Connection,
                 generator: Optional[SignalGenerator] = None,
                 transmitter: Optional[Transmitter] = None):
        """
        Initialize simulation loop.

        Args:
            config: Simulator configuration
            connection: Unopened connection to the ingestion endpoint
            generator: Signal source (default: built from config)
            transmitter: Frame sender (default: Transmitter over connection)
        """
        self.config = config
        self.connection = connection

        self.generator = generator or SignalGenerator(
            step=config.signal_step,
            initial_phases=config.initial_phases,
        )
        self.batcher = FrameBatcher(batch_size=config.batch_size)
        self.encoder = FrameEncoder()
        self.compressor = FrameCompressor(level=config.compression_level)
        self.transmitter = transmitter or Transmitter(connection)

        self.state = SimulationState.IDLE
        self.stats = RunStatistics()
        self.last_error: Optional[PipelineError] = None

        self._task: Optional[asyncio.Task] = None
        self._token: Optional[CancellationToken] = None

        logger.info(
            f"SimulationLoop initialized: batch_size={config.batch_size}, "
            f"tick={config.tick_interval_ms}ms, target={connection.target}"
        )

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """
        Open the connection and start the tick task.

        Raises:
            DeviceConnectionError: If the connection cannot be opened
            RuntimeError: If a run is already active
        """
        if self._task is not None and self._task.done():
            outcome = await self.stop()
            logger.info(f"Previous run collected: {outcome.value}")

        if self.state != SimulationState.IDLE or self._task is not None:
            raise RuntimeError(f"Cannot start simulation in state {self.state.value}")

        try:
            await self.connection.open()
        except DeviceConnectionError as e:
            log_error(e, context="Connect failed")
            raise
        logger.info("Connected.")

        self.generator.reset()
        self.batcher.discard()
        self.stats = RunStatistics()
        self.last_error = None

        self._token = CancellationToken()
        self.state = SimulationState.RUNNING
        self._task = asyncio.create_task(self._run(self._token))

    async def stop(self) -> RunOutcome:
        """
        Request cancellation, wait for the tick task and disconnect.

        Returns:
            RunOutcome.CANCELLED for a normal stop, RunOutcome.FAILED if the
            run had already halted on a pipeline error (see last_error)

        Raises:
            RuntimeError: If no run was started
        """
        if self._task is None:
            raise RuntimeError("Simulation is not running")

        self.request_stop()

        try:
            await self._task
        except SimulationCancelled as e:
            logger.info(f"{type(e).__name__} thrown with message: {e}")
            outcome = RunOutcome.CANCELLED
        except PipelineError:
            outcome = RunOutcome.FAILED
        else:
            raise RuntimeError("Tick loop returned without being cancelled")
        finally:
            self._task = None
            self._token = None
            await self._release()

        return outcome

    def request_stop(self) -> None:
        """Set the cancellation token without waiting for the task."""
        if self._token is None:
            return
        if self.state == SimulationState.RUNNING:
            self.state = SimulationState.STOPPING
        self._token.cancel()

    async def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the run to end on its own (pipeline error).

        Does not cancel the run. Call stop() afterwards to collect the outcome.

        Args:
            timeout: Seconds to wait (None: wait indefinitely)

        Returns:
            True if the tick task has finished
        """
        if self._task is None:
            return True
        done, _ = await asyncio.wait({self._task}, timeout=timeout)
        return bool(done)

    async def step(self, token: Optional[CancellationToken] = None) -> Optional[TransmitResult]:
        """
        Execute one tick.

        The connection must already be open when a batch fills up.

        Args:
            token: Cancellation token checked after the sample is added

        Returns:
            TransmitResult if a frame was sent this tick, else None

        Raises:
            SimulationCancelled: If the token is set (buffer discarded)
            PipelineError: On encode, compress or send failure
        """
        sample = self.generator.next()
        self.batcher.add(sample)
        self.stats.samples_generated += 1
        logger.debug(f"Added {json.dumps(sample.to_dict())}")

        if token is not None and token.is_cancelled:
            self.batcher.discard()
            token.raise_if_cancelled()

        batch = self.batcher.try_take_full()
        if batch is None:
            return None

        return await self.send_batch(batch)

    async def send_batch(self, batch: Batch) -> TransmitResult:
        """
        Encode, compress and transmit one full batch.

        Returns:
            TransmitResult
        """
        encoded = self.encoder.encode(batch)
        frame = self.compressor.compress(encoded)

        result = await self.transmitter.send(
            frame,
            persist=self.config.persist_enabled,
            persist_dir=self.config.persist_directory,
        )

        self.stats.frames_sent += 1
        self.stats.bytes_sent += result.bytes_sent
        if result.stored_path is not None:
            self.stats.files_stored += 1
        if result.persist_error is not None:
            self.stats.persist_failures += 1

        return result

    def get_statistics(self) -> Dict:
        """
        Get run statistics.

        Returns:
            Dictionary of counters plus state and pending samples
        """
        stats = asdict(self.stats)
        stats["state"] = self.state.value
        stats["pending_samples"] = self.batcher.pending
        stats["last_error"] = str(self.last_error) if self.last_error else None
        return stats

    async def _run(self, token: CancellationToken) -> None:
        """Tick loop; only ever exits by raising."""
        try:
            while True:
                token.raise_if_cancelled()
                await self.step(token)
                await token.sleep(self.config.tick_interval)
        except SimulationCancelled:
            self.batcher.discard()
            raise
        except PipelineError as e:
            self.last_error = e
            self.batcher.discard()
            log_error(e, context="Simulation halted")
            await self._release()
            raise

    async def _release(self) -> None:
        """Close the connection (once) and return to IDLE."""
        if self.connection.is_open:
            try:
                await self.connection.close()
            except DeviceConnectionError as e:
                log_error(e, context="Disconnect failed")
            else:
                logger.info("Disconnected")
        self.state = SimulationState.IDLE
