"""
Device Simulator Utils - Error Taxonomy
=======================================

Failure types raised by the telemetry pipeline.

Hierarchy:
----------
PipelineError
 ├── DeviceConnectionError  - open/send/close failure on the connection
 ├── CompressionError       - gzip failure, aborts the current cycle
 ├── PersistenceError       - local frame write failure (contained)
 └── FrameFormatError       - malformed encoded frame on decode

SimulationCancelled is the expected stop path and deliberately sits
outside PipelineError so callers never report it as a crash.

Author: Device Simulator Team
"""


class PipelineError(Exception):
    """Base class for telemetry pipeline failures."""
    pass


class DeviceConnectionError(PipelineError):
    """Connection could not be opened, written to or closed."""
    pass


class CompressionError(PipelineError):
    """Frame compression failed."""
    pass


class PersistenceError(PipelineError):
    """Compressed frame could not be written to local storage."""
    pass


class FrameFormatError(PipelineError):
    """Encoded frame does not match the sample layout."""
    pass


class SimulationCancelled(Exception):
    """Raised by the tick loop when a stop request is observed."""
    pass
