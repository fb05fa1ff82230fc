"""
Device Simulator Tests Module - Initialization
==============================================

Unit and integration tests for the telemetry device simulator.

Test Organization:
------------------
1. test_generator.py   - Oscillator bounce rule and sample stream
2. test_batcher.py     - Fixed-size batch release and discard
3. test_frames.py      - Binary frame layout, ticks and gzip compression
4. test_transport.py   - Connections, TCP framing, transmit and persistence
5. test_simulation.py  - Loop lifecycle, cancellation and failure handling
6. test_config.py      - YAML loading, defaults and validation
7. test_cli.py         - device-simulator run / inspect commands

Test Categories:
----------------
Unit Tests:
- Individual component functionality
- Edge cases and boundary conditions
- Error handling

Integration Tests:
- Full tick -> frame -> send -> store path
- Local TCP endpoint delivery
- Start / stop / restart cycles

Example Test Run:
-----------------
>>> import unittest
>>> from tests import test_generator, test_simulation
>>>
>>> loader = unittest.TestLoader()
>>> suite = unittest.TestSuite()
>>> suite.addTests(loader.loadTestsFromModule(test_generator))
>>> suite.addTests(loader.loadTestsFromModule(test_simulation))
>>>
>>> runner = unittest.TextTestRunner(verbosity=2)
>>> result = runner.run(suite)

Version: 1.0.0
Author: Device Simulator Team
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import test modules
from . import test_generator
from . import test_batcher
from . import test_frames
from . import test_transport
from . import test_simulation
from . import test_config
from . import test_cli

__all__ = [
    "test_generator",
    "test_batcher",
    "test_frames",
    "test_transport",
    "test_simulation",
    "test_config",
    "test_cli",
]

__version__ = "1.0.0"
__author__ = "Device Simulator Team"

TEST_MODULES = [
    test_generator,
    test_batcher,
    test_frames,
    test_transport,
    test_simulation,
    test_config,
    test_cli,
]


def create_test_suite():
    """
    Create the full test suite.

    Returns:
        unittest.TestSuite with all tests
    """
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    for module in TEST_MODULES:
        suite.addTests(loader.loadTestsFromModule(module))

    return suite


def run_tests(verbosity: int = 2):
    """
    Run all tests.

    Args:
        verbosity: Output verbosity level

    Returns:
        unittest.TestResult
    """
    suite = create_test_suite()
    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(suite)


if __name__ == "__main__":
    result = run_tests()
    sys.exit(0 if result.wasSuccessful() else 1)
