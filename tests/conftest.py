"""
Shared Test Fixtures
====================

Deterministic building blocks for the CHIP-8 VM tests: a manually advanced
clock for the timers and a seeded emulator factory.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import Emulator, EmulatorConfig


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def advance_ticks(self, ticks: int, hz: int = 60) -> None:
        """Advance by a whole number of timer periods."""
        self.now += ticks / hz


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def emu(clock):
    """Emulator with a fixed RND seed and a fake timer clock."""
    return Emulator(EmulatorConfig(seed=1234, clock=clock))
