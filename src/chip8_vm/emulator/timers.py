"""
Delay and Sound Timers
======================

CHIP-8 has two 8-bit countdown registers that tick at 60 Hz regardless of
how fast instructions execute:

- DT (delay timer): read and written by programs for timing
- ST (sound timer): a tone plays while it is nonzero; the VM only reports
  the moment it runs out

Ticks are derived from elapsed time on a monotonic clock sampled once per
cycle. No thread is involved, so runs are deterministic when the clock is.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class TimerState:
    """
    Timer registers.

    Attributes:
        delay: Delay timer (0-255)
        sound: Sound timer (0-255)
        beeps: Number of audible events emitted since reset
    """
    delay: int = 0
    sound: int = 0
    beeps: int = 0


class Timers:
    """
    Elapsed-time driven delay and sound timers.

    Example:
        >>> now = [0.0]
        >>> timers = Timers(clock=lambda: now[0])
        >>> timers.delay = 2
        >>> now[0] = 1 / 60
        >>> timers.tick()
        0
        >>> timers.delay
        1
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        hz: int = 60,
    ):
        """
        Initialize timers.

        Args:
            clock: Function returning monotonic seconds (default time.monotonic)
            hz: Decrement rate in ticks per second
        """
        if hz <= 0:
            raise ValueError(f"hz must be positive, got {hz}")

        self.clock = clock or time.monotonic
        self.hz = hz
        self.state = TimerState()

        # on_sound() is called once each time the sound timer runs out
        self.on_sound: Optional[Callable[[], None]] = None

        self._last_tick = self.clock()

    @property
    def delay(self) -> int:
        """Delay timer (8-bit)."""
        return self.state.delay

    @delay.setter
    def delay(self, value: int) -> None:
        self.state.delay = value & 0xFF

    @property
    def sound(self) -> int:
        """Sound timer (8-bit)."""
        return self.state.sound

    @sound.setter
    def sound(self, value: int) -> None:
        self.state.sound = value & 0xFF

    @property
    def beeps(self) -> int:
        """Audible events emitted since reset."""
        return self.state.beeps

    def reset(self) -> None:
        """Zero both timers and restart the tick reference."""
        self.state = TimerState()
        self._last_tick = self.clock()

    def tick(self) -> int:
        """
        Apply every whole tick interval elapsed since the previous tick.

        The fractional remainder carries over to the next call, so a steady
        clock yields exactly ``hz`` decrements per second.

        Returns:
            Number of audible events emitted by this call (0 or 1)
        """
        elapsed = self.clock() - self._last_tick
        # epsilon absorbs float error on exact multiples of the interval
        ticks = int(elapsed * self.hz + 1e-9)
        if ticks <= 0:
            return 0
        self._last_tick += ticks / self.hz

        if self.state.delay:
            self.state.delay = max(0, self.state.delay - ticks)

        events = 0
        if self.state.sound:
            self.state.sound = max(0, self.state.sound - ticks)
            if self.state.sound == 0:
                events = 1
                self.state.beeps += 1
                logger.debug("Sound timer expired")
                if self.on_sound:
                    self.on_sound()
        return events
