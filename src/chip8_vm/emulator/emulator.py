"""
CHIP-8 VM - Main Orchestrator
=============================

This module provides the main `Emulator` class that orchestrates all
components to provide a clean, high-level API for running and testing
CHIP-8 programs.

The Emulator class:
- Initializes all components (CPU, memory, display, keypad, timers)
- Provides program loading from ROM files or raw bytes
- Supports execution control (run, step, run_until_pc)
- Integrates breakpoints for debugging
- Offers display output inspection
- Supports keypad input simulation

Example usage:
    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=42))
    >>> rom = emu.load_rom("pong.ch8")
    >>> event = emu.run(max_cycles=10_000)
    >>> print(emu.display_text)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..disassembler import Chip8Disassembler
from .breakpoints import BreakEvent, BreakpointManager, BreakReason
from .cpu import Chip8CPU
from .display import Display
from .keyboard import Keypad, KeyName
from .memory import Memory
from .rom import Rom
from .timers import Timers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        seed: Seed for the RND instruction's random source. None draws
              from system entropy.
        clock: Function returning monotonic seconds, used to pace the
               60 Hz timers. Default is time.monotonic.
        timer_hz: Timer decrement rate in ticks per second.

    Example:
        >>> config = EmulatorConfig(seed=1)          # reproducible RND
        >>> ticks = iter(range(1_000_000))
        >>> config = EmulatorConfig(clock=lambda: next(ticks) / 600)
    """
    seed: Optional[int] = None
    clock: Optional[Callable[[], float]] = None
    timer_hz: int = 60

    @property
    def load_address(self) -> int:
        """Address where programs are loaded; fixed for CHIP-8."""
        return Memory.PROGRAM_START


class Emulator:
    """
    CHIP-8 VM with instrumentation support.

    This is the main entry point for emulator usage. It wires the CPU to
    its peripherals and a BreakpointManager.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        cpu: The Chip8CPU instance (accessible for low-level control)
        memory: The 4 KiB memory
        display: The 64x32 display
        keypad: The 16-key keypad
        timers: The delay and sound timers
        breakpoints: The breakpoint manager

    Example:
        >>> emu = Emulator()
        >>> _ = emu.load_bytes(bytes([0x60, 0x0A, 0x61, 0x05, 0x80, 0x14]))
        >>> emu.run(3).reason.name
        'MAX_CYCLES'
        >>> emu.registers['v0']
        15
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        self.config = config or EmulatorConfig()

        self.memory = Memory()
        self.display = Display()
        self.keypad = Keypad()
        self.timers = Timers(clock=self.config.clock, hz=self.config.timer_hz)

        self.cpu = Chip8CPU(
            memory=self.memory,
            display=self.display,
            keypad=self.keypad,
            timers=self.timers,
            rng=random.Random(self.config.seed),
        )

        self.breakpoints = BreakpointManager()
        self.cpu.on_instruction = self._instruction_hook

        self._rom: Optional[Rom] = None
        self._is_running = False

        self.reset()

    def _instruction_hook(self, pc: int, word: int) -> bool:
        """Connect the CPU's execution loop to the breakpoint manager."""
        return self.breakpoints.check_instruction(self.cpu, pc, word)

    @property
    def on_sound(self) -> Optional[Callable[[], None]]:
        """Callback invoked once each time the sound timer runs out."""
        return self.timers.on_sound

    @on_sound.setter
    def on_sound(self, callback: Optional[Callable[[], None]]) -> None:
        self.timers.on_sound = callback

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path, Rom]) -> Rom:
        """
        Reset the machine and load a ROM image at $200.

        Args:
            path: Path to a ROM file, or an already loaded Rom

        Returns:
            The loaded Rom

        Raises:
            FileNotFoundError: If the ROM file doesn't exist
            RomSizeError: If the image is larger than $DFF bytes
        """
        rom = path if isinstance(path, Rom) else Rom.from_file(path)
        self.reset()
        self.memory.load(rom.data, Memory.PROGRAM_START)
        self._rom = rom
        logger.debug(f"Loaded '{rom.name}' ({len(rom)} bytes) at ${Memory.PROGRAM_START:03X}")
        return rom

    def load_bytes(self, data: bytes, name: str = "<bytes>") -> Rom:
        """Reset the machine and load a program from raw bytes."""
        return self.load_rom(Rom.from_bytes(data, name))

    @property
    def rom(self) -> Optional[Rom]:
        """The currently loaded program, if any."""
        return self._rom

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset to the initial machine configuration.

        Registers, stack, timers, display, keys and memory are cleared and
        the font is reinstalled. A previously loaded program is NOT
        reloaded; use load_rom() for that.
        """
        self.cpu.reset()
        self._is_running = False
        self.breakpoints.clear_break_request()
        self.breakpoints.clear_last_event()

    def step(self) -> BreakEvent:
        """
        Execute a single instruction, regardless of breakpoints.

        Returns:
            BreakEvent with reason=STEP and the new PC
        """
        self.cpu.step()
        return BreakEvent(
            BreakReason.STEP,
            address=self.cpu.pc,
            message=f"Step at ${self.cpu.pc:03X}"
        )

    def run(self, max_cycles: int = 1_000_000) -> BreakEvent:
        """
        Run until a break condition or max cycles reached.

        If the previous run stopped on a breakpoint at the current PC, that
        instruction is executed first so the run makes progress.

        A run stopped by step mode or request_break() has not yet checked
        the breakpoints at its PC. If one is set there, the next run reports
        it without executing anything, and the run after that resumes past
        it as above.

        Args:
            max_cycles: Maximum number of instructions to execute

        Returns:
            BreakEvent describing why execution stopped

        Raises:
            MachineError: Any fatal machine condition (propagated unchanged)
        """
        last = self.breakpoints.last_event
        self.breakpoints.clear_last_event()
        resume = (
            max_cycles > 0
            and last is not None
            and last.address == self.cpu.pc
            and last.reason in (BreakReason.PC_BREAKPOINT, BreakReason.REGISTER_CONDITION)
        )

        budget = max_cycles
        self._is_running = True
        try:
            if resume:
                self.cpu.step()
                budget -= 1
            self.cpu.execute(budget)
        finally:
            self._is_running = False

        return self.breakpoints.last_event or BreakEvent(
            BreakReason.MAX_CYCLES,
            address=self.cpu.pc,
            message=f"Reached max cycles ({max_cycles})"
        )

    def run_until_pc(self, address: int, max_cycles: int = 1_000_000) -> bool:
        """
        Run until PC reaches a specific address.

        Creates a temporary breakpoint at the address and runs until hit.

        Returns:
            True if address was reached, False if max_cycles hit first
        """
        was_set = self.breakpoints.has_breakpoint(address)
        if not was_set:
            self.breakpoints.add_breakpoint(address)

        try:
            event = self.run(max_cycles)
            return (event.reason == BreakReason.PC_BREAKPOINT and
                    event.address == address)
        finally:
            if not was_set:
                self.breakpoints.remove_breakpoint(address)

    def run_until_blocked(self, max_cycles: int = 1_000_000) -> bool:
        """
        Run until the program waits for a key press.

        Returns:
            True if the CPU blocked on LD Vx, K, False if max_cycles hit first
        """
        for _ in range(max_cycles):
            if self.cpu.is_blocked:
                return True
            self.step()
        return self.cpu.is_blocked

    # =========================================================================
    # Breakpoint Management (delegates to BreakpointManager)
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """Add a PC breakpoint at the specified address."""
        self.breakpoints.add_breakpoint(address)

    def remove_breakpoint(self, address: int) -> None:
        self.breakpoints.remove_breakpoint(address)

    def clear_breakpoints(self) -> None:
        self.breakpoints.clear_breakpoints()

    # =========================================================================
    # Keypad Input
    # =========================================================================

    def press_key(self, key: KeyName) -> None:
        """
        Press a key (key down event).

        The key remains held until release_key() is called.

        Args:
            key: Keypad index (0x0-0xF) or host key name (e.g. 'Q', 'X')
        """
        self.keypad.key_down(key)

    def release_key(self, key: KeyName) -> None:
        """Release a key (key up event)."""
        self.keypad.key_up(key)

    def tap_key(self, key: KeyName, hold_cycles: int = 10) -> None:
        """
        Tap a key (press, run, release).

        Args:
            key: Key to tap
            hold_cycles: How many instructions to run with the key held
        """
        self.press_key(key)
        try:
            self.run(hold_cycles)
        finally:
            self.release_key(key)

    # =========================================================================
    # Display Output
    # =========================================================================

    @property
    def display_text(self) -> str:
        """Display content as ASCII art, one line per pixel row."""
        return self.display.get_text()

    @property
    def display_lines(self) -> List[str]:
        return self.display.get_text_grid()

    @property
    def display_pixels(self) -> bytes:
        """Raw pixel buffer (one byte per pixel); clears the dirty flag."""
        return self.display.get_pixel_buffer()

    def render_display(self, scale: int = 8) -> Optional[bytes]:
        """Render the display to PNG bytes (None if Pillow is unavailable)."""
        return self.display.render_image(scale=scale)

    # =========================================================================
    # Memory Access
    # =========================================================================

    def read_byte(self, address: int) -> int:
        return self.memory.read(address)

    def read_word(self, address: int) -> int:
        """Read a 16-bit word from memory (big-endian)."""
        return self.memory.read_word(address)

    def read_bytes(self, address: int, count: int) -> bytes:
        return self.memory.read_bytes(address, count)

    def write_byte(self, address: int, value: int) -> None:
        self.memory.write(address, value)

    def write_bytes(self, address: int, data: bytes) -> None:
        self.memory.write_bytes(address, data)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict:
        """
        Get current CPU register values as a dictionary.

        Returns:
            Dictionary with keys: v0-vf, i, pc, sp, dt, st
        """
        regs = {f"v{n:x}": self.cpu.v[n] for n in range(16)}
        regs.update({
            'i': self.cpu.i,
            'pc': self.cpu.pc,
            'sp': self.cpu.sp,
            'dt': self.cpu.dt,
            'st': self.cpu.st,
        })
        return regs

    @property
    def total_cycles(self) -> int:
        """Instructions executed since last reset."""
        return self.cpu.cycles

    @property
    def is_running(self) -> bool:
        """True if in the middle of run()."""
        return self._is_running

    @property
    def is_blocked(self) -> bool:
        """True while the program waits for a key press."""
        return self.cpu.is_blocked

    def disassemble_at(self, address: int, count: int = 10) -> List[str]:
        """
        Disassemble instructions at the given address.

        Args:
            address: Starting address
            count: Number of instructions to disassemble

        Returns:
            List of disassembly strings

        Raises:
            AddressOutOfBoundsError: If address lies outside memory
        """
        self.memory.check_range(address, 0)
        length = min(count * 2, Memory.SIZE - address)
        data = self.memory.read_bytes(address, length)
        disasm = Chip8Disassembler()
        return [str(instr) for instr in disasm.disassemble(data, address, count)]

    def __repr__(self) -> str:
        """Return string representation of emulator state."""
        return (
            f"Emulator(rom={self._rom.name if self._rom else None!r}, "
            f"pc=${self.cpu.pc:03X}, "
            f"cycles={self.cpu.cycles})"
        )
