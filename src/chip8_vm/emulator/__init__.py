"""
CHIP-8 Virtual Machine
======================

An interpreter core for the CHIP-8 virtual machine.

This package provides:

- **CPU**: All 35 base instructions, with explicit control-flow results
- **Memory**: 4 KiB address space with the hexadecimal font at $000
- **Display**: 64x32 monochrome XOR-sprite framebuffer
- **Keypad**: 16-key hexadecimal keypad with a host key mapping
- **Timers**: 60 Hz delay and sound timers driven by an injectable clock
- **Debugging**: Breakpoints, register conditions and single stepping

Quick Start
-----------

Basic usage::

    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> rom = emu.load_rom("maze.ch8")
    >>> event = emu.run(max_cycles=2_000)
    >>> print(emu.display_text)

With debugging::

    >>> emu = Emulator()
    >>> rom = emu.load_rom("pong.ch8")
    >>> emu.add_breakpoint(0x2F6)
    >>> event = emu.run()
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Stopped at ${event.address:03X}")

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Fetch/decode/execute core
- `decoder.py`: Instruction word decoding
- `memory.py`: 4 KiB memory and font set
- `display.py`: Framebuffer and sprite drawing
- `keyboard.py`: Keypad state
- `timers.py`: Delay and sound timers
- `rom.py`: Program images
- `breakpoints.py`: Debugging support

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU components
from .cpu import Chip8CPU, CPUState, CPUStatus, Flow, FlowKind
from .decoder import Instruction, Op, decode

# Memory subsystem
from .memory import FONTSET, FONT_GLYPH_SIZE, Memory
from .rom import MAX_ROM_SIZE, Rom

# I/O
from .display import Display
from .keyboard import KEY_TO_HEX, Keypad
from .timers import Timers, TimerState

# Debugging support
from .breakpoints import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "Chip8CPU",
    "CPUState",
    "CPUStatus",
    "Flow",
    "FlowKind",
    "Instruction",
    "Op",
    "decode",

    # Memory
    "Memory",
    "FONTSET",
    "FONT_GLYPH_SIZE",
    "Rom",
    "MAX_ROM_SIZE",

    # I/O
    "Display",
    "Keypad",
    "KEY_TO_HEX",
    "Timers",
    "TimerState",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    "RegisterCondition",
]
