"""
chip8-vm - A CHIP-8 Virtual Machine
===================================

This package provides an interpreter core for CHIP-8, the 1970s virtual
machine for simple games on 8-bit microcomputers, together with debugging
and inspection tools.

Main Components
---------------
- **emulator**: The virtual machine (c8run)
    CPU, memory, display, keypad and timers, plus breakpoints

- **disassembler**: CHIP-8 disassembler (c8disasm)
    Converts program images to assembly listings

- **errors**: Exception hierarchy
    Every fatal machine condition is a MachineError

Quick Start
-----------
Run a program:
    >>> from chip8_vm import Emulator
    >>> emu = Emulator()
    >>> rom = emu.load_rom("maze.ch8")
    >>> event = emu.run(max_cycles=2_000)
    >>> print(emu.display_text)

Disassemble a program:
    >>> from chip8_vm import Chip8Disassembler
    >>> for line in Chip8Disassembler().disassemble(open("maze.ch8", "rb").read()):
    ...     print(line)

Or use the command-line tools:
    $ c8run maze.ch8 --cycles 2000 --ascii
    $ c8disasm maze.ch8

Version History
---------------
1.0.0 - Initial release with interpreter core, debugger and disassembler
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_vm.errors import (
    Chip8Error,
    MachineError,
    DecodeError,
    UnsupportedHostOperationError,
    StackOverflowError,
    StackUnderflowError,
    AddressOutOfBoundsError,
    RomError,
    RomSizeError,
)
from chip8_vm.emulator import (
    Emulator,
    EmulatorConfig,
    Chip8CPU,
    BreakReason,
    Rom,
)
from chip8_vm.disassembler import Chip8Disassembler

__all__ = [
    "__version__",
    "__author__",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "Chip8CPU",
    "BreakReason",
    "Rom",
    # Disassembler
    "Chip8Disassembler",
    # Errors
    "Chip8Error",
    "MachineError",
    "DecodeError",
    "UnsupportedHostOperationError",
    "StackOverflowError",
    "StackUnderflowError",
    "AddressOutOfBoundsError",
    "RomError",
    "RomSizeError",
]
