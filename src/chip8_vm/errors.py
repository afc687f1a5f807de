"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
interpreter-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── MachineError (fatal to the running program)
│   ├── DecodeError - instruction word matches no defined operation
│   ├── UnsupportedHostOperationError - valid instruction this host cannot run
│   ├── StackOverflowError - CALL with a full call stack
│   ├── StackUnderflowError - RET with an empty call stack
│   └── AddressOutOfBoundsError - memory access outside 0x000-0xFFF
└── RomError (program image handling)
    └── RomSizeError - image does not fit in program memory

Design Philosophy
-----------------
Machine errors carry the program counter and, when known, the instruction
word being executed. This separates "your ROM is corrupt" (DecodeError)
from "your ROM uses a feature this host doesn't provide"
(UnsupportedHostOperationError).

Error messages follow this format:
    $PC: error: description (word $WORD)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch all interpreter errors with a single except clause:

        try:
            emu.run(10_000)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Machine Exceptions
# =============================================================================

class MachineError(Chip8Error):
    """
    Base exception for fatal conditions raised while executing a program.

    Attributes:
        message: The error description
        pc: Program counter of the failing instruction (optional)
        word: The 16-bit instruction word being executed (optional)
    """

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        word: Optional[int] = None,
    ):
        self.message = message
        self.pc = pc
        self.word = word
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and instruction word.

        Example output:
            $0204: error: unsupported instruction (word $5121)
        """
        if self.pc is not None:
            text = f"${self.pc:04X}: error: {self.message}"
        else:
            text = f"error: {self.message}"
        if self.word is not None:
            text += f" (word ${self.word:04X})"
        return text


class DecodeError(MachineError):
    """
    Instruction word matches none of the 35 defined operations.

    Raised by the decoder before any machine state is touched. The cycle
    is aborted and the program counter still points at the bad word.
    """

    def __init__(self, word: int, pc: Optional[int] = None):
        super().__init__("unsupported instruction", pc=pc, word=word)


class UnsupportedHostOperationError(MachineError):
    """
    Recognized instruction that cannot run on a hosted interpreter.

    Only the legacy 0NNN "call native routine" raises this.
    """

    def __init__(self, word: int, pc: Optional[int] = None):
        self.address = word & 0x0FFF
        super().__init__(
            f"native routine call to ${self.address:03X} is not supported in this host",
            pc=pc,
            word=word,
        )


class StackOverflowError(MachineError):
    """CALL executed while all 16 call-stack slots are in use."""
    pass


class StackUnderflowError(MachineError):
    """RET executed with an empty call stack."""
    pass


class AddressOutOfBoundsError(MachineError):
    """
    Memory access outside the 4 KiB address space.

    Attributes:
        address: The offending address
    """

    def __init__(
        self,
        address: int,
        pc: Optional[int] = None,
        word: Optional[int] = None,
    ):
        self.address = address
        super().__init__(
            f"address ${address:04X} is outside memory ($000-$FFF)",
            pc=pc,
            word=word,
        )


# =============================================================================
# ROM Exceptions
# =============================================================================

class RomError(Chip8Error):
    """Base exception for program image errors."""
    pass


class RomSizeError(RomError):
    """
    Program image is larger than the program area.

    Attributes:
        size: Size of the rejected image in bytes
        limit: Maximum accepted size in bytes
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"ROM is {size} bytes, maximum is {limit} bytes (${limit:03X})"
        )
