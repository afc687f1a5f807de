"""
Memory Subsystem for the CHIP-8 VM
==================================

Memory Map:
    $000-$04F  Hexadecimal font glyphs (16 glyphs x 5 bytes)
    $050-$1FF  Reserved for the interpreter (unused, zero)
    $200-$FFF  Program image and its runtime work data

Every access is bounds-checked. Addresses outside $000-$FFF raise
AddressOutOfBoundsError instead of wrapping, and multi-byte accesses are
checked as a whole before any byte is transferred.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from ..errors import AddressOutOfBoundsError

# =============================================================================
# FONT DATA
# =============================================================================
# Glyphs for the hex digits 0-F. Each glyph is 5 rows of 4 pixels, stored in
# the high nibble of each byte. Glyph for digit d lives at address d * 5.

FONT_GLYPH_SIZE = 5

FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Memory:
    """
    4 KiB flat memory with bounds-checked access.

    Example:
        >>> mem = Memory()
        >>> mem.reset()
        >>> mem.load(bytes([0x60, 0x0A]), Memory.PROGRAM_START)
        >>> hex(mem.read_word(0x200))
        '0x600a'
    """

    SIZE = 0x1000
    FONT_ADDRESS = 0x000
    PROGRAM_START = 0x200
    PROGRAM_SIZE = SIZE - PROGRAM_START - 1  # 0xDFF

    def __init__(self):
        self._data = bytearray(self.SIZE)

    def __len__(self) -> int:
        return self.SIZE

    def reset(self) -> None:
        """Zero all memory and install the font glyphs."""
        self._data[:] = bytes(self.SIZE)
        self._data[self.FONT_ADDRESS:self.FONT_ADDRESS + len(FONTSET)] = FONTSET

    def check_range(self, address: int, length: int = 1) -> None:
        """
        Verify that [address, address + length) lies inside memory.

        The start address must be inside memory even for an empty range.

        Raises:
            AddressOutOfBoundsError: Naming the first invalid address
        """
        if address < 0 or address >= self.SIZE:
            raise AddressOutOfBoundsError(address)
        if length < 0:
            raise AddressOutOfBoundsError(address + length)
        end = address + length
        if end > self.SIZE:
            raise AddressOutOfBoundsError(max(address, self.SIZE))

    def read(self, address: int) -> int:
        """Read one byte."""
        self.check_range(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """Write one byte (value is masked to 8 bits)."""
        self.check_range(address)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word."""
        self.check_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read a block of bytes."""
        self.check_range(address, count)
        return bytes(self._data[address:address + count])

    def write_bytes(self, address: int, data: bytes) -> None:
        """Write a block of bytes; nothing is written if any byte is out of range."""
        self.check_range(address, len(data))
        self._data[address:address + len(data)] = data

    def load(self, data: bytes, address: int = PROGRAM_START) -> None:
        """Copy a program image into memory (alias of write_bytes)."""
        self.write_bytes(address, data)
