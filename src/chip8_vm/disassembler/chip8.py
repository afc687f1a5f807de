"""
CHIP-8 Disassembler
===================

Disassembles CHIP-8 program images into conventional assembly mnemonics.

CHIP-8 has fixed-width two-byte instructions, so disassembly is a linear
walk over big-endian words. Words the decoder rejects (sprite data, text,
padding) are listed as ``DW`` data directives rather than stopping the walk.

Usage:
    disasm = Chip8Disassembler()

    # Disassemble from bytes
    instructions = disasm.disassemble(rom_bytes, start_address=0x200)

    # Disassemble single instruction
    instr = disasm.disassemble_one(rom_bytes, offset=0, address=0x200)
    print(f"{instr.address:03X}: {instr.mnemonic} {instr.operand_str}")

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import List, Optional

from ..emulator.decoder import Instruction, Op, decode
from ..errors import DecodeError


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled CHIP-8 word.

    Attributes:
        address: Memory address of the instruction
        word: The 16-bit instruction word
        mnemonic: The instruction mnemonic (e.g., "LD", "DRW"), or "DW" for data
        operand_str: Formatted operand string for display
        raw_bytes: The bytes comprising this word
        instruction: Decoded instruction, or None for data words
        comment: Optional comment (e.g., call/jump target)
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str
    raw_bytes: bytes
    instruction: Optional[Instruction] = None
    comment: str = ""

    @property
    def is_data(self) -> bool:
        return self.instruction is None

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    def __str__(self) -> str:
        """Format as assembly line: ADDRESS: BYTES  MNEMONIC OPERAND"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes).ljust(5)

        if self.operand_str:
            asm = f"{self.mnemonic} {self.operand_str}"
        else:
            asm = self.mnemonic

        if self.comment:
            return f"${self.address:03X}: {hex_bytes}  {asm:<18} ; {self.comment}"
        return f"${self.address:03X}: {hex_bytes}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "word": f"${self.word:04X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "comment": self.comment,
        }


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Linear disassembler for CHIP-8 machine code.

    Attributes:
        show_bytes: Include raw bytes in str() output when formatting listings
    """

    def __init__(self, show_bytes: bool = True):
        self.show_bytes = show_bytes

    def disassemble_one(
        self,
        data: bytes,
        offset: int = 0,
        address: int = 0x200,
    ) -> DisassembledInstruction:
        """
        Disassemble the word at ``data[offset]``.

        A trailing odd byte is returned as a one-byte ``DB`` directive.

        Args:
            data: Program bytes
            offset: Index of the first byte of the word in data
            address: Memory address corresponding to offset
        """
        if offset + 1 >= len(data):
            byte = data[offset]
            return DisassembledInstruction(
                address=address,
                word=byte,
                mnemonic="DB",
                operand_str=f"0x{byte:02X}",
                raw_bytes=bytes([byte]),
            )

        word = (data[offset] << 8) | data[offset + 1]
        raw = bytes(data[offset:offset + 2])

        try:
            instr = decode(word, address)
        except DecodeError:
            return DisassembledInstruction(
                address=address,
                word=word,
                mnemonic="DW",
                operand_str=f"0x{word:04X}",
                raw_bytes=raw,
            )

        return DisassembledInstruction(
            address=address,
            word=word,
            mnemonic=instr.mnemonic,
            operand_str=instr.operand_str,
            raw_bytes=raw,
            instruction=instr,
            comment=self._comment_for(instr),
        )

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a block of program bytes.

        Args:
            data: Program bytes (data[0] sits at start_address)
            start_address: Memory address of the first byte
            count: Maximum number of words to decode (default: all)

        Returns:
            List of DisassembledInstruction, in address order
        """
        result = []
        offset = 0
        while offset < len(data):
            if count is not None and len(result) >= count:
                break
            instr = self.disassemble_one(data, offset, start_address + offset)
            result.append(instr)
            offset += instr.size
        return result

    def format_listing(self, instructions: List[DisassembledInstruction]) -> List[str]:
        """Render instructions as listing lines."""
        if self.show_bytes:
            return [str(instr) for instr in instructions]
        lines = []
        for instr in instructions:
            asm = f"{instr.mnemonic} {instr.operand_str}".rstrip()
            line = f"${instr.address:03X}: {asm}"
            if instr.comment:
                line = f"{line:<28} ; {instr.comment}"
            lines.append(line)
        return lines

    @staticmethod
    def _comment_for(instr: Instruction) -> str:
        match instr.op:
            case Op.CALL:
                return f"subroutine ${instr.nnn:03X}"
            case Op.LD_F_VX:
                return f"font glyph of V{instr.x:X}"
            case Op.SYS:
                return "native call, unsupported"
        return ""
