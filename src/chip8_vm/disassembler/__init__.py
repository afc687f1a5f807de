"""
CHIP-8 Disassembler Module
==========================

This module provides disassembly of CHIP-8 program images, used by the
c8disasm tool and by Emulator.disassemble_at() for debugging.

Usage:
    from chip8_vm.disassembler import Chip8Disassembler

    disasm = Chip8Disassembler()
    for instr in disasm.disassemble(rom_bytes, start_address=0x200):
        print(instr)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
]
