"""
Disassembler Unit Tests
=======================

Tests for the CHIP-8 disassembler: instruction listing, data words and
output formatting.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.disassembler import Chip8Disassembler, DisassembledInstruction
from chip8_vm.emulator import Op


@pytest.fixture
def disasm():
    return Chip8Disassembler()


# =============================================================================
# Single Instructions
# =============================================================================

class TestDisassembleOne:
    """Test disassemble_one()."""

    def test_basic(self, disasm):
        instr = disasm.disassemble_one(bytes([0x60, 0x0A]))
        assert instr.address == 0x200
        assert instr.word == 0x600A
        assert instr.mnemonic == "LD"
        assert instr.operand_str == "V0, 0x0A"
        assert instr.raw_bytes == bytes([0x60, 0x0A])
        assert instr.instruction.op is Op.LD_IMM
        assert not instr.is_data

    def test_offset_and_address(self, disasm):
        instr = disasm.disassemble_one(bytes([0x00, 0x00, 0x00, 0xE0]), offset=2, address=0x302)
        assert instr.address == 0x302
        assert instr.mnemonic == "CLS"

    def test_undecodable_word_is_data(self, disasm):
        instr = disasm.disassemble_one(bytes([0x51, 0x21]))
        assert instr.is_data
        assert instr.mnemonic == "DW"
        assert instr.operand_str == "0x5121"

    def test_trailing_byte(self, disasm):
        instr = disasm.disassemble_one(bytes([0x60, 0x0A, 0x12]), offset=2, address=0x202)
        assert instr.mnemonic == "DB"
        assert instr.operand_str == "0x12"
        assert instr.size == 1

    def test_call_comment(self, disasm):
        instr = disasm.disassemble_one(bytes([0x22, 0x08]))
        assert instr.comment == "subroutine $208"

    def test_font_comment(self, disasm):
        assert disasm.disassemble_one(bytes([0xF3, 0x29])).comment == "font glyph of V3"

    def test_native_call_comment(self, disasm):
        assert "unsupported" in disasm.disassemble_one(bytes([0x01, 0x23])).comment


# =============================================================================
# Blocks
# =============================================================================

class TestDisassembleBlock:
    """Test disassemble() over several words."""

    PROGRAM = bytes([0x60, 0x0A, 0x61, 0x05, 0x80, 0x14, 0x12, 0x06])

    def test_all(self, disasm):
        result = disasm.disassemble(self.PROGRAM)
        assert [i.address for i in result] == [0x200, 0x202, 0x204, 0x206]
        assert [str(i.instruction) for i in result] == [
            "LD V0, 0x0A", "LD V1, 0x05", "ADD V0, V1", "JP 0x206",
        ]

    def test_count(self, disasm):
        assert len(disasm.disassemble(self.PROGRAM, count=2)) == 2

    def test_start_address(self, disasm):
        result = disasm.disassemble(self.PROGRAM, start_address=0x400)
        assert result[-1].address == 0x406

    def test_sprite_data_does_not_stop_walk(self, disasm):
        result = disasm.disassemble(bytes([0xF0, 0x90, 0x60, 0x01]))
        assert result[0].is_data
        assert result[1].mnemonic == "LD"

    def test_odd_length(self, disasm):
        result = disasm.disassemble(bytes([0x00, 0xE0, 0xFF]))
        assert [i.mnemonic for i in result] == ["CLS", "DB"]

    def test_empty(self, disasm):
        assert disasm.disassemble(b"") == []


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:
    """Listing output."""

    def test_str(self, disasm):
        instr = disasm.disassemble_one(bytes([0x60, 0x0A]))
        assert str(instr) == "$200: 60 0A  LD V0, 0x0A"

    def test_str_no_operands(self, disasm):
        assert str(disasm.disassemble_one(bytes([0x00, 0xEE]))) == "$200: 00 EE  RET"

    def test_str_with_comment(self, disasm):
        line = str(disasm.disassemble_one(bytes([0x22, 0x08])))
        assert line.startswith("$200: 22 08  CALL 0x208")
        assert line.endswith("; subroutine $208")

    def test_listing_without_bytes(self):
        disasm = Chip8Disassembler(show_bytes=False)
        lines = disasm.format_listing(disasm.disassemble(bytes([0x60, 0x0A, 0x00, 0xE0])))
        assert lines == ["$200: LD V0, 0x0A", "$202: CLS"]

    def test_to_dict(self, disasm):
        data = disasm.disassemble_one(bytes([0x60, 0x0A])).to_dict()
        assert data["address"] == "$200"
        assert data["address_int"] == 0x200
        assert data["word"] == "$600A"
        assert data["bytes"] == ["$60", "$0A"]

    def test_record_type(self, disasm):
        assert isinstance(disasm.disassemble_one(bytes([0x60, 0x0A])), DisassembledInstruction)
