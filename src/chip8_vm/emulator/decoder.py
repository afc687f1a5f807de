"""
CHIP-8 Instruction Decoder
==========================

Maps a 16-bit instruction word to exactly one of the 35 base operations.

Every instruction is two bytes, big-endian, split into four nibbles:

    15..12  11..8  7..4  3..0
    family    x     y     n
              \\--- kk ---/       (low byte)
       \\------- nnn ------/      (low 12 bits)

The leading nibble selects the family. Families 0, 5, 8, 9, E and F look
at further nibbles to pick one operation. A word that matches no pattern
raises DecodeError; decoding is total over all 65536 words.

Operand conventions used in mnemonics:
    Vx, Vy  general registers V0-VF
    kk      8-bit immediate
    nnn     12-bit address
    n       4-bit immediate (sprite height)
    I       index register

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import DecodeError


class Op(Enum):
    """
    The 35 base CHIP-8 operations.

    Values are the conventional opcode patterns, used for display only.
    """
    SYS = "0nnn"         # call native routine (unsupported on hosts)
    CLS = "00E0"         # clear display
    RET = "00EE"         # return from subroutine
    JP = "1nnn"          # jump
    CALL = "2nnn"        # call subroutine
    SE_IMM = "3xkk"      # skip if Vx == kk
    SNE_IMM = "4xkk"     # skip if Vx != kk
    SE_REG = "5xy0"      # skip if Vx == Vy
    LD_IMM = "6xkk"      # Vx = kk
    ADD_IMM = "7xkk"     # Vx += kk, no carry
    LD_REG = "8xy0"      # Vx = Vy
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"     # Vx += Vy, VF = carry
    SUB = "8xy5"         # Vx -= Vy, VF = not borrow
    SHR = "8xy6"         # Vx >>= 1, VF = shifted-out bit
    SUBN = "8xy7"        # Vx = Vy - Vx, VF = not borrow
    SHL = "8xyE"         # Vx <<= 1, VF = shifted-out bit
    SNE_REG = "9xy0"     # skip if Vx != Vy
    LD_I = "Annn"        # I = nnn
    JP_V0 = "Bnnn"       # jump to V0 + nnn
    RND = "Cxkk"         # Vx = random & kk
    DRW = "Dxyn"         # draw sprite
    SKP = "Ex9E"         # skip if key Vx down
    SKNP = "ExA1"        # skip if key Vx up
    LD_VX_DT = "Fx07"    # Vx = DT
    LD_VX_K = "Fx0A"     # wait for key, Vx = key
    LD_DT_VX = "Fx15"    # DT = Vx
    LD_ST_VX = "Fx18"    # ST = Vx
    ADD_I_VX = "Fx1E"    # I += Vx
    LD_F_VX = "Fx29"     # I = glyph address of Vx
    LD_B_VX = "Fx33"     # BCD of Vx at I..I+2
    LD_MEM_VX = "Fx55"   # store V0..Vx at I
    LD_VX_MEM = "Fx65"   # load V0..Vx from I


# Operations selected by the low nibble inside the 8xyN family
_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# Operations selected by the low byte inside the Ex and Fx families
_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction.

    All operand fields are always extracted from the word; each operation
    only reads the ones its pattern defines.

    Attributes:
        op: The operation
        word: The raw 16-bit instruction word
    """
    op: Op
    word: int

    @property
    def x(self) -> int:
        """Register index in bits 11..8."""
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        """Register index in bits 7..4."""
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        """4-bit immediate in bits 3..0."""
        return self.word & 0xF

    @property
    def kk(self) -> int:
        """8-bit immediate in bits 7..0."""
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        """12-bit address in bits 11..0."""
        return self.word & 0xFFF

    @property
    def mnemonic(self) -> str:
        return _MNEMONICS[self.op]

    @property
    def operand_str(self) -> str:
        """Operands formatted in conventional CHIP-8 assembly syntax."""
        x, y = f"V{self.x:X}", f"V{self.y:X}"
        match self.op:
            case Op.CLS | Op.RET:
                return ""
            case Op.SYS | Op.JP | Op.CALL:
                return f"0x{self.nnn:03X}"
            case Op.LD_I:
                return f"I, 0x{self.nnn:03X}"
            case Op.JP_V0:
                return f"V0, 0x{self.nnn:03X}"
            case Op.SE_IMM | Op.SNE_IMM | Op.LD_IMM | Op.ADD_IMM | Op.RND:
                return f"{x}, 0x{self.kk:02X}"
            case Op.SHR | Op.SHL | Op.SKP | Op.SKNP:
                return x
            case Op.DRW:
                return f"{x}, {y}, {self.n}"
            case Op.LD_VX_DT:
                return f"{x}, DT"
            case Op.LD_VX_K:
                return f"{x}, K"
            case Op.LD_DT_VX:
                return f"DT, {x}"
            case Op.LD_ST_VX:
                return f"ST, {x}"
            case Op.ADD_I_VX:
                return f"I, {x}"
            case Op.LD_F_VX:
                return f"F, {x}"
            case Op.LD_B_VX:
                return f"B, {x}"
            case Op.LD_MEM_VX:
                return f"[I], {x}"
            case Op.LD_VX_MEM:
                return f"{x}, [I]"
            case _:
                return f"{x}, {y}"

    def __str__(self) -> str:
        operands = self.operand_str
        return f"{self.mnemonic} {operands}" if operands else self.mnemonic


_MNEMONICS = {
    Op.SYS: "SYS", Op.CLS: "CLS", Op.RET: "RET", Op.JP: "JP",
    Op.CALL: "CALL", Op.SE_IMM: "SE", Op.SNE_IMM: "SNE", Op.SE_REG: "SE",
    Op.LD_IMM: "LD", Op.ADD_IMM: "ADD", Op.LD_REG: "LD", Op.OR: "OR",
    Op.AND: "AND", Op.XOR: "XOR", Op.ADD_REG: "ADD", Op.SUB: "SUB",
    Op.SHR: "SHR", Op.SUBN: "SUBN", Op.SHL: "SHL", Op.SNE_REG: "SNE",
    Op.LD_I: "LD", Op.JP_V0: "JP", Op.RND: "RND", Op.DRW: "DRW",
    Op.SKP: "SKP", Op.SKNP: "SKNP", Op.LD_VX_DT: "LD", Op.LD_VX_K: "LD",
    Op.LD_DT_VX: "LD", Op.LD_ST_VX: "LD", Op.ADD_I_VX: "ADD",
    Op.LD_F_VX: "LD", Op.LD_B_VX: "LD", Op.LD_MEM_VX: "LD",
    Op.LD_VX_MEM: "LD",
}


def decode(word: int, pc: Optional[int] = None) -> Instruction:
    """
    Decode one instruction word.

    Args:
        word: 16-bit instruction word
        pc: Address the word was fetched from, reported in errors

    Returns:
        The decoded Instruction

    Raises:
        DecodeError: If the word matches none of the 35 operations
    """
    word &= 0xFFFF
    family = word >> 12
    low_nibble = word & 0xF
    low_byte = word & 0xFF

    op: Optional[Op] = None
    match family:
        case 0x0:
            if word == 0x00E0:
                op = Op.CLS
            elif word == 0x00EE:
                op = Op.RET
            else:
                op = Op.SYS
        case 0x1:
            op = Op.JP
        case 0x2:
            op = Op.CALL
        case 0x3:
            op = Op.SE_IMM
        case 0x4:
            op = Op.SNE_IMM
        case 0x5:
            if low_nibble == 0:
                op = Op.SE_REG
        case 0x6:
            op = Op.LD_IMM
        case 0x7:
            op = Op.ADD_IMM
        case 0x8:
            op = _ALU_OPS.get(low_nibble)
        case 0x9:
            if low_nibble == 0:
                op = Op.SNE_REG
        case 0xA:
            op = Op.LD_I
        case 0xB:
            op = Op.JP_V0
        case 0xC:
            op = Op.RND
        case 0xD:
            op = Op.DRW
        case 0xE:
            op = _KEY_OPS.get(low_byte)
        case 0xF:
            op = _MISC_OPS.get(low_byte)

    if op is None:
        raise DecodeError(word, pc)
    return Instruction(op, word)
