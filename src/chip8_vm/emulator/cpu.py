"""
CHIP-8 CPU
==========

Executes the 35 base CHIP-8 instructions against the machine state.

Machine state:
- V0-VF: 8-bit general registers (VF doubles as carry/borrow/collision flag)
- I: 16-bit index register
- PC: 16-bit program counter, starts at $200
- Stack: up to 16 return addresses
- DT/ST: delay and sound timers (see timers.py)
- 4 KiB memory, 64x32 display and 16-key keypad (see memory.py,
  display.py, keyboard.py)

Each call to cycle() performs exactly one instruction:

    fetch (2 bytes at PC) -> decode -> execute -> update PC -> tick timers

The executor returns a Flow describing how PC moves. RETRY leaves PC on
the same instruction; it is produced only by LD Vx, K when no key is held
and is the CPU's single blocking primitive. The CPU reports this through
its status (RUNNING or BLOCKED_ON_KEY) and never blocks the host.

Memory addressing policy: every computed address must fall inside
$000-$FFF or the instruction fails with AddressOutOfBoundsError before
changing any state. I itself is free to hold any 16-bit value.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from ..errors import (
    AddressOutOfBoundsError,
    StackOverflowError,
    StackUnderflowError,
    UnsupportedHostOperationError,
)
from .decoder import Instruction, Op, decode
from .display import Display
from .keyboard import Keypad
from .memory import FONT_GLYPH_SIZE, Memory
from .timers import Timers

logger = logging.getLogger(__name__)

FLAG = 0xF  # VF


class FlowKind(Enum):
    """How the program counter moves after an instruction."""
    ADVANCE = auto()  # PC += 2
    SKIP = auto()     # PC += 4
    JUMP = auto()     # PC = target
    RETRY = auto()    # PC unchanged, same instruction runs again


@dataclass(frozen=True)
class Flow:
    """
    Control-flow effect returned by the executor.

    Attributes:
        kind: The kind of PC update
        target: Destination address for JUMP, otherwise None
    """
    kind: FlowKind
    target: Optional[int] = None

    @staticmethod
    def jump(address: int) -> "Flow":
        return Flow(FlowKind.JUMP, address)


ADVANCE = Flow(FlowKind.ADVANCE)
SKIP = Flow(FlowKind.SKIP)
RETRY = Flow(FlowKind.RETRY)


class CPUStatus(Enum):
    """Cycle driver state."""
    RUNNING = auto()
    BLOCKED_ON_KEY = auto()


@dataclass
class CPUState:
    """
    Complete CPU register state.

    All values stored as Python ints but represent:
    - v: sixteen 8-bit registers
    - i, pc: 16-bit unsigned
    - stack: return addresses, top of stack last (len() is the stack pointer)
    """
    v: bytearray = field(default_factory=lambda: bytearray(16))
    i: int = 0
    pc: int = Memory.PROGRAM_START
    stack: list[int] = field(default_factory=list)
    status: CPUStatus = CPUStatus.RUNNING
    cycles: int = 0


class Chip8CPU:
    """
    CHIP-8 interpreter core.

    The CPU owns its machine state exclusively. Peripherals may be passed
    in for sharing with a host (e.g. a renderer holding the Display), or
    created on demand.

    Instrumentation hooks allow:
    - Tracing every instruction before execution
    - Implementing breakpoints

    Example:
        >>> cpu = Chip8CPU(rng=random.Random(1))
        >>> cpu.reset()
        >>> cpu.memory.load(bytes([0x60, 0x0A, 0x61, 0x05, 0x80, 0x14]))
        >>> for _ in range(3):
        ...     _ = cpu.cycle()
        >>> cpu.v[0], cpu.v[0xF], hex(cpu.pc)
        (15, 0, '0x206')
    """

    STACK_DEPTH = 16

    def __init__(
        self,
        memory: Optional[Memory] = None,
        display: Optional[Display] = None,
        keypad: Optional[Keypad] = None,
        timers: Optional[Timers] = None,
        rng: Optional[random.Random] = None,
    ):
        self.memory = memory or Memory()
        self.display = display or Display()
        self.keypad = keypad or Keypad()
        self.timers = timers or Timers()
        self.rng = rng or random.Random()
        self.state = CPUState()

        # Instrumentation hook
        # on_instruction(pc, word) -> bool: return False to stop execution
        self.on_instruction: Optional[Callable[[int, int], bool]] = None

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> bytearray:
        """General registers V0-VF."""
        return self.state.v

    @property
    def i(self) -> int:
        """Index register I (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def sp(self) -> int:
        """Stack pointer (number of saved return addresses)."""
        return len(self.state.stack)

    @property
    def stack(self) -> tuple[int, ...]:
        """Saved return addresses, oldest first."""
        return tuple(self.state.stack)

    @property
    def dt(self) -> int:
        """Delay timer."""
        return self.timers.delay

    @property
    def st(self) -> int:
        """Sound timer."""
        return self.timers.sound

    @property
    def status(self) -> CPUStatus:
        return self.state.status

    @property
    def is_blocked(self) -> bool:
        """True while waiting in LD Vx, K for a key press."""
        return self.state.status is CPUStatus.BLOCKED_ON_KEY

    @property
    def cycles(self) -> int:
        """Instructions executed since reset (RETRY cycles included)."""
        return self.state.cycles

    def register_value(self, name: str) -> int:
        """
        Read a register by name.

        Accepted names: v0-vf, i, pc, sp, dt, st (case-insensitive).

        Raises:
            ValueError: If the name is unknown
        """
        key = name.lower()
        if len(key) == 2 and key[0] == "v":
            try:
                return self.v[int(key[1], 16)]
            except ValueError:
                pass
        match key:
            case "i":
                return self.i
            case "pc":
                return self.pc
            case "sp":
                return self.sp
            case "dt":
                return self.dt
            case "st":
                return self.st
        raise ValueError(f"Unknown register '{name}'")

    # ========================================
    # Reset
    # ========================================

    def reset(self) -> None:
        """
        Reset the machine to its initial configuration.

        Clears registers, stack, timers, display, keys and memory, installs
        the font glyphs at $000 and sets PC to $200.
        """
        self.state = CPUState()
        self.memory.reset()
        self.display.reset()
        self.keypad.clear()
        self.timers.reset()
        logger.debug(f"CPU reset, PC=${self.pc:03X}")

    # ========================================
    # Main Execution Loop
    # ========================================

    def fetch(self) -> int:
        """Read the instruction word at PC without executing it."""
        pc = self.pc
        try:
            return self.memory.read_word(pc)
        except AddressOutOfBoundsError as e:
            raise AddressOutOfBoundsError(e.address, pc=pc) from e

    def cycle(self) -> Flow:
        """
        Execute exactly one instruction cycle.

        Returns:
            The control-flow effect that was applied to PC

        Raises:
            DecodeError: Unknown instruction word (no state changed)
            UnsupportedHostOperationError: 0NNN native call
            StackOverflowError / StackUnderflowError: malformed CALL/RET nesting
            AddressOutOfBoundsError: memory access outside $000-$FFF
        """
        pc = self.pc
        word = self.fetch()
        instr = decode(word, pc)

        try:
            flow = self._execute(instr, pc)
        except AddressOutOfBoundsError as e:
            if e.pc is not None:
                raise
            raise AddressOutOfBoundsError(e.address, pc=pc, word=word) from e

        match flow.kind:
            case FlowKind.ADVANCE:
                self.pc = pc + 2
            case FlowKind.SKIP:
                self.pc = pc + 4
            case FlowKind.JUMP:
                self.pc = flow.target
            case FlowKind.RETRY:
                pass

        status = CPUStatus.BLOCKED_ON_KEY if flow.kind is FlowKind.RETRY else CPUStatus.RUNNING
        if status is not self.state.status:
            logger.debug(f"CPU {status.name} at ${pc:03X}")
            self.state.status = status

        self.state.cycles += 1
        self.timers.tick()
        return flow

    def execute(self, max_cycles: int) -> int:
        """
        Run up to max_cycles instructions.

        Execution stops early if on_instruction returns False for the
        instruction about to run.

        Returns:
            Number of cycles actually executed
        """
        executed = 0
        while executed < max_cycles:
            if self.on_instruction:
                if not self.on_instruction(self.pc, self.fetch()):
                    break
            self.cycle()
            executed += 1
        return executed

    def step(self) -> Flow:
        """Execute exactly one instruction, ignoring hooks."""
        return self.cycle()

    # ========================================
    # Helpers
    # ========================================

    def _push(self, address: int, pc: int, word: int) -> None:
        if len(self.state.stack) >= self.STACK_DEPTH:
            raise StackOverflowError(
                f"call stack full ({self.STACK_DEPTH} entries)", pc=pc, word=word
            )
        self.state.stack.append(address)

    def _pop(self, pc: int, word: int) -> int:
        if not self.state.stack:
            raise StackUnderflowError("return with empty call stack", pc=pc, word=word)
        return self.state.stack.pop()

    def _set_with_flag(self, x: int, result: int, flag: bool) -> None:
        """Store result in Vx, then the flag in VF (VF wins if x is F)."""
        self.v[x] = result & 0xFF
        self.v[FLAG] = 1 if flag else 0

    # ========================================
    # Executor
    # ========================================

    def _execute(self, instr: Instruction, pc: int) -> Flow:
        """
        Apply one decoded instruction to the machine state.

        Args:
            instr: The decoded instruction
            pc: Address the instruction was fetched from

        Returns:
            The control-flow effect for the cycle driver
        """
        v = self.v
        x, y = instr.x, instr.y

        match instr.op:
            # ============================================
            # Flow control
            # ============================================
            case Op.SYS:
                raise UnsupportedHostOperationError(instr.word, pc)
            case Op.CLS:
                self.display.clear()
                return ADVANCE
            case Op.RET:
                return Flow.jump(self._pop(pc, instr.word))
            case Op.JP:
                return Flow.jump(instr.nnn)
            case Op.CALL:
                self._push(pc + 2, pc, instr.word)
                return Flow.jump(instr.nnn)
            case Op.JP_V0:
                return Flow.jump(v[0] + instr.nnn)

            # ============================================
            # Conditional skips
            # ============================================
            case Op.SE_IMM:
                return SKIP if v[x] == instr.kk else ADVANCE
            case Op.SNE_IMM:
                return SKIP if v[x] != instr.kk else ADVANCE
            case Op.SE_REG:
                return SKIP if v[x] == v[y] else ADVANCE
            case Op.SNE_REG:
                return SKIP if v[x] != v[y] else ADVANCE
            case Op.SKP:
                return SKIP if self.keypad[v[x] & 0xF] else ADVANCE
            case Op.SKNP:
                return ADVANCE if self.keypad[v[x] & 0xF] else SKIP

            # ============================================
            # Register loads and arithmetic
            # ============================================
            case Op.LD_IMM:
                v[x] = instr.kk
            case Op.ADD_IMM:
                v[x] = (v[x] + instr.kk) & 0xFF  # no carry flag
            case Op.LD_REG:
                v[x] = v[y]
            case Op.OR:
                v[x] = v[x] | v[y]
            case Op.AND:
                v[x] = v[x] & v[y]
            case Op.XOR:
                v[x] = v[x] ^ v[y]
            case Op.ADD_REG:
                total = v[x] + v[y]
                self._set_with_flag(x, total, total > 0xFF)
            case Op.SUB:
                a, b = v[x], v[y]
                self._set_with_flag(x, a - b, a >= b)
            case Op.SUBN:
                a, b = v[x], v[y]
                self._set_with_flag(x, b - a, b >= a)
            case Op.SHR:
                a = v[x]
                self._set_with_flag(x, a >> 1, a & 0x01)
            case Op.SHL:
                a = v[x]
                self._set_with_flag(x, a << 1, a & 0x80)
            case Op.RND:
                v[x] = self.rng.randrange(256) & instr.kk

            # ============================================
            # Index register and memory
            # ============================================
            case Op.LD_I:
                self.i = instr.nnn
            case Op.ADD_I_VX:
                self.i = self.i + v[x]
            case Op.LD_F_VX:
                self.i = v[x] * FONT_GLYPH_SIZE
            case Op.LD_B_VX:
                value = v[x]
                self.memory.write_bytes(
                    self.i, bytes([value // 100, (value // 10) % 10, value % 10])
                )
            case Op.LD_MEM_VX:
                self.memory.write_bytes(self.i, bytes(v[:x + 1]))
                self.i = self.i + x + 1
            case Op.LD_VX_MEM:
                v[:x + 1] = self.memory.read_bytes(self.i, x + 1)
                self.i = self.i + x + 1

            # ============================================
            # Display
            # ============================================
            case Op.DRW:
                rows = self.memory.read_bytes(self.i, instr.n)
                collision = self.display.draw_sprite(v[x], v[y], rows)
                v[FLAG] = 1 if collision else 0

            # ============================================
            # Timers and keypad
            # ============================================
            case Op.LD_VX_DT:
                v[x] = self.timers.delay
            case Op.LD_DT_VX:
                self.timers.delay = v[x]
            case Op.LD_ST_VX:
                self.timers.sound = v[x]
            case Op.LD_VX_K:
                key = self.keypad.first_pressed()
                if key is None:
                    return RETRY
                v[x] = key

        return ADVANCE
