"""
Breakpoint System for the CHIP-8 VM
===================================

Provides debugging capabilities:
- PC breakpoints (break when PC reaches address)
- Register conditions (break when registers match)
- Single-step mode and external break requests

The BreakpointManager is attached to the CPU's on_instruction hook and is
checked before each instruction executes.

Example usage:

    >>> from chip8_vm.emulator import Emulator, BreakReason
    >>> emu = Emulator()
    >>> emu.breakpoints.add_breakpoint(0x20A)
    >>> event = emu.run(10_000)
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Hit breakpoint at ${event.address:03X}")

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Set, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu import Chip8CPU

logger = logging.getLogger(__name__)


class BreakReason(Enum):
    """
    Enumeration of reasons why execution stopped.

    Used in BreakEvent to indicate what triggered the break.
    """
    NONE = auto()           # No specific reason (normal termination)
    PC_BREAKPOINT = auto()  # PC reached a breakpoint address
    REGISTER_CONDITION = auto()  # Register condition met
    STEP = auto()           # Single-step mode
    USER_INTERRUPT = auto() # User requested stop
    MAX_CYCLES = auto()     # Maximum cycle count reached


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC address involved (if applicable)
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at ${self.address:03X}" if self.address is not None else "Breakpoint"
            case BreakReason.REGISTER_CONDITION:
                return "Register condition met"
            case BreakReason.STEP:
                return "Single step"
            case BreakReason.USER_INTERRUPT:
                return "User interrupt"
            case BreakReason.MAX_CYCLES:
                return "Maximum cycles reached"
            case _:
                return "Unknown"


class RegisterCondition:
    """
    Condition on CPU registers.

    Supported registers: v0-vf, i, pc, sp, dt, st

    Supported operators:
    - '==' : Equal
    - '!=' : Not equal
    - '<'  : Less than
    - '<=' : Less than or equal
    - '>'  : Greater than
    - '>=' : Greater than or equal
    - '&'  : Bitwise AND test (true if result non-zero)

    Examples:
        >>> cond = RegisterCondition('v0', '==', 0x42)  # V0 equals 0x42
        >>> cond = RegisterCondition('i', '>', 0x300)   # I beyond 0x300
        >>> cond = RegisterCondition('vf', '&', 0x01)   # flag set
    """

    VALID_REGISTERS = frozenset(
        [f"v{n:x}" for n in range(16)] + ["i", "pc", "sp", "dt", "st"]
    )
    VALID_OPERATORS = frozenset({'==', '!=', '<', '<=', '>', '>=', '&'})

    def __init__(
        self,
        register: str,
        operator: str,
        value: int,
        description: str = ""
    ):
        self.register = register.lower()
        self.operator = operator
        self.value = value
        self.description = description or f"{register} {operator} {value}"

        if self.register not in self.VALID_REGISTERS:
            raise ValueError(
                f"Unknown register '{register}'. Valid registers: {', '.join(sorted(self.VALID_REGISTERS))}"
            )

        if self.operator not in self.VALID_OPERATORS:
            raise ValueError(
                f"Unknown operator '{operator}'. Valid operators: {', '.join(sorted(self.VALID_OPERATORS))}"
            )

    def check(self, cpu: "Chip8CPU") -> bool:
        """
        Check if condition is met against CPU state.

        Returns:
            True if condition is met, False otherwise
        """
        actual = cpu.register_value(self.register)

        match self.operator:
            case '==':
                return actual == self.value
            case '!=':
                return actual != self.value
            case '<':
                return actual < self.value
            case '<=':
                return actual <= self.value
            case '>':
                return actual > self.value
            case '>=':
                return actual >= self.value
            case '&':
                return (actual & self.value) != 0
            case _:
                return False

    def __repr__(self) -> str:
        return f"RegisterCondition({self.register!r}, {self.operator!r}, {self.value!r})"


class BreakpointManager:
    """
    Manages breakpoints and register conditions.

    Example:
        >>> mgr = BreakpointManager()
        >>> mgr.add_breakpoint(0x204)
        >>> mgr.add_condition('v0', '==', 0x00)
        >>> cpu.on_instruction = lambda pc, word: mgr.check_instruction(cpu, pc, word)
    """

    def __init__(self):
        self._pc_breakpoints: Set[int] = set()

        # Register conditions (list with possible None holes, so ids stay stable)
        self._register_conditions: List[Optional[RegisterCondition]] = []

        self._last_event: Optional[BreakEvent] = None
        self._step_mode: bool = False
        self._break_requested: bool = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """Get the last break event that occurred."""
        return self._last_event

    @property
    def step_mode(self) -> bool:
        return self._step_mode

    @step_mode.setter
    def step_mode(self, value: bool) -> None:
        self._step_mode = value

    @property
    def breakpoint_count(self) -> int:
        """Number of active PC breakpoints."""
        return len(self._pc_breakpoints)

    # =========================================================================
    # PC Breakpoints
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """
        Add PC breakpoint at address.

        Execution will stop when PC reaches this address, before the
        instruction at that address is executed.
        """
        self._pc_breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        self._pc_breakpoints.discard(address & 0xFFFF)

    def has_breakpoint(self, address: int) -> bool:
        return (address & 0xFFFF) in self._pc_breakpoints

    def clear_breakpoints(self) -> None:
        """Remove all PC breakpoints."""
        self._pc_breakpoints.clear()

    def list_breakpoints(self) -> List[int]:
        """Sorted list of breakpoint addresses."""
        return sorted(self._pc_breakpoints)

    # =========================================================================
    # Register Conditions
    # =========================================================================

    def add_register_condition(self, condition: RegisterCondition) -> int:
        """
        Add a register condition.

        Returns:
            Condition id, for remove_register_condition()
        """
        self._register_conditions.append(condition)
        return len(self._register_conditions) - 1

    def add_condition(self, register: str, operator: str, value: int) -> int:
        """Shorthand for add_register_condition(RegisterCondition(...))."""
        return self.add_register_condition(RegisterCondition(register, operator, value))

    def remove_register_condition(self, condition_id: int) -> None:
        if 0 <= condition_id < len(self._register_conditions):
            self._register_conditions[condition_id] = None

    def clear_register_conditions(self) -> None:
        self._register_conditions.clear()

    def list_register_conditions(self) -> List[tuple[int, RegisterCondition]]:
        """Active conditions as (id, condition) pairs."""
        return [
            (idx, cond)
            for idx, cond in enumerate(self._register_conditions)
            if cond is not None
        ]

    # =========================================================================
    # Control
    # =========================================================================

    def request_break(self) -> None:
        """Request execution to break before the next instruction."""
        self._break_requested = True

    def clear_break_request(self) -> None:
        self._break_requested = False

    def clear_last_event(self) -> None:
        self._last_event = None

    def clear_all(self) -> None:
        """Remove all breakpoints and conditions."""
        self.clear_breakpoints()
        self.clear_register_conditions()
        self._step_mode = False
        self._break_requested = False
        self._last_event = None

    # =========================================================================
    # Check Functions (called by CPU hooks)
    # =========================================================================

    def check_instruction(self, cpu: "Chip8CPU", pc: int, word: int) -> bool:
        """
        Check if we should break before executing instruction.

        Args:
            cpu: CPU instance
            pc: Current program counter
            word: Instruction word about to be executed

        Returns:
            True to continue execution, False to break
        """
        event: Optional[BreakEvent] = None

        if self._break_requested:
            self._break_requested = False
            event = BreakEvent(BreakReason.USER_INTERRUPT, address=pc, message="User interrupt")

        elif self._step_mode:
            self._step_mode = False
            event = BreakEvent(BreakReason.STEP, address=pc, message=f"Step at ${pc:03X}")

        elif pc in self._pc_breakpoints:
            event = BreakEvent(
                BreakReason.PC_BREAKPOINT, address=pc, message=f"Breakpoint at ${pc:03X}"
            )

        else:
            for cond in self._register_conditions:
                if cond is not None and cond.check(cpu):
                    event = BreakEvent(
                        BreakReason.REGISTER_CONDITION,
                        address=pc,
                        message=f"Condition: {cond.description}"
                    )
                    break

        if event is None:
            return True

        logger.debug(f"{event} (word ${word:04X})")
        self._last_event = event
        return False
