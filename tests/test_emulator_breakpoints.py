"""
Breakpoint System Unit Tests
============================

Tests for PC breakpoints, register conditions, step mode and break requests.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)


# =============================================================================
# Mock CPU for Testing
# =============================================================================

class MockCPU:
    """Mock CPU exposing register_value() like Chip8CPU."""

    def __init__(self):
        self.regs = {f"v{n:x}": 0 for n in range(16)}
        self.regs.update({"i": 0, "pc": 0x200, "sp": 0, "dt": 0, "st": 0})

    def register_value(self, name: str) -> int:
        return self.regs[name.lower()]


@pytest.fixture
def mgr():
    return BreakpointManager()


@pytest.fixture
def cpu():
    return MockCPU()


# =============================================================================
# BreakpointManager Tests
# =============================================================================

class TestBreakpointManager:
    """Test BreakpointManager initialization and basic operations."""

    def test_initial_state(self, mgr):
        """Manager starts with no breakpoints."""
        assert mgr.breakpoint_count == 0
        assert mgr.list_register_conditions() == []
        assert mgr.last_event is None

    def test_step_mode(self, mgr):
        assert mgr.step_mode is False
        mgr.step_mode = True
        assert mgr.step_mode is True


# =============================================================================
# PC Breakpoint Tests
# =============================================================================

class TestPCBreakpoints:
    """Test PC breakpoint functionality."""

    def test_add_breakpoint(self, mgr):
        mgr.add_breakpoint(0x204)
        assert mgr.has_breakpoint(0x204)
        assert mgr.breakpoint_count == 1

    def test_add_twice(self, mgr):
        mgr.add_breakpoint(0x204)
        mgr.add_breakpoint(0x204)
        assert mgr.breakpoint_count == 1

    def test_remove_breakpoint(self, mgr):
        mgr.add_breakpoint(0x204)
        mgr.remove_breakpoint(0x204)
        assert not mgr.has_breakpoint(0x204)

    def test_remove_missing_is_silent(self, mgr):
        mgr.remove_breakpoint(0x300)

    def test_list_sorted(self, mgr):
        for address in (0x300, 0x200, 0x250):
            mgr.add_breakpoint(address)
        assert mgr.list_breakpoints() == [0x200, 0x250, 0x300]

    def test_clear(self, mgr):
        mgr.add_breakpoint(0x200)
        mgr.clear_breakpoints()
        assert mgr.breakpoint_count == 0


# =============================================================================
# Register Condition Tests
# =============================================================================

class TestRegisterCondition:
    """Test condition evaluation."""

    @pytest.mark.parametrize("operator,value,expected", [
        ("==", 5, True), ("==", 6, False),
        ("!=", 6, True), ("<", 6, True),
        ("<=", 5, True), (">", 4, True),
        (">=", 6, False), ("&", 0x04, True),
        ("&", 0x02, False),
    ])
    def test_operators(self, cpu, operator, value, expected):
        cpu.regs["v3"] = 5
        assert RegisterCondition("v3", operator, value).check(cpu) is expected

    def test_register_name_case(self, cpu):
        cpu.regs["vf"] = 1
        assert RegisterCondition("VF", "==", 1).check(cpu)

    def test_timer_register(self, cpu):
        cpu.regs["dt"] = 0
        assert RegisterCondition("dt", "==", 0).check(cpu)

    def test_invalid_register(self):
        with pytest.raises(ValueError, match="Unknown register"):
            RegisterCondition("vg", "==", 0)

    def test_invalid_operator(self):
        with pytest.raises(ValueError, match="Unknown operator"):
            RegisterCondition("v0", "=~", 0)

    def test_default_description(self):
        assert RegisterCondition("i", ">", 0x300).description == "i > 768"

    def test_add_and_remove(self, mgr):
        cid = mgr.add_condition("v0", "==", 1)
        assert len(mgr.list_register_conditions()) == 1
        mgr.remove_register_condition(cid)
        assert mgr.list_register_conditions() == []

    def test_ids_stable_after_removal(self, mgr):
        first = mgr.add_condition("v0", "==", 1)
        second = mgr.add_condition("v1", "==", 1)
        mgr.remove_register_condition(first)
        assert [cid for cid, _ in mgr.list_register_conditions()] == [second]


# =============================================================================
# check_instruction Tests
# =============================================================================

class TestCheckInstruction:
    """Test the hook called before each instruction."""

    def test_continue_when_nothing_matches(self, mgr, cpu):
        assert mgr.check_instruction(cpu, 0x200, 0x600A) is True
        assert mgr.last_event is None

    def test_pc_breakpoint(self, mgr, cpu):
        mgr.add_breakpoint(0x204)
        assert mgr.check_instruction(cpu, 0x204, 0x8014) is False
        assert mgr.last_event.reason == BreakReason.PC_BREAKPOINT
        assert mgr.last_event.address == 0x204

    def test_register_condition(self, mgr, cpu):
        mgr.add_condition("v0", ">=", 0x10)
        assert mgr.check_instruction(cpu, 0x200, 0) is True
        cpu.regs["v0"] = 0x10
        assert mgr.check_instruction(cpu, 0x202, 0) is False
        assert mgr.last_event.reason == BreakReason.REGISTER_CONDITION
        assert "v0 >= 16" in mgr.last_event.message

    def test_step_mode_is_one_shot(self, mgr, cpu):
        mgr.step_mode = True
        assert mgr.check_instruction(cpu, 0x200, 0) is False
        assert mgr.last_event.reason == BreakReason.STEP
        assert mgr.step_mode is False
        assert mgr.check_instruction(cpu, 0x202, 0) is True

    def test_request_break(self, mgr, cpu):
        mgr.request_break()
        assert mgr.check_instruction(cpu, 0x200, 0) is False
        assert mgr.last_event.reason == BreakReason.USER_INTERRUPT
        assert mgr.check_instruction(cpu, 0x200, 0) is True

    def test_request_break_cleared(self, mgr, cpu):
        mgr.request_break()
        mgr.clear_break_request()
        assert mgr.check_instruction(cpu, 0x200, 0) is True

    def test_interrupt_takes_priority(self, mgr, cpu):
        mgr.add_breakpoint(0x200)
        mgr.request_break()
        mgr.check_instruction(cpu, 0x200, 0)
        assert mgr.last_event.reason == BreakReason.USER_INTERRUPT


# =============================================================================
# BreakEvent Tests
# =============================================================================

class TestBreakEvent:
    """Test event formatting."""

    def test_message_wins(self):
        assert str(BreakEvent(BreakReason.STEP, 0x200, "custom")) == "custom"

    def test_default_breakpoint_text(self):
        assert str(BreakEvent(BreakReason.PC_BREAKPOINT, 0x20A)) == "Breakpoint at $20A"

    def test_default_max_cycles_text(self):
        assert str(BreakEvent(BreakReason.MAX_CYCLES)) == "Maximum cycles reached"


class TestClearAll:
    """Test clear_all()."""

    def test_clear_all(self, mgr, cpu):
        mgr.add_breakpoint(0x200)
        mgr.add_condition("v0", "==", 0)
        mgr.step_mode = True
        mgr.check_instruction(cpu, 0x200, 0)

        mgr.clear_all()

        assert mgr.breakpoint_count == 0
        assert mgr.list_register_conditions() == []
        assert mgr.step_mode is False
        assert mgr.last_event is None
