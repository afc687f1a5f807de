"""
Command-Line Tool Tests
=======================

Tests for c8run and c8disasm using click's CliRunner.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from chip8_vm.cli.c8disasm import main as c8disasm
from chip8_vm.cli.c8run import main as c8run
from chip8_vm.cli.errors import ExitCode


ADD_PROGRAM = bytes([0x60, 0x0A, 0x61, 0x05, 0x80, 0x14, 0x12, 0x06])
WAIT_KEY = bytes([0xF0, 0x0A, 0x12, 0x02])
DRAW_DIGIT = bytes([0x60, 0x08, 0xF0, 0x29, 0x61, 0x02, 0xD1, 0x15, 0x12, 0x08])


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def rom(tmp_path):
    """Factory writing a ROM file and returning its path as a string."""
    def write(data: bytes, name: str = "test.ch8") -> str:
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return write


# =============================================================================
# c8run
# =============================================================================

class TestC8Run:
    """Headless runner."""

    def test_run_reports_registers(self, runner, rom):
        result = runner.invoke(c8run, [rom(ADD_PROGRAM), "--cycles", "3"])
        assert result.exit_code == 0, result.output
        assert "Stopped: Reached max cycles (3)" in result.output
        assert "Cycles: 3" in result.output
        assert "PC=$206" in result.output
        assert "V0=0F" in result.output
        assert "VF=00" in result.output

    def test_breakpoint(self, runner, rom):
        result = runner.invoke(c8run, [rom(ADD_PROGRAM), "--break", "0x204"])
        assert result.exit_code == 0, result.output
        assert "Stopped: Breakpoint at $204" in result.output
        assert "Cycles: 2" in result.output

    def test_breakpoint_dollar_syntax(self, runner, rom):
        result = runner.invoke(c8run, [rom(ADD_PROGRAM), "-b", "$202"])
        assert "Breakpoint at $202" in result.output

    def test_held_key(self, runner, rom):
        result = runner.invoke(c8run, [rom(WAIT_KEY), "--key", "W", "--cycles", "2"])
        assert result.exit_code == 0, result.output
        assert "V0=05" in result.output

    def test_hex_digit_key(self, runner, rom):
        result = runner.invoke(c8run, [rom(WAIT_KEY), "-k", "A", "--cycles", "2"])
        assert "V0=0A" in result.output

    def test_waiting_for_key(self, runner, rom):
        result = runner.invoke(c8run, [rom(WAIT_KEY), "--cycles", "5"])
        assert result.exit_code == 0
        assert "Waiting for key" in result.output
        assert "PC=$200" in result.output

    def test_ascii_display(self, runner, rom):
        result = runner.invoke(c8run, [rom(DRAW_DIGIT), "--cycles", "4", "--ascii"])
        assert result.exit_code == 0
        assert "..####" in result.output

    def test_trace(self, runner, rom):
        result = runner.invoke(c8run, [rom(ADD_PROGRAM), "--cycles", "2", "--trace"])
        assert "$200: 60 0A  LD V0, 0x0A" in result.output
        assert "$202: 61 05  LD V1, 0x05" in result.output

    def test_beep_reported(self, runner, rom):
        program = bytes([0x60, 0x01, 0xF0, 0x18, 0x12, 0x04])
        result = runner.invoke(c8run, [rom(program), "--cycles", "3", "--hz", "60"])
        assert result.exit_code == 0, result.output
        assert "Beeps: 1" in result.output

    def test_same_seed_same_output(self, runner, rom):
        path = rom(bytes([0xC0, 0xFF, 0xC1, 0xFF]))
        first = runner.invoke(c8run, [path, "--cycles", "2", "--seed", "5"])
        second = runner.invoke(c8run, [path, "--cycles", "2", "--seed", "5"])
        assert first.output == second.output

    def test_screenshot(self, runner, rom, tmp_path):
        pytest.importorskip("PIL")
        png = tmp_path / "shot.png"
        result = runner.invoke(c8run, [rom(DRAW_DIGIT), "--cycles", "4",
                                       "--screenshot", str(png), "--scale", "2"])
        assert result.exit_code == 0, result.output
        assert png.read_bytes().startswith(b"\x89PNG")

    def test_machine_error_exit_code(self, runner, rom):
        result = runner.invoke(c8run, [rom(bytes([0x51, 0x21]))])
        assert result.exit_code == ExitCode.MACHINE_ERROR
        assert "unsupported instruction" in result.output

    def test_native_call_exit_code(self, runner, rom):
        # Falls through into zeroed memory, i.e. SYS $000
        result = runner.invoke(c8run, [rom(bytes([0x60, 0x0A])), "--cycles", "5"])
        assert result.exit_code == ExitCode.MACHINE_ERROR
        assert "not supported" in result.output

    def test_oversized_rom(self, runner, rom):
        result = runner.invoke(c8run, [rom(bytes(0xE00))])
        assert result.exit_code == ExitCode.MACHINE_ERROR
        assert "ROM is 3584 bytes" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(c8run, [str(tmp_path / "missing.ch8")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    @pytest.mark.parametrize("args", [
        ["--break", "zz"],
        ["--break", "0x1000"],
        ["--key", "P"],
        ["--hz", "0"],
        ["--cycles", "-1"],
    ])
    def test_invalid_arguments(self, runner, rom, args):
        result = runner.invoke(c8run, [rom(ADD_PROGRAM), *args])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_version(self, runner):
        result = runner.invoke(c8run, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output


# =============================================================================
# c8disasm
# =============================================================================

class TestC8Disasm:
    """Disassembler command."""

    def test_listing(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(ADD_PROGRAM)])
        assert result.exit_code == 0, result.output
        assert "; Disassembly of test.ch8" in result.output
        assert "$200: 60 0A  LD V0, 0x0A" in result.output
        assert "$206: 12 06  JP 0x206" in result.output

    def test_no_bytes(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(ADD_PROGRAM), "--no-bytes"])
        assert "$204: ADD V0, V1" in result.output

    def test_count(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(ADD_PROGRAM), "--count", "1"])
        assert "$200:" in result.output
        assert "$202:" not in result.output

    def test_address(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(ADD_PROGRAM), "--address", "0x300"])
        assert "$300: 60 0A" in result.output

    def test_data_words(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(bytes([0x51, 0x21]))])
        assert result.exit_code == 0
        assert "DW 0x5121" in result.output

    def test_output_file(self, runner, rom, tmp_path):
        out = tmp_path / "listing.asm"
        result = runner.invoke(c8disasm, [rom(ADD_PROGRAM), "-o", str(out)])
        assert result.exit_code == 0
        assert "LD V1, 0x05" in out.read_text(encoding="utf-8")
        assert result.output == ""

    def test_empty_file(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(b"")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_address(self, runner, rom):
        result = runner.invoke(c8disasm, [rom(ADD_PROGRAM), "--address", "nope"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_isolated_filesystem(self, runner):
        with runner.isolated_filesystem():
            Path("game.ch8").write_bytes(bytes([0x00, 0xE0]))
            result = runner.invoke(c8disasm, ["game.ch8", "--no-bytes"])
            assert "$200: CLS" in result.output
