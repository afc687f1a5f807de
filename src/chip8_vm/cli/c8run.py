"""
c8run - Headless CHIP-8 Runner
==============================

Runs a CHIP-8 ROM for a fixed number of instructions without a window,
then reports the machine state. Useful for testing programs and capturing
screenshots in scripts.

Timers are driven by a virtual clock derived from the instruction count
(see --hz), so every run of the same ROM with the same seed and keys
produces the same result.

Usage Examples
--------------
Run a ROM and show the screen:
    $ c8run maze.ch8 --cycles 2000 --ascii

Hold keys while running:
    $ c8run pong.ch8 --key 1 --key Q --cycles 5000

Stop at an address:
    $ c8run game.ch8 --break 0x2F6

Save a screenshot:
    $ c8run maze.ch8 --screenshot maze.png --scale 10

Trace every instruction:
    $ c8run test.ch8 --cycles 20 --trace

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import ExitCode, handle_cli_exception
from chip8_vm.cli.params import ADDRESS, KEY
from chip8_vm.emulator import Emulator, EmulatorConfig
from chip8_vm.emulator.cpu import Chip8CPU
from chip8_vm.emulator.decoder import decode
from chip8_vm.errors import DecodeError

logger = logging.getLogger(__name__)

DEFAULT_CYCLES = 1000
DEFAULT_HZ = 500.0


# =============================================================================
# Helpers
# =============================================================================

class CycleClock:
    """
    Virtual clock advancing 1/hz seconds per executed instruction.

    The CPU is attached after construction, since the emulator needs the
    clock before its CPU exists.
    """

    def __init__(self, hz: float):
        self.hz = hz
        self.cpu: Optional[Chip8CPU] = None

    def __call__(self) -> float:
        if self.cpu is None:
            return 0.0
        return self.cpu.cycles / self.hz


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def format_registers(emu: Emulator) -> str:
    """Format the register file as a compact multi-line block."""
    regs = emu.registers
    v_line = " ".join(f"V{n:X}={regs[f'v{n:x}']:02X}" for n in range(16))
    return (
        f"PC=${regs['pc']:03X}  I=${regs['i']:04X}  SP={regs['sp']}  "
        f"DT={regs['dt']}  ST={regs['st']}\n"
        f"{v_line[:47]}\n"
        f"{v_line[48:]}"
    )


def trace_instruction(pc: int, word: int) -> None:
    try:
        text = str(decode(word, pc))
    except DecodeError:
        text = f"DW 0x{word:04X}"
    click.echo(f"${pc:03X}: {word >> 8:02X} {word & 0xFF:02X}  {text}", err=True)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--cycles",
    type=click.IntRange(min=0),
    default=DEFAULT_CYCLES,
    show_default=True,
    help="Maximum number of instructions to execute",
)
@click.option(
    "--hz",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_HZ,
    show_default=True,
    help="Virtual instruction rate used to pace the 60 Hz timers",
)
@click.option(
    "--seed",
    type=int,
    default=0,
    show_default=True,
    help="Seed for the RND instruction",
)
@click.option(
    "-k", "--key",
    "keys",
    type=KEY,
    multiple=True,
    help="Hold a key for the whole run (hex digit or host key; repeatable)",
)
@click.option(
    "-b", "--break",
    "breakpoints",
    type=ADDRESS,
    multiple=True,
    help="Stop when PC reaches ADDRESS (hex with 0x or $ prefix; repeatable)",
)
@click.option(
    "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the final display as a PNG file",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Pixel scale for --screenshot",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Print every instruction to stderr before it executes",
)
@click.option(
    "--ascii", "show_ascii",
    is_flag=True,
    help="Print the final display as ASCII art",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8run")
def main(
    rom_file: Path,
    cycles: int,
    hz: float,
    seed: int,
    keys: tuple[int, ...],
    breakpoints: tuple[int, ...],
    screenshot: Optional[Path],
    scale: int,
    trace: bool,
    show_ascii: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headless and report the final machine state.

    ROM_FILE is the program image to load at $200.

    Examples:

        # Run 2000 instructions and show the screen
        c8run maze.ch8 --cycles 2000 --ascii

        # Hold keypad key 5 (host key W)
        c8run game.ch8 --key W
    """
    setup_logging(verbose)

    try:
        clock = CycleClock(hz)
        emu = Emulator(EmulatorConfig(seed=seed, clock=clock))
        clock.cpu = emu.cpu

        rom = emu.load_rom(rom_file)
        logger.info(f"Loaded {rom.name} ({len(rom)} bytes)")

        for key in keys:
            emu.press_key(key)
        for address in breakpoints:
            emu.add_breakpoint(address)

        if trace:
            breakpoint_hook = emu.cpu.on_instruction

            def traced(pc: int, word: int) -> bool:
                if not breakpoint_hook(pc, word):
                    return False
                trace_instruction(pc, word)
                return True

            emu.cpu.on_instruction = traced

        event = emu.run(cycles)

        click.echo(f"Stopped: {event}")
        click.echo(f"Cycles: {emu.total_cycles}")
        if emu.is_blocked:
            click.echo("Waiting for key")
        if emu.timers.beeps:
            click.echo(f"Beeps: {emu.timers.beeps}")
        click.echo(format_registers(emu))

        if show_ascii:
            click.echo(emu.display_text)

        if screenshot:
            png = emu.render_display(scale=scale)
            if png is None:
                click.echo("Error: Pillow is required for --screenshot", err=True)
                sys.exit(ExitCode.INTERNAL_ERROR)
            screenshot.write_bytes(png)
            if verbose:
                click.echo(f"Screenshot written to: {screenshot}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Machine")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
