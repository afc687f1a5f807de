"""
c8disasm - CHIP-8 Disassembler Command-Line Interface
=====================================================

This module implements the command-line interface for the CHIP-8
disassembler.

Usage Examples
--------------
Disassemble a ROM:
    $ c8disasm maze.ch8

With base address:
    $ c8disasm code.bin --address 0x300

Limit number of instructions:
    $ c8disasm pong.ch8 --count 20

Output to file:
    $ c8disasm pong.ch8 -o pong.asm

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import ExitCode, handle_cli_exception
from chip8_vm.cli.params import ADDRESS
from chip8_vm.disassembler import Chip8Disassembler
from chip8_vm.emulator.memory import Memory


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=ADDRESS,
    default=Memory.PROGRAM_START,
    help="Base address for disassembly (hex with 0x or $ prefix, or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only mnemonic and operand)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: int,
    count: Optional[int],
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 program image.

    INPUT_FILE is the ROM to disassemble.

    Words that are not instructions (sprites, padding) are listed as
    DW directives.

    Examples:

        # Disassemble the first 20 instructions
        c8disasm pong.ch8 --count 20 -o pong.asm
    """
    try:
        data = input_file.read_bytes()
    except OSError as e:
        handle_cli_exception(e, verbose=verbose)

    if len(data) == 0:
        click.echo(f"Error: {input_file} is empty", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if verbose:
        click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
        click.echo(f"Base address: ${address:03X}", err=True)

    disasm = Chip8Disassembler(show_bytes=not no_bytes)
    instructions = disasm.disassemble(data, start_address=address, count=count)

    output_lines = [
        f"; Disassembly of {input_file.name}",
        f"; Size: {len(data)} bytes",
        f"; Base address: ${address:03X}",
        "",
    ]
    output_lines.extend(disasm.format_listing(instructions))

    result = "\n".join(output_lines) + "\n"

    if output:
        try:
            output.write_text(result, encoding="utf-8")
        except OSError as e:
            handle_cli_exception(e, verbose=verbose)
        if verbose:
            click.echo(f"Output written to: {output}", err=True)
    else:
        click.echo(result, nl=False)

    if verbose:
        click.echo(f"Instructions disassembled: {len(instructions)}", err=True)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
