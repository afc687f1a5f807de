"""
CHIP-8 VM Command-Line Interface
================================

This package provides command-line tools for the CHIP-8 VM:

- **c8run**: Headless ROM runner
- **c8disasm**: CHIP-8 disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c8run", "c8disasm"]
