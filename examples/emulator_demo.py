#!/usr/bin/env python3
"""
CHIP-8 VM Demo
==============

This script demonstrates how to use the chip8_vm emulator to:
1. Create an emulator with a reproducible configuration
2. Load a program
3. Run it and inspect the display
4. Feed keypad input
5. Use breakpoints
6. Take screenshots

Usage:
    source .venv/bin/activate
    python examples/emulator_demo.py [rom.ch8]

Without a ROM argument a small built-in program is used: it draws a
three-digit number and then records every key pressed in V6.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import sys
from pathlib import Path

from chip8_vm.emulator import BreakReason, Emulator, EmulatorConfig

# Built-in program: draw V2 as three decimal digits, then wait for keys.
COUNTER_PROGRAM = bytes([
    0x62, 0x00,   # $200: LD V2, 0
    0x00, 0xE0,   # $202: CLS
    0xA3, 0x00,   # $204: LD I, $300
    0xF2, 0x33,   # $206: LD B, V2
    0xF2, 0x65,   # $208: LD V2, [I]      V0..V2 = hundreds, tens, units
    0x63, 0x08,   # $20A: LD V3, 8        x
    0x64, 0x08,   # $20C: LD V4, 8        y
    0xF0, 0x29,   # $20E: LD F, V0
    0xD3, 0x45,   # $210: DRW V3, V4, 5
    0x73, 0x06,   # $212: ADD V3, 6
    0xF1, 0x29,   # $214: LD F, V1
    0xD3, 0x45,   # $216: DRW V3, V4, 5
    0x73, 0x06,   # $218: ADD V3, 6
    0xF2, 0x29,   # $21A: LD F, V2
    0xD3, 0x45,   # $21C: DRW V3, V4, 5
    0xF6, 0x0A,   # $21E: LD V6, K
    0x12, 0x1E,   # $220: JP $21E
])


def main():
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    # seed makes the RND instruction reproducible; clock may be replaced to
    # drive the 60 Hz timers from something other than wall time.

    print("Creating CHIP-8 emulator...")
    emu = Emulator(EmulatorConfig(seed=1))

    # ==========================================================================
    # 2. Load a program
    # ==========================================================================
    if len(sys.argv) > 1:
        rom = emu.load_rom(sys.argv[1])
    else:
        rom = emu.load_bytes(COUNTER_PROGRAM, name="counter")
    print(f"  Loaded {rom.name} ({len(rom)} bytes)")

    print("\nFirst instructions:")
    for line in emu.disassemble_at(0x200, 6):
        print(f"  {line}")

    # ==========================================================================
    # 3. Run and inspect the display
    # ==========================================================================
    event = emu.run(500)
    print(f"\nStopped: {event} after {emu.total_cycles} cycles")
    if emu.is_blocked:
        print("  Program is waiting for a key")
    print(emu.display_text)

    # ==========================================================================
    # 4. Keypad input
    # ==========================================================================
    # Keys accept hex indices (0x0-0xF) or host names on the 1234/QWER/ASDF/ZXCV
    # block. tap_key holds the key for a number of instructions.
    emu.tap_key("Q", hold_cycles=2)
    print(f"\nAfter tapping Q: V6={emu.registers['v6']:#04x}")

    # ==========================================================================
    # 5. Breakpoints
    # ==========================================================================
    emu.load_bytes(COUNTER_PROGRAM, name="counter")
    emu.add_breakpoint(0x210)
    event = emu.run(1000)
    if event.reason == BreakReason.PC_BREAKPOINT:
        regs = emu.registers
        print(f"\nHit breakpoint at ${event.address:03X}: "
              f"I=${regs['i']:03X} V3={regs['v3']} V4={regs['v4']}")
    emu.clear_breakpoints()

    # ==========================================================================
    # 6. Take screenshots
    # ==========================================================================
    emu.run(1000)
    png = emu.render_display(scale=10)
    if png:
        path = output_dir / "chip8_demo.png"
        path.write_bytes(png)
        print(f"\nScreenshot saved to {path}")
    else:
        print("\nPillow not installed, skipping screenshot")


if __name__ == "__main__":
    main()
