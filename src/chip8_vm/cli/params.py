"""
Shared Click Parameter Types
============================

Parameter types used by more than one CLI tool.
"""

from typing import Optional

import click

from chip8_vm.emulator.keyboard import Keypad
from chip8_vm.emulator.memory import Memory


class AddressParam(click.ParamType):
    """
    Click parameter type for CHIP-8 addresses.

    Accepts: 0x200, $200 or decimal 512. Must fall inside $000-$FFF.
    """
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to an address."""
        if isinstance(value, int):
            address = value
        else:
            text = value.strip()
            try:
                if text.lower().startswith("0x"):
                    address = int(text, 16)
                elif text.startswith("$"):
                    address = int(text[1:], 16)
                else:
                    address = int(text)
            except ValueError:
                self.fail(f"Invalid address '{value}'", param, ctx)

        if not 0 <= address < Memory.SIZE:
            self.fail(f"Address must be $000-${Memory.SIZE - 1:03X}, got {value}", param, ctx)
        return address


class KeyParam(click.ParamType):
    """
    Click parameter type for keypad keys.

    Accepts a hex digit (0-F) or a host key name (1234 QWER ASDF ZXCV).
    """
    name = "key"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        if isinstance(value, int):
            return Keypad.resolve(value)
        text = value.strip()
        # A single hex digit names the keypad key directly
        if len(text) == 1 and text.upper() in "0123456789ABCDEF":
            return int(text, 16)
        try:
            return Keypad.resolve(text)
        except ValueError as e:
            self.fail(str(e), param, ctx)


ADDRESS = AddressParam()
KEY = KeyParam()
