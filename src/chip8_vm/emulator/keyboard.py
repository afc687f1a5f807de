"""
Hex Keypad for the CHIP-8 VM
============================

The CHIP-8 input device is a 16-key hexadecimal keypad. The VM only sees
16 "is held" flags; the host input layer decides when to set and clear
them.

Keypad Layout (COSMAC VIP) and the conventional host keys mapped to it:

    1 2 3 C        1 2 3 4
    4 5 6 D   <-   Q W E R
    7 8 9 E        A S D F
    A 0 B F        Z X C V

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Dict, List, Optional, Union


# =============================================================================
# HOST KEY TO KEYPAD MAPPING
# =============================================================================

KEY_TO_HEX: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

KeyName = Union[int, str]


class Keypad:
    """
    Sixteen independent key flags, indexed 0x0-0xF.

    Keys may be given as hex indices (``0xA``), hex digit strings prefixed
    with ``0x`` (``"0xA"``) or host key names from KEY_TO_HEX (``"Z"``).

    Example:
        >>> kp = Keypad()
        >>> kp.key_down("Q")
        >>> kp.is_down(0x4)
        True
        >>> kp.first_pressed()
        4
    """

    NUM_KEYS = 16

    def __init__(self):
        self._keys = [False] * self.NUM_KEYS

    def __len__(self) -> int:
        return self.NUM_KEYS

    def __getitem__(self, index: int) -> bool:
        return self._keys[index & 0xF]

    def __setitem__(self, index: int, down: bool) -> None:
        self.set_key(index, down)

    @staticmethod
    def resolve(key: KeyName) -> int:
        """
        Translate a key designation into a keypad index.

        Raises:
            ValueError: If the key is unknown or out of range
        """
        if isinstance(key, int):
            if not 0 <= key < Keypad.NUM_KEYS:
                raise ValueError(f"Keypad index must be 0x0-0xF, got {key:#x}")
            return key

        name = key.strip().upper()
        if name in KEY_TO_HEX:
            return KEY_TO_HEX[name]
        if name.startswith("0X") and len(name) == 3:
            return int(name[2], 16)

        raise ValueError(f"Unknown key '{key}'")

    def set_key(self, key: KeyName, down: bool) -> None:
        """Set the held state of one key."""
        self._keys[self.resolve(key)] = bool(down)

    def key_down(self, key: KeyName) -> None:
        """Press a key."""
        self.set_key(key, True)

    def key_up(self, key: KeyName) -> None:
        """Release a key."""
        self.set_key(key, False)

    def is_down(self, key: KeyName) -> bool:
        """Check if a key is currently held."""
        return self._keys[self.resolve(key)]

    def clear(self) -> None:
        """Release all keys."""
        self._keys = [False] * self.NUM_KEYS

    def first_pressed(self) -> Optional[int]:
        """Lowest-indexed held key, or None if no key is held."""
        for index, down in enumerate(self._keys):
            if down:
                return index
        return None

    def pressed(self) -> List[int]:
        """Indices of all held keys."""
        return [i for i, down in enumerate(self._keys) if down]
