"""
Keypad Unit Tests
=================

Tests for the 16-key keypad and the host key mapping.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import KEY_TO_HEX, Keypad


@pytest.fixture
def keypad():
    return Keypad()


class TestKeyMapping:
    """Host key names resolve to the COSMAC VIP layout."""

    @pytest.mark.parametrize("name,index", [
        ("1", 0x1), ("2", 0x2), ("3", 0x3), ("4", 0xC),
        ("Q", 0x4), ("W", 0x5), ("E", 0x6), ("R", 0xD),
        ("A", 0x7), ("S", 0x8), ("D", 0x9), ("F", 0xE),
        ("Z", 0xA), ("X", 0x0), ("C", 0xB), ("V", 0xF),
    ])
    def test_resolve_name(self, name, index):
        assert Keypad.resolve(name) == index

    def test_mapping_is_a_permutation(self):
        assert sorted(KEY_TO_HEX.values()) == list(range(16))

    def test_resolve_lowercase(self):
        assert Keypad.resolve("q") == 0x4

    def test_resolve_index(self):
        assert Keypad.resolve(0xB) == 0xB

    def test_resolve_hex_string(self):
        assert Keypad.resolve("0xA") == 0xA

    @pytest.mark.parametrize("bad", [16, -1, "P", "0x10", ""])
    def test_resolve_invalid(self, bad):
        with pytest.raises(ValueError):
            Keypad.resolve(bad)


class TestKeyState:
    """Press, release and query."""

    def test_initially_released(self, keypad):
        assert keypad.pressed() == []
        assert keypad.first_pressed() is None

    def test_key_down_up(self, keypad):
        keypad.key_down("W")
        assert keypad.is_down(0x5)
        assert keypad[0x5]
        keypad.key_up(0x5)
        assert not keypad.is_down("W")

    def test_first_pressed_is_lowest(self, keypad):
        keypad.key_down(0xE)
        keypad.key_down(0x3)
        assert keypad.first_pressed() == 0x3
        assert keypad.pressed() == [0x3, 0xE]

    def test_setitem(self, keypad):
        keypad[0x9] = True
        assert keypad.is_down(0x9)

    def test_getitem_masks_index(self, keypad):
        keypad.key_down(0x3)
        assert keypad[0x13]

    def test_clear(self, keypad):
        for key in range(16):
            keypad.key_down(key)
        keypad.clear()
        assert keypad.pressed() == []

    def test_len(self, keypad):
        assert len(keypad) == 16
