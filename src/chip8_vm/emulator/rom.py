"""
CHIP-8 Program Images
=====================

A CHIP-8 ROM is a raw stream of big-endian instruction words and data with
no header or magic bytes. It is copied verbatim to $200 before the first
cycle, so it can be at most $DFF (3551) bytes long.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..errors import RomSizeError
from .memory import Memory

logger = logging.getLogger(__name__)

MAX_ROM_SIZE = Memory.PROGRAM_SIZE


@dataclass(frozen=True)
class Rom:
    """
    A validated program image.

    Attributes:
        data: Raw image bytes
        name: Display name (file name when loaded from disk)
    """
    data: bytes
    name: str = "<bytes>"

    def __post_init__(self) -> None:
        if len(self.data) > MAX_ROM_SIZE:
            raise RomSizeError(len(self.data), MAX_ROM_SIZE)

    def __len__(self) -> int:
        return len(self.data)

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "<bytes>") -> "Rom":
        """Wrap an in-memory image."""
        return cls(bytes(data), name)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Rom":
        """
        Read a ROM file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            RomSizeError: If the file is larger than MAX_ROM_SIZE
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")
        rom = cls(path.read_bytes(), path.name)
        logger.debug(f"Read ROM '{rom.name}' ({len(rom)} bytes)")
        return rom
