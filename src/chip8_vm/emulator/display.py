"""
Monochrome Display for the CHIP-8 VM
====================================

The CHIP-8 screen is a 64 x 32 grid of on/off pixels addressed row-major
from the top-left corner. Only two operations change it:

- CLS clears every pixel
- DRW XORs an 8-pixel-wide sprite onto the grid, wrapping on both axes,
  and reports whether any lit pixel was switched off (a collision)

The display keeps a dirty flag so a rendering collaborator can redraw only
when something changed since its last read.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Optional, List


class Display:
    """
    64 x 32 XOR-composited pixel buffer.

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0xF0, 0x90, 0xF0]))
        False
        >>> display.get_pixel(0, 0)
        True
        >>> display.draw_sprite(0, 0, bytes([0xF0, 0x90, 0xF0]))  # erase
        True
    """

    WIDTH = 64
    HEIGHT = 32
    SPRITE_WIDTH = 8

    def __init__(self):
        self._pixels = bytearray(self.WIDTH * self.HEIGHT)

        # Track if display needs refresh (for external rendering)
        self._needs_refresh = True

    # =========================================================================
    # State
    # =========================================================================

    @property
    def width(self) -> int:
        return self.WIDTH

    @property
    def height(self) -> int:
        return self.HEIGHT

    @property
    def needs_refresh(self) -> bool:
        """True if display content has changed since last read."""
        return self._needs_refresh

    def reset(self) -> None:
        """Clear the display (power-on state)."""
        self.clear()

    def clear(self) -> None:
        """Switch every pixel off."""
        self._pixels[:] = bytes(len(self._pixels))
        self._needs_refresh = True

    def get_pixel(self, x: int, y: int) -> bool:
        """Return the state of the pixel at (x, y); coordinates wrap."""
        return self._pixels[(y % self.HEIGHT) * self.WIDTH + (x % self.WIDTH)] != 0

    def lit_count(self) -> int:
        """Number of pixels currently on."""
        return sum(self._pixels)

    # =========================================================================
    # Drawing
    # =========================================================================

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """
        XOR a sprite onto the display.

        Each byte in ``rows`` is one sprite row; bit 7 is the leftmost pixel.
        The origin wraps into the screen and every pixel wraps independently
        on both axes.

        Args:
            x: Column of the sprite's left edge
            y: Row of the sprite's top edge
            rows: Sprite data, one byte per row

        Returns:
            True if any previously lit pixel was switched off
        """
        collision = False
        for row_idx, row_data in enumerate(rows):
            py = (y + row_idx) % self.HEIGHT
            base = py * self.WIDTH
            for bit_idx in range(self.SPRITE_WIDTH):
                if not (row_data >> (7 - bit_idx)) & 1:
                    continue
                offset = base + (x + bit_idx) % self.WIDTH
                if self._pixels[offset]:
                    collision = True
                self._pixels[offset] ^= 1
        self._needs_refresh = True
        return collision

    # =========================================================================
    # Pixel Buffer API (for graphical rendering)
    # =========================================================================

    def get_pixel_buffer(self) -> bytes:
        """
        Get display as pixel buffer.

        Returns:
            One byte per pixel, row-major, 255 for lit and 0 for dark.
            Size: 64 x 32 = 2048 bytes.

        Reading the buffer clears the dirty flag.
        """
        self._needs_refresh = False
        return bytes(p * 255 for p in self._pixels)

    def get_text_grid(self, on: str = "#", off: str = ".") -> List[str]:
        """Render the display as 32 strings of 64 characters."""
        lines = []
        for row in range(self.HEIGHT):
            start = row * self.WIDTH
            cells = self._pixels[start:start + self.WIDTH]
            lines.append("".join(on if p else off for p in cells))
        return lines

    def get_text(self) -> str:
        """Render the display as a single newline-separated string."""
        return "\n".join(self.get_text_grid())

    def render_image(
        self,
        scale: int = 8,
        ink_color: tuple = (255, 255, 255),
        paper_color: tuple = (0, 0, 0),
    ) -> Optional[bytes]:
        """
        Render display as PNG image (requires PIL).

        Args:
            scale: Size in image pixels of one display pixel
            ink_color: RGB tuple for lit pixels
            paper_color: RGB tuple for dark pixels

        Returns:
            PNG image bytes, or None if PIL not available
        """
        try:
            from PIL import Image, ImageDraw
            import io
        except ImportError:
            return None

        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")

        img = Image.new('RGB', (self.WIDTH * scale, self.HEIGHT * scale), color=paper_color)
        draw = ImageDraw.Draw(img)

        for offset, pixel_on in enumerate(self._pixels):
            if not pixel_on:
                continue
            px = (offset % self.WIDTH) * scale
            py = (offset // self.WIDTH) * scale
            draw.rectangle([px, py, px + scale - 1, py + scale - 1], fill=ink_color)

        # Export as PNG
        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        return buffer.getvalue()
