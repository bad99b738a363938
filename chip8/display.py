"""Monochrome framebuffer for the CHIP-8 interpreter."""

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


class Framebuffer:
    """64x32 grid of on/off pixels, row-major, single buffered."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._pixels: list[bool] = [False] * (width * height)

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = [False] * (self.width * self.height)

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """XOR sprite rows onto the screen with top-left corner at (x, y).

        Each byte is one 8-pixel row, most significant bit leftmost. Both
        axes wrap around the screen edges.

        Returns:
            True if any pixel was switched from on to off
        """
        collision = False
        for row, bits in enumerate(sprite):
            py = (y + row) % self.height
            for col in range(8):
                if bits & (0x80 >> col):
                    idx = py * self.width + (x + col) % self.width
                    collision |= self._pixels[idx]
                    self._pixels[idx] = not self._pixels[idx]
        return collision

    def pixels(self) -> tuple[bool, ...]:
        """Read-only view of all pixels, row-major."""
        return tuple(self._pixels)

    def rows(self, on: str = "#", off: str = ".") -> list[str]:
        """Render the screen as one text line per row."""
        return [
            "".join(on if p else off for p in self._pixels[r * self.width:(r + 1) * self.width])
            for r in range(self.height)
        ]
