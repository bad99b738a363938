"""Memory model for the CHIP-8 interpreter."""

from typing import Type
from .errors import CHIP8Error, IllegalAddress, OutOfMemory
from .font import FONT, FONT_ADDRESS

MEMORY_SIZE = 4096


class Memory:
    """4 KiB byte-addressed memory with the font table preloaded at address 0."""

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._data = bytearray(size)
        self._load_font()

    def _load_font(self) -> None:
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT)] = FONT

    def _check_bounds(
        self,
        addr: int,
        error: Type[CHIP8Error] = IllegalAddress,
    ) -> None:
        """Check if address is within valid range."""
        if addr < 0 or addr >= self.size:
            raise error(f"Memory address out of range: 0x{addr:04X}", addr=addr)

    def check_range(self, start: int, length: int) -> None:
        """Check that every address in start..start+length is valid."""
        if length <= 0:
            return
        self._check_bounds(start)
        self._check_bounds(start + length - 1)

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit instruction word."""
        self._check_bounds(addr, OutOfMemory)
        self._check_bounds(addr + 1, OutOfMemory)
        return (self._data[addr] << 8) | self._data[addr + 1]

    def load(self, offset: int, data: bytes) -> None:
        """Copy a program image into memory starting at offset."""
        if offset < 0 or offset + len(data) > self.size:
            raise OutOfMemory(
                f"Program of {len(data)} bytes at offset {offset} "
                f"does not fit in {self.size} bytes of memory",
                addr=offset + len(data),
            )
        self._data[offset:offset + len(data)] = data

    def read_block(self, start: int, length: int) -> bytes:
        """Read length bytes starting at start."""
        self.check_range(start, length)
        return bytes(self._data[start:start + length])

    def write_block(self, start: int, data: bytes) -> None:
        """Write bytes starting at start; nothing is written if any address is invalid."""
        self.check_range(start, len(data))
        self._data[start:start + len(data)] = data

    def snapshot(self) -> bytes:
        """Return a copy of the entire memory."""
        return bytes(self._data)

    def reset(self) -> None:
        """Zero memory and restore the font table."""
        self._data = bytearray(self.size)
        self._load_font()
