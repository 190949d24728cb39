"""64x32 monochrome frame buffer."""

from __future__ import annotations

from typing import Iterator

WIDTH = 64
HEIGHT = 32


class FrameBuffer:
    """One byte per pixel, each holding 0 or 1."""

    WIDTH = WIDTH
    HEIGHT = HEIGHT

    def __init__(self) -> None:
        self._data = bytearray(WIDTH * HEIGHT)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise IndexError(f"pixel ({x}, {y}) outside {WIDTH}x{HEIGHT} frame buffer")
        return y * WIDTH + x

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def get_pixel(self, x: int, y: int) -> int:
        return self._data[self._offset(x, y)]

    def flip_pixel(self, x: int, y: int, bit: int) -> bool:
        """XOR ``bit`` into the pixel and report whether it is now off.

        The report is based on the resulting value only, so flipping an unlit
        pixel with a zero bit also counts as a collision.
        """

        offset = self._offset(x, y)
        self._data[offset] ^= bit & 0x01
        return self._data[offset] == 0

    def rows(self) -> Iterator[bytes]:
        for y in range(HEIGHT):
            start = y * WIDTH
            yield bytes(self._data[start : start + WIDTH])

    def lit_count(self) -> int:
        return sum(self._data)

    def snapshot(self) -> bytes:
        return bytes(self._data)
