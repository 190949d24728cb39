"""Frame buffer to RGB conversion for the pygame front-end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import HEIGHT, WIDTH, FrameBuffer
from .palette import MONOCHROME, ColorSpec, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale the 64x32 frame buffer into an RGB image."""

    def __init__(self, palette: Sequence[ColorSpec] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    @property
    def palette(self) -> tuple[RGBColor, RGBColor]:
        return (self._background, self._foreground)

    def render(self, framebuffer: FrameBuffer, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")

        colours = (bytes(self._background), bytes(self._foreground))
        width = WIDTH * scale
        height = HEIGHT * scale
        image = bytearray()
        for row in framebuffer.rows():
            line = bytearray()
            for value in row:
                line += colours[value & 0x01] * scale
            image += bytes(line) * scale
        return RenderResult(width=width, height=height, pixels=bytes(image))
