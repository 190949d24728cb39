"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_DATA, FONT_HEIGHT, FONT_START, FONT_WIDTH, GLYPH_BYTES, glyph_address
from .framebuffer import HEIGHT, WIDTH, FrameBuffer
from .palette import MONOCHROME, PALETTES, parse_color, resolve_palette, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "FrameBuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "validate_palette",
    "PALETTES",
    "parse_color",
    "resolve_palette",
    "FONT_DATA",
    "FONT_START",
    "FONT_WIDTH",
    "FONT_HEIGHT",
    "GLYPH_BYTES",
    "glyph_address",
    "WIDTH",
    "HEIGHT",
]
