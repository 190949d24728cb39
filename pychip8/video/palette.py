"""Display colours for the CHIP-8 frame buffer.

A palette is a ``(off, on)`` pair indexed by the pixel value, so entry 0
colours unlit pixels and entry 1 colours lit ones. The host can pick one of
the named presets or pass two ``#RRGGBB`` colours.
"""

from __future__ import annotations

from typing import Mapping, Sequence, Tuple, Union

RGBColor = Tuple[int, int, int]
Palette = Tuple[RGBColor, RGBColor]
ColorSpec = Union[str, Sequence[int]]


MONOCHROME: Palette = ((0, 0, 0), (0xFF, 0xFF, 0xFF))

PALETTES: Mapping[str, Palette] = {
    "mono": MONOCHROME,
    "inverse": ((0xFF, 0xFF, 0xFF), (0, 0, 0)),
    "green": ((0x0B, 0x1A, 0x0B), (0x33, 0xFF, 0x66)),
    "amber": ((0x1A, 0x10, 0x00), (0xFF, 0xB0, 0x00)),
}


def parse_color(color: ColorSpec) -> RGBColor:
    """Accept ``#RRGGBB`` (``#`` optional) or a three-channel sequence."""

    if isinstance(color, str):
        text = color.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"colour must be #RRGGBB: {color!r}")
        try:
            value = int(text, 16)
        except ValueError as exc:
            raise ValueError(f"colour must be #RRGGBB: {color!r}") from exc
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    if len(color) != 3:
        raise ValueError("palette entries must be RGB tuples")
    return (int(color[0]) & 0xFF, int(color[1]) & 0xFF, int(color[2]) & 0xFF)


def validate_palette(palette: Sequence[ColorSpec]) -> Palette:
    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (pixel off and pixel on)")
    off, on = (parse_color(color) for color in palette)
    return (off, on)


def resolve_palette(name: str) -> Palette:
    """Look up a preset, or parse an ``OFF,ON`` pair of hex colours."""

    key = name.strip().lower()
    if key in PALETTES:
        return PALETTES[key]
    if "," in key:
        return validate_palette(key.split(","))
    known = ", ".join(sorted(PALETTES))
    raise ValueError(f"unknown palette {name!r} (choose {known} or OFF,ON hex colours)")
