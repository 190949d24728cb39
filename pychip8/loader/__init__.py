"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .rom import (
    MAX_ROM_SIZE,
    ROM_EXTENSIONS,
    ROM_START,
    RomFormatError,
    RomImage,
    has_rom_extension,
    load_rom_from_path,
    load_rom_image,
)

__all__ = [
    "MAX_ROM_SIZE",
    "ROM_EXTENSIONS",
    "ROM_START",
    "RomFormatError",
    "RomImage",
    "has_rom_extension",
    "load_rom_from_path",
    "load_rom_image",
]
