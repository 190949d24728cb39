"""Raw ROM image loader.

CHIP-8 ROMs carry no header: the file is copied byte for byte to ``0x200``.
The file extension is a host convention only.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE
from pychip8.cpu import PROGRAM_START

ROM_START = PROGRAM_START
MAX_ROM_SIZE = MEMORY_SIZE - ROM_START
ROM_EXTENSIONS = (".bin", ".chip8", ".ch8")


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be loaded into memory."""


@dataclass
class RomImage:
    """Raw program bytes plus the name they were loaded under."""

    data: bytes
    name: str = ""

    def length(self) -> int:
        return len(self.data)


def load_rom_image(stream: BinaryIO, *, name: str = "") -> RomImage:
    """Read a ROM image from ``stream``."""

    # Read one byte past the limit so oversize images are detected without
    # slurping arbitrarily large files.
    data = stream.read(MAX_ROM_SIZE + 1)
    if not data:
        raise RomFormatError("ROM image is empty")
    if len(data) > MAX_ROM_SIZE:
        raise RomFormatError(f"ROM image exceeds {MAX_ROM_SIZE} bytes")
    return RomImage(bytes(data), name)


def load_rom_from_path(path: Path) -> RomImage:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom_image(handle, name=path.name)


def has_rom_extension(path: Path) -> bool:
    return path.suffix.lower() in ROM_EXTENSIONS
