"""Python CHIP-8 interpreter.

The package hosts the interpreter core (``cpu``, ``bus``, ``video``, ``io``)
and the pygame front-end used by ``run.py`` (``ui``, ``audio``, ``loader``).
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
