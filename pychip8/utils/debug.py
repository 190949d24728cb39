"""Category-gated debug output for the CHIP-8 interpreter.

``CHIP8_DEBUG`` holds a comma separated list of categories:

``cpu``
    every executed instruction, ROM loads, resets and faults
``input``
    keypad presses and ``FX0A`` key waits
``audio``
    beep events and mixer setup
``trace``
    keep a ring buffer of recent steps and dump it when a fault stops the VM

``all`` enables every category.
"""

from __future__ import annotations

import os
from typing import FrozenSet, Iterable

KNOWN_CATEGORIES: FrozenSet[str] = frozenset({"cpu", "input", "audio", "trace"})

_CATEGORIES: set[str] | None = None


def parse_categories(value: str) -> set[str]:
    parts: Iterable[str] = (part.strip().lower() for part in value.split(","))
    return {part for part in parts if part}


def _load_categories() -> set[str]:
    global _CATEGORIES
    if _CATEGORIES is not None:
        return _CATEGORIES
    _CATEGORIES = parse_categories(os.environ.get("CHIP8_DEBUG", ""))
    unknown = _CATEGORIES - KNOWN_CATEGORIES - {"all"}
    if unknown:
        print(f"[CHIP8][debug] ignoring unknown CHIP8_DEBUG categories: {', '.join(sorted(unknown))}")
    return _CATEGORIES


def reload_categories() -> None:
    """Forget the cached categories so ``CHIP8_DEBUG`` is read again."""

    global _CATEGORIES
    _CATEGORIES = None


def debug_enabled(category: str | None = None) -> bool:
    categories = _load_categories()
    if not categories:
        return False
    if "all" in categories or category is None:
        return True
    return category.lower() in categories


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
