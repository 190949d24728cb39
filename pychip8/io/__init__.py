"""Input handling for the CHIP-8 interpreter."""

from __future__ import annotations

from .keypad import KEY_COUNT, KEY_MAP, Keypad, KeypadState

__all__ = [
    "KEY_COUNT",
    "KEY_MAP",
    "Keypad",
    "KeypadState",
]
