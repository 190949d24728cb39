"""CHIP-8 hexadecimal keypad handling.

The COSMAC VIP keypad is laid out as::

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

and is mapped onto the left block of a modern keyboard::

    1 2 3 4
    q w e r
    a s d f
    z x c v
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


KEY_MAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


def _check_nibble(nibble: int) -> int:
    if not 0 <= nibble < KEY_COUNT:
        raise ValueError(f"keypad received an unknown nibble code: {nibble:#x}")
    return nibble


class Keypad:
    """Interface the interpreter uses to query the keypad."""

    def is_key_down(self, nibble: int) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def is_any_key_down(self) -> int | None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class KeypadState(Keypad):
    """Keypad fed by host key events.

    Several physical keys may share a nibble, so presses are reference counted
    and the nibble stays down until the last one is released.
    """

    key_map: Mapping[str, int] = field(default_factory=lambda: dict(KEY_MAP))
    _active: Dict[int, int] = field(default_factory=dict)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, key_name: str) -> bool:
        nibble = self._lookup(key_name)
        if nibble is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press_nibble(nibble)
        return True

    def release(self, key_name: str) -> bool:
        nibble = self._lookup(key_name)
        if nibble is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release_nibble(nibble)
        return True

    def press_nibble(self, nibble: int) -> None:
        _check_nibble(nibble)
        count = self._active.get(nibble, 0)
        self._active[nibble] = count + 1
        if debug_enabled("input"):
            debug_log("input", "key_press nibble=%x count=%d", nibble, count + 1)
        if count == 0:
            self._notify_listeners(nibble, True)

    def release_nibble(self, nibble: int) -> None:
        _check_nibble(nibble)
        count = self._active.get(nibble, 0)
        if count == 0:
            return
        if count == 1:
            self._active.pop(nibble)
            self._notify_listeners(nibble, False)
        else:
            self._active[nibble] = count - 1
        if debug_enabled("input"):
            debug_log("input", "key_release nibble=%x count=%d", nibble, self._active.get(nibble, 0))

    def is_key_down(self, nibble: int) -> bool:
        return _check_nibble(nibble) in self._active

    def is_any_key_down(self) -> int | None:
        for nibble in range(KEY_COUNT):
            if nibble in self._active:
                return nibble
        return None

    def reset(self) -> None:
        self._active.clear()

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(nibble in self._active for nibble in range(KEY_COUNT))

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    def _lookup(self, key_name: str) -> int | None:
        return self.key_map.get(key_name.lower())

    def _notify_listeners(self, nibble: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(nibble, pressed)
