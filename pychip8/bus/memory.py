"""Flat 4 KiB memory for the CHIP-8 interpreter.

The CHIP-8 address space is a single RAM block: the font glyphs live at
``0x050`` and programs are loaded at ``0x200``. There is no memory mapped I/O,
so reads and writes go straight to a ``bytearray``. Accesses outside the
address space are reported as :class:`MemoryError` rather than being wrapped,
which lets the interpreter turn a misbehaving ROM into a fault.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_SIZE = 0x1000


class MemoryError(Exception):
    """Raised when memory is accessed outside of its address space."""

    def __init__(self, address: int, size: int) -> None:
        super().__init__(f"address {address:#06x} outside memory 0x0000-{size - 1:#06x}")
        self.address = address
        self.size = size


class Memory:
    """Simple byte-addressable RAM block."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= 0:
            raise ValueError("memory must have a positive size")
        self._size = size
        self._data = bytearray(size)

    def __len__(self) -> int:
        return self._size

    @property
    def size(self) -> int:
        return self._size

    def _check(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise MemoryError(address, self._size)
        return address

    def read(self, address: int) -> int:
        return self._data[self._check(address)]

    def write(self, address: int, value: int) -> None:
        self._data[self._check(address)] = value & 0xFF

    def write_bulk(self, address: int, values: Iterable[int]) -> None:
        """Copy ``values`` into memory starting at ``address``.

        The whole range is validated first so a failing copy leaves memory
        untouched.
        """

        payload = bytes(value & 0xFF for value in values)
        if not payload:
            return
        self._check(address)
        self._check(address + len(payload) - 1)
        self._data[address : address + len(payload)] = payload

    def load16(self, address: int) -> int:
        high = self.read(address)
        low = self.read(address + 1)
        return (high << 8) | low

    def clear(self) -> None:
        self._data[:] = bytes(self._size)

    def snapshot(self, start: int = 0, length: int | None = None) -> bytes:
        end = self._size if length is None else start + length
        if start < 0 or end > self._size or end < start:
            raise MemoryError(start if start < 0 else end - 1, self._size)
        return bytes(self._data[start:end])
