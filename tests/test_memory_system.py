"""Unit tests for the CHIP-8 memory block."""

import pytest

from pychip8.bus import MEMORY_SIZE, Memory, MemoryError


def test_memory_is_zero_initialised() -> None:
    memory = Memory()

    assert len(memory) == MEMORY_SIZE == 4096
    assert memory.snapshot() == bytes(4096)


def test_read_write_masks_to_byte() -> None:
    memory = Memory()

    memory.write(0x300, 0x1FF)

    assert memory.read(0x300) == 0xFF


def test_write_bulk_and_load16() -> None:
    memory = Memory()

    memory.write_bulk(0x200, [0x12, 0x34, 0x56])

    assert memory.load16(0x200) == 0x1234
    assert memory.snapshot(0x200, 3) == b"\x12\x34\x56"


@pytest.mark.parametrize("address", [-1, 0x1000, 0xFFFF])
def test_out_of_range_access_raises(address: int) -> None:
    memory = Memory()

    with pytest.raises(MemoryError):
        memory.read(address)
    with pytest.raises(MemoryError):
        memory.write(address, 0)


def test_bulk_write_past_end_leaves_memory_untouched() -> None:
    memory = Memory()

    with pytest.raises(MemoryError) as info:
        memory.write_bulk(0xFFE, b"\x01\x02\x03")

    assert info.value.address == 0x1000
    assert memory.read(0xFFE) == 0
    assert memory.read(0xFFF) == 0


def test_load16_at_last_byte_faults() -> None:
    memory = Memory()

    with pytest.raises(MemoryError):
        memory.load16(0xFFF)


def test_clear_resets_contents() -> None:
    memory = Memory()
    memory.write_bulk(0x000, b"\xAA" * 16)

    memory.clear()

    assert memory.snapshot(0, 16) == bytes(16)
