"""Tests for the 64x32 frame buffer."""

from __future__ import annotations

import pytest

from pychip8.video import FrameBuffer


def test_flip_on_then_off_reports_collision() -> None:
    framebuffer = FrameBuffer()

    assert framebuffer.flip_pixel(3, 4, 1) is False
    assert framebuffer.get_pixel(3, 4) == 1

    assert framebuffer.flip_pixel(3, 4, 1) is True
    assert framebuffer.get_pixel(3, 4) == 0


def test_zero_bit_reports_based_on_resulting_value() -> None:
    framebuffer = FrameBuffer()

    assert framebuffer.flip_pixel(0, 0, 0) is True

    framebuffer.flip_pixel(1, 0, 1)
    assert framebuffer.flip_pixel(1, 0, 0) is False
    assert framebuffer.get_pixel(1, 0) == 1


def test_clear_turns_every_pixel_off() -> None:
    framebuffer = FrameBuffer()
    for x in range(64):
        framebuffer.flip_pixel(x, x % 32, 1)

    framebuffer.clear()

    assert framebuffer.lit_count() == 0
    assert framebuffer.snapshot() == bytes(64 * 32)


def test_rows_follow_layout() -> None:
    framebuffer = FrameBuffer()
    framebuffer.flip_pixel(63, 31, 1)

    rows = list(framebuffer.rows())

    assert len(rows) == 32
    assert rows[31][63] == 1
    assert sum(rows[0]) == 0


@pytest.mark.parametrize("x, y", [(64, 0), (0, 32), (-1, 0)])
def test_out_of_range_pixel_raises(x: int, y: int) -> None:
    with pytest.raises(IndexError):
        FrameBuffer().get_pixel(x, y)
