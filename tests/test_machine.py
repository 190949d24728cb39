"""Tests for CHIP-8 machine assembly."""

from __future__ import annotations

import random

from pychip8.io import KeypadState
from pychip8.system import MachineConfig, create_machine


def test_create_machine_loads_rom() -> None:
    machine = create_machine(MachineConfig(rom_image=b"\x60\x2A"))

    assert machine.cpu.pc == 0x200
    assert machine.memory.read(0x200) == 0x60
    machine.cpu.step()
    assert machine.cpu.get_register(0) == 0x2A


def test_create_machine_without_rom_leaves_memory_blank() -> None:
    machine = create_machine(MachineConfig())

    assert machine.memory.snapshot() == bytes(4096)
    assert machine.cpu.trace is None


def test_machine_shares_keypad_and_config() -> None:
    keypad = KeypadState()
    beeps: list[int] = []
    machine = create_machine(
        MachineConfig(
            speed=7,
            rom_image=b"\x12\x00",
            beep=lambda: beeps.append(1),
            keypad=keypad,
            rng=random.Random(1),
            trace_capacity=16,
        )
    )

    assert machine.keypad is keypad
    assert machine.cpu.keypad is keypad
    assert machine.cpu.speed == 7
    assert machine.cpu.trace is not None

    machine.cpu.state.sound_timer = 1
    machine.cpu.cycle()
    assert beeps == [1]
    assert len(machine.cpu.trace) == 7
    assert machine.framebuffer is machine.cpu.framebuffer
