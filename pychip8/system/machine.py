"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.cpu import CHIP8
from pychip8.cpu.core import DEFAULT_SPEED, BeepCallback
from pychip8.io import KeypadState
from pychip8.utils import TraceRecorder


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    speed: int = DEFAULT_SPEED
    rom_image: Optional[bytes] = None
    beep: Optional[BeepCallback] = None
    keypad: KeypadState | None = None
    rng: random.Random | None = None
    trace_capacity: int = 0


@dataclass
class Machine:
    """Aggregates the interpreter with the keypad the host drives."""

    cpu: CHIP8
    keypad: KeypadState

    @property
    def framebuffer(self):
        return self.cpu.framebuffer

    @property
    def memory(self):
        return self.cpu.memory


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    keypad = config.keypad or KeypadState()
    cpu = CHIP8(
        keypad=keypad,
        beep=config.beep,
        speed=config.speed,
        rng=config.rng or random.Random(),
        trace=TraceRecorder(config.trace_capacity) if config.trace_capacity > 0 else None,
    )
    if config.rom_image is not None:
        cpu.load_rom(config.rom_image)
    return Machine(cpu=cpu, keypad=keypad)
