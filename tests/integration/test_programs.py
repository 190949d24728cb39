"""Small hand-assembled programs run end to end."""

from __future__ import annotations

from pychip8.system import MachineConfig, create_machine
from pychip8.video import FONT_DATA


def program(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


def test_bcd_score_display() -> None:
    rom = program(
        0x607B,  # V0 := 123
        0xA300,  # I := 0x300
        0xF033,  # BCD V0
        0xF265,  # V0..V2 := digits
        0x6300,  # V3 := 0 (x)
        0x6400,  # V4 := 0 (y)
        0xF029, 0xD345, 0x7305,
        0xF129, 0xD345, 0x7305,
        0xF229, 0xD345,
        0x121C,  # loop
    )
    machine = create_machine(MachineConfig(rom_image=rom, speed=20))

    machine.cpu.cycle()

    cpu = machine.cpu
    assert cpu.registers[:3] == (1, 2, 3)
    assert cpu.pc == 0x21C
    for index, digit in enumerate((1, 2, 3)):
        origin = index * 5
        for row in range(5):
            line = FONT_DATA[digit * 5 + row]
            for column in range(4):
                expected = (line >> (7 - column)) & 1
                assert cpu.get_pixel(origin + column, row) == expected


def test_subroutine_loop_counts_to_five() -> None:
    rom = program(
        0x6000,  # 200: V0 := 0
        0x2210,  # 202: CALL 210
        0x3005,  # 204: SE V0, 5
        0x1202,  # 206: JP 202
        0x1208,  # 208: JP 208
        0x0000, 0x0000, 0x0000,
        0x7001,  # 210: V0 += 1
        0x00EE,  # 212: RET
    )
    machine = create_machine(MachineConfig(rom_image=rom, speed=100))

    machine.cpu.cycle()

    assert machine.cpu.get_register(0) == 5
    assert machine.cpu.pc == 0x208
    assert machine.cpu.sp == 0


def test_wait_for_key_then_delay_countdown() -> None:
    rom = program(
        0xF00A,  # 200: V0 := key
        0x6104,  # 202: V1 := 4
        0xF115,  # 204: DT := V1
        0xF207,  # 206: V2 := DT
        0x3200,  # 208: SE V2, 0
        0x1206,  # 20A: JP 206
        0x120C,  # 20C: JP 20C
    )
    machine = create_machine(MachineConfig(rom_image=rom, speed=10))

    machine.cpu.cycle()
    assert machine.cpu.blocked
    assert machine.cpu.pc == 0x202

    machine.keypad.press("e")
    machine.cpu.cycle(40)

    assert machine.cpu.get_register(0) == 0x6
    assert machine.cpu.delay_timer == 0
    assert machine.cpu.pc == 0x20C
