from types import SimpleNamespace

import pytest

from pychip8.cpu import CHIP8, StackUnderflowError
from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **kwargs):
    defaults = {"i": 0, "v": bytes(16), "stack": [], "delay_timer": 0, "sound_timer": 0}
    defaults.update(kwargs)
    return SimpleNamespace(pc=pc, **defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6005, blocked=False, halted=False, mnemonic="LD V0, 0x05")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, blocked=False, halted=False, mnemonic="LD I, 0x300")
    recorder.record_step(_state(0x204, stack=[0x202]), 0xF00A, blocked=True, halted=False, note="wait")

    lines = list(recorder.format_entries())
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "I=0300" in lines[0]
    assert "pc=0204" in lines[1]
    assert "SP=01" in lines[1]
    assert "flags=WAIT,wait" in lines[1]


def test_trace_recorder_handles_empty_state():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0x200), None, blocked=False, halted=True, note="fault")
    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert "flags=HALT,fault" in lines[0]


def test_interpreter_records_steps_when_traced():
    recorder = TraceRecorder(8)
    cpu = CHIP8(trace=recorder)
    cpu.load_rom(b"\x60\x05\x00\xEE")

    cpu.step()
    with pytest.raises(StackUnderflowError):
        cpu.step()

    entries = list(recorder.entries())
    assert len(entries) == 2
    assert entries[0].pc == 0x200
    assert entries[0].mnemonic == "LD V0, 0x05"
    assert entries[0].registers[0] == 0x05
    assert entries[1].note == "fault"
    assert entries[1].halted
