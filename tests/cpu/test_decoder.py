"""Tests for CHIP-8 opcode decoding and the instruction table."""

from __future__ import annotations

import pytest

from pychip8.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    OPCODE_TABLE,
    Instruction,
    OpcodeTable,
    decode,
    disassemble,
    lookup,
)


def test_decode_extracts_all_fields() -> None:
    decoded = decode(0xD2A5)

    assert decoded.opcode == 0xD2A5
    assert decoded.kind == 0xD
    assert decoded.x == 0x2
    assert decoded.y == 0xA
    assert decoded.n == 0x5
    assert decoded.nn == 0xA5
    assert decoded.nnn == 0x2A5


@pytest.mark.parametrize("word", [0x0000, 0xFFFF, 0x1234, 0x8ABE])
def test_decode_is_total(word: int) -> None:
    decoded = decode(word)

    assert (decoded.kind << 12) | decoded.nnn == word
    assert (decoded.x << 8) | (decoded.y << 4) | decoded.n == decoded.nnn
    assert decoded.nn == (decoded.y << 4) | decoded.n


def test_decode_masks_to_sixteen_bits() -> None:
    assert decode(0x1_2345).opcode == 0x2345


@pytest.mark.parametrize(
    "word, handler",
    [
        (0x00E0, "op_cls"),
        (0x00EE, "op_ret"),
        (0x1ABC, "op_jp"),
        (0x2ABC, "op_call"),
        (0x5120, "op_se_reg"),
        (0x5121, "op_se_reg"),
        (0x912F, "op_sne_reg"),
        (0x01E0, "op_cls"),
        (0x0FEE, "op_ret"),
        (0x8124, "op_add_reg"),
        (0x812E, "op_shl"),
        (0xE19E, "op_skp"),
        (0xE1A1, "op_sknp"),
        (0xF10A, "op_ld_wait_key"),
        (0xF165, "op_load_registers"),
    ],
)
def test_lookup_selects_handler(word: int, handler: str) -> None:
    instruction = lookup(word)

    assert instruction is not None
    assert instruction.handler == handler


@pytest.mark.parametrize("word", [0x0000, 0x00E1, 0x0123, 0x01EF, 0x8127, 0xB200, 0xE100, 0xF1FF])
def test_lookup_rejects_unknown_words(word: int) -> None:
    assert lookup(word) is None


def test_table_covers_every_default_instruction() -> None:
    assert len(OPCODE_TABLE) == len(DEFAULT_INSTRUCTIONS) == 32


def test_duplicate_registration_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(0xF000, 0x1000, "JP", "op_jp"))

    with pytest.raises(ValueError):
        table.register(Instruction(0xF000, 0x1000, "JP", "op_jp"))


def test_pattern_outside_mask_rejected() -> None:
    with pytest.raises(ValueError):
        Instruction(0xF000, 0x1001, "JP", "op_jp")


@pytest.mark.parametrize(
    "word, text",
    [
        (0x00E0, "CLS"),
        (0x1200, "JP 0x200"),
        (0x6A0F, "LD VA, 0x0f"),
        (0xD125, "DRW V1, V2, 5"),
        (0xF333, "LD B, V3"),
        (0xFFFF, "DW 0xffff"),
    ],
)
def test_disassemble(word: int, text: str) -> None:
    assert disassemble(word) == text
