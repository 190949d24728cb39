"""Opcode decoding and instruction metadata for the CHIP-8 interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Sequence


@dataclass(frozen=True)
class DecodedOpcode:
    """Fields extracted from a 16-bit instruction word."""

    opcode: int
    kind: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    def __str__(self) -> str:
        return (
            f"opcode={self.opcode:#06x} kind={self.kind:#x} x={self.x:#x} y={self.y:#x} "
            f"n={self.n:#x} nn={self.nn:#04x} nnn={self.nnn:#05x}"
        )


def decode(word: int) -> DecodedOpcode:
    """Split ``word`` into its instruction class, register and immediate fields."""

    word &= 0xFFFF
    return DecodedOpcode(
        opcode=word,
        kind=(word >> 12) & 0xF,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=word & 0xFF,
        nnn=word & 0xFFF,
    )


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one CHIP-8 instruction form.

    ``mask`` selects the fixed bits of the word and ``pattern`` is their
    expected value. ``syntax`` is a format string over the decoded fields used
    for disassembly.
    """

    mask: int
    pattern: int
    mnemonic: str
    handler: str
    syntax: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"mask out of range: {self.mask:#x}")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.pattern

    def format(self, decoded: DecodedOpcode) -> str:
        if not self.syntax:
            return self.mnemonic
        operands = self.syntax.format(
            x=decoded.x,
            y=decoded.y,
            n=decoded.n,
            nn=decoded.nn,
            nnn=decoded.nnn,
        )
        return f"{self.mnemonic} {operands}"


class OpcodeTable:
    """Instruction lookup bucketed by the top nibble of the word."""

    _BUCKETS: Final[int] = 0x10

    def __init__(self) -> None:
        self._buckets: List[List[Instruction]] = [[] for _ in range(self._BUCKETS)]

    def register(self, instruction: Instruction) -> None:
        if instruction.mask & 0xF000 != 0xF000:
            raise ValueError(f"{instruction.mnemonic}: mask must cover the instruction class nibble")
        bucket = self._buckets[(instruction.pattern >> 12) & 0xF]
        for existing in bucket:
            if existing.mask == instruction.mask and existing.pattern == instruction.pattern:
                raise ValueError(
                    f"pattern {instruction.pattern:#06x} already registered as {existing.mnemonic}")
        bucket.append(instruction)

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def lookup(self, word: int) -> Instruction | None:
        word &= 0xFFFF
        for instruction in self._buckets[(word >> 12) & 0xF]:
            if instruction.matches(word):
                return instruction
        return None

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)


def build_instruction_table(instructions: Iterable[Instruction]) -> OpcodeTable:
    """Build the lookup table used by the interpreter."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    # System; the X nibble is ignored
    Instruction(0xF0FF, 0x00E0, "CLS", "op_cls"),
    Instruction(0xF0FF, 0x00EE, "RET", "op_ret"),
    # Flow control
    Instruction(0xF000, 0x1000, "JP", "op_jp", "{nnn:#05x}"),
    Instruction(0xF000, 0x2000, "CALL", "op_call", "{nnn:#05x}"),
    Instruction(0xF000, 0x3000, "SE", "op_se_byte", "V{x:X}, {nn:#04x}"),
    Instruction(0xF000, 0x4000, "SNE", "op_sne_byte", "V{x:X}, {nn:#04x}"),
    # The low nibble of 5XY0 and 9XY0 is ignored
    Instruction(0xF000, 0x5000, "SE", "op_se_reg", "V{x:X}, V{y:X}"),
    Instruction(0xF000, 0x9000, "SNE", "op_sne_reg", "V{x:X}, V{y:X}"),
    # Immediate loads
    Instruction(0xF000, 0x6000, "LD", "op_ld_byte", "V{x:X}, {nn:#04x}"),
    Instruction(0xF000, 0x7000, "ADD", "op_add_byte", "V{x:X}, {nn:#04x}"),
    # Register arithmetic
    Instruction(0xF00F, 0x8000, "LD", "op_ld_reg", "V{x:X}, V{y:X}"),
    Instruction(0xF00F, 0x8001, "OR", "op_or", "V{x:X}, V{y:X}"),
    Instruction(0xF00F, 0x8002, "AND", "op_and", "V{x:X}, V{y:X}"),
    Instruction(0xF00F, 0x8003, "XOR", "op_xor", "V{x:X}, V{y:X}"),
    Instruction(0xF00F, 0x8004, "ADD", "op_add_reg", "V{x:X}, V{y:X}"),
    Instruction(0xF00F, 0x8005, "SUB", "op_sub_reg", "V{x:X}, V{y:X}"),
    Instruction(0xF00F, 0x8006, "SHR", "op_shr", "V{x:X}"),
    Instruction(0xF00F, 0x800E, "SHL", "op_shl", "V{x:X}"),
    # Index, random, draw
    Instruction(0xF000, 0xA000, "LD", "op_ld_index", "I, {nnn:#05x}"),
    Instruction(0xF000, 0xC000, "RND", "op_rnd", "V{x:X}, {nn:#04x}"),
    Instruction(0xF000, 0xD000, "DRW", "op_drw", "V{x:X}, V{y:X}, {n}"),
    # Keypad
    Instruction(0xF0FF, 0xE09E, "SKP", "op_skp", "V{x:X}"),
    Instruction(0xF0FF, 0xE0A1, "SKNP", "op_sknp", "V{x:X}"),
    # Timers, memory, keypad wait
    Instruction(0xF0FF, 0xF007, "LD", "op_ld_get_delay", "V{x:X}, DT"),
    Instruction(0xF0FF, 0xF00A, "LD", "op_ld_wait_key", "V{x:X}, K"),
    Instruction(0xF0FF, 0xF015, "LD", "op_ld_set_delay", "DT, V{x:X}"),
    Instruction(0xF0FF, 0xF018, "LD", "op_ld_set_sound", "ST, V{x:X}"),
    Instruction(0xF0FF, 0xF01E, "ADD", "op_add_index", "I, V{x:X}"),
    Instruction(0xF0FF, 0xF029, "LD", "op_ld_font", "F, V{x:X}"),
    Instruction(0xF0FF, 0xF033, "LD", "op_ld_bcd", "B, V{x:X}"),
    Instruction(0xF0FF, 0xF055, "LD", "op_store_registers", "[I], V{x:X}"),
    Instruction(0xF0FF, 0xF065, "LD", "op_load_registers", "V{x:X}, [I]"),
)


OPCODE_TABLE: OpcodeTable = build_instruction_table(DEFAULT_INSTRUCTIONS)


def lookup(word: int) -> Instruction | None:
    """Return the instruction form matching ``word`` or ``None``."""

    return OPCODE_TABLE.lookup(word)


def disassemble(word: int) -> str:
    """Render ``word`` as assembly text; unknown words become ``DW`` data."""

    instruction = OPCODE_TABLE.lookup(word)
    if instruction is None:
        return f"DW {word & 0xFFFF:#06x}"
    return instruction.format(decode(word))
