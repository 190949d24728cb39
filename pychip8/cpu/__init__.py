"""CPU package for the CHIP-8 interpreter."""

from .core import (
    CHIP8,
    PROGRAM_START,
    CPUState,
    IllegalOpcodeError,
    MemoryFault,
    StackUnderflowError,
    VMFault,
)
from .opcodes import DecodedOpcode, decode, disassemble
from . import opcodes

__all__ = [
    "CHIP8",
    "CPUState",
    "PROGRAM_START",
    "VMFault",
    "IllegalOpcodeError",
    "StackUnderflowError",
    "MemoryFault",
    "DecodedOpcode",
    "decode",
    "disassemble",
    "opcodes",
]
