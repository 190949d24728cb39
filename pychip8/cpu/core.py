"""CHIP-8 interpreter core.

Every step fetches the big-endian word at ``PC``, executes it and then
advances ``PC`` by two unconditionally. Instructions that load an absolute
target ``T`` into ``PC`` (jumps, calls, returns) therefore store ``T - 2`` so
the trailing increment lands on ``T``. Skips add an extra two.

Both timers count down once per step rather than at 60 Hz, so their rate
follows the configured instructions-per-frame budget.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from pychip8.bus import Memory, MemoryError
from pychip8.io import Keypad, KeypadState
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FONT_DATA, FONT_START, FrameBuffer, glyph_address
from pychip8.video.framebuffer import HEIGHT, WIDTH

from .opcodes import OPCODE_TABLE, DecodedOpcode, OpcodeTable, decode

PROGRAM_START = 0x200
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
DEFAULT_SPEED = 10

BeepCallback = Callable[[], None]


class VMFault(Exception):
    """Fatal interpreter error; the instance stays halted until reset."""

    def __init__(
        self,
        message: str,
        *,
        opcode: int | None = None,
        decoded: DecodedOpcode | None = None,
        pc: int | None = None,
    ) -> None:
        details = []
        if pc is not None:
            details.append(f"pc={pc:#06x}")
        if decoded is not None:
            details.append(str(decoded))
        elif opcode is not None:
            details.append(f"opcode={opcode:#06x}")
        text = f"{message} ({' '.join(details)})" if details else message
        super().__init__(text)
        self.opcode = opcode
        self.decoded = decoded
        self.pc = pc


class IllegalOpcodeError(VMFault):
    """Raised when the interpreter encounters an unimplemented opcode."""


class StackUnderflowError(VMFault):
    """Raised on ``RET`` with an empty call stack."""


class MemoryFault(VMFault):
    """Raised when an instruction touches memory outside the address space."""


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x0000
    pc: int = PROGRAM_START
    stack: list[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0
    waiting_register: int | None = None

    @property
    def blocked(self) -> bool:
        return self.waiting_register is not None

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.v),
            self.i,
            self.pc,
            list(self.stack),
            self.delay_timer,
            self.sound_timer,
            self.waiting_register,
        )


@dataclass(eq=False)
class CHIP8:
    """CHIP-8 virtual machine owning memory, display, registers and timers."""

    keypad: Keypad | None = None
    beep: BeepCallback | None = None
    speed: int = DEFAULT_SPEED
    rng: random.Random | None = None
    instruction_table: OpcodeTable = field(default=OPCODE_TABLE)
    trace: TraceRecorder | None = None

    memory: Memory = field(default_factory=Memory)
    framebuffer: FrameBuffer = field(default_factory=FrameBuffer)
    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0
    halted: bool = False
    fault: VMFault | None = None

    def __post_init__(self) -> None:
        if self.keypad is None:
            self.keypad = KeypadState()
        if self.rng is None:
            self.rng = random.Random()
        self.set_speed(self.speed)

    # ------------------------------------------------------------------
    # Host API

    def load_rom(self, rom: bytes | Sequence[int], beep: BeepCallback | None = None) -> None:
        """Install the font and ``rom`` and point ``PC`` at the program start."""

        capacity = self.memory.size - PROGRAM_START
        if len(rom) > capacity:
            raise ValueError(f"ROM is {len(rom)} bytes; at most {capacity} bytes fit")
        self.memory.write_bulk(FONT_START, FONT_DATA)
        self.memory.write_bulk(PROGRAM_START, rom)
        self.state.pc = PROGRAM_START
        if beep is not None:
            self.beep = beep
        self._clear_fault()
        if debug_enabled("cpu"):
            debug_log("cpu", "rom_loaded bytes=%d", len(rom))

    def reset(self) -> None:
        """Clear the display and restart at ``0x200``.

        Memory, registers, the stack and timers are left as they are.
        """

        self.framebuffer.clear()
        self.state.pc = PROGRAM_START
        self._clear_fault()
        if debug_enabled("cpu"):
            debug_log("cpu", "reset")

    def set_speed(self, speed: int) -> None:
        if speed < 0:
            raise ValueError("speed must not be negative")
        self.speed = int(speed)

    def cycle(self, steps: int | None = None) -> int:
        """Run ``steps`` cycle-steps (``speed`` by default); return instructions executed."""

        count = self.speed if steps is None else steps
        if count < 0:
            raise ValueError("step count must not be negative")
        executed = 0
        for _ in range(count):
            executed += self.step()
        return executed

    def step(self) -> int:
        """Execute one instruction, or poll the keypad while blocked.

        Returns 1 when an instruction ran and 0 while waiting for a key.
        """

        if self.fault is not None:
            raise self.fault

        state = self.state
        pc_before = state.pc
        word: int | None = None
        blocked = state.blocked
        try:
            if blocked:
                self._poll_key()
            else:
                word = self._fetch(pc_before)
                self.execute(word)
                state.pc = (state.pc + 2) & 0xFFFF
                self.instruction_count += 1
        except VMFault as fault:
            self._halt(fault, pc_before, word)
            raise

        self._tick_timers()
        if self.trace is not None:
            self._record_trace(pc_before, word, blocked)
        return 0 if blocked else 1

    def execute(self, word: int) -> None:
        """Run the semantics of ``word`` without advancing ``PC``."""

        decoded = decode(word)
        instruction = self.instruction_table.lookup(decoded.opcode)
        handler = None if instruction is None else getattr(self, instruction.handler, None)
        if handler is None:
            raise IllegalOpcodeError(
                "unimplemented instruction", opcode=decoded.opcode, decoded=decoded, pc=self.state.pc
            )
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%04x opcode=%04x %s",
                self.state.pc,
                decoded.opcode,
                instruction.format(decoded),
            )
        try:
            handler(decoded)
        except MemoryError as exc:
            raise MemoryFault(str(exc), opcode=decoded.opcode, decoded=decoded, pc=self.state.pc) from exc

    # ------------------------------------------------------------------
    # Read accessors for the host

    @property
    def pc(self) -> int:
        return self.state.pc

    @property
    def i(self) -> int:
        return self.state.i

    @property
    def sp(self) -> int:
        return len(self.state.stack)

    @property
    def delay_timer(self) -> int:
        return self.state.delay_timer

    @property
    def sound_timer(self) -> int:
        return self.state.sound_timer

    @property
    def blocked(self) -> bool:
        return self.state.blocked

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(self.state.v)

    def get_register(self, index: int) -> int:
        return self.state.v[index]

    def get_pixel(self, x: int, y: int) -> int:
        return self.framebuffer.get_pixel(x, y)

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_cls(self, _: DecodedOpcode) -> None:
        self.framebuffer.clear()

    def op_ret(self, decoded: DecodedOpcode) -> None:
        if not self.state.stack:
            raise StackUnderflowError(
                "stack underflow (RET without CALL)", opcode=decoded.opcode, decoded=decoded, pc=self.state.pc
            )
        self._jump(self.state.stack.pop())

    def op_jp(self, decoded: DecodedOpcode) -> None:
        self._jump(decoded.nnn)

    def op_call(self, decoded: DecodedOpcode) -> None:
        self.state.stack.append((self.state.pc + 2) & 0xFFFF)
        self._jump(decoded.nnn)

    def op_se_byte(self, decoded: DecodedOpcode) -> None:
        if self.state.v[decoded.x] == decoded.nn:
            self._skip()

    def op_sne_byte(self, decoded: DecodedOpcode) -> None:
        if self.state.v[decoded.x] != decoded.nn:
            self._skip()

    def op_se_reg(self, decoded: DecodedOpcode) -> None:
        if self.state.v[decoded.x] == self.state.v[decoded.y]:
            self._skip()

    def op_sne_reg(self, decoded: DecodedOpcode) -> None:
        if self.state.v[decoded.x] != self.state.v[decoded.y]:
            self._skip()

    def op_ld_byte(self, decoded: DecodedOpcode) -> None:
        self.state.v[decoded.x] = decoded.nn

    def op_add_byte(self, decoded: DecodedOpcode) -> None:
        v = self.state.v
        v[decoded.x] = (v[decoded.x] + decoded.nn) & 0xFF

    def op_ld_reg(self, decoded: DecodedOpcode) -> None:
        v = self.state.v
        v[decoded.x] = v[decoded.y]

    def op_or(self, decoded: DecodedOpcode) -> None:
        v = self.state.v
        v[decoded.x] |= v[decoded.y]

    def op_and(self, decoded: DecodedOpcode) -> None:
        v = self.state.v
        v[decoded.x] &= v[decoded.y]

    def op_xor(self, decoded: DecodedOpcode) -> None:
        v = self.state.v
        v[decoded.x] ^= v[decoded.y]

    def op_add_reg(self, decoded: DecodedOpcode) -> None:
        # VF is not touched: no carry flag.
        v = self.state.v
        v[decoded.x] = (v[decoded.x] + v[decoded.y]) & 0xFF

    def op_sub_reg(self, decoded: DecodedOpcode) -> None:
        # VF is not touched: no borrow flag.
        v = self.state.v
        v[decoded.x] = (v[decoded.x] - v[decoded.y]) & 0xFF

    def op_shr(self, decoded: DecodedOpcode) -> None:
        # The shifted-out bit is dropped, VF is not touched.
        v = self.state.v
        v[decoded.x] >>= 1

    def op_shl(self, decoded: DecodedOpcode) -> None:
        # VF receives the low bit of VX before the shift.
        v = self.state.v
        v[FLAG_REGISTER] = v[decoded.x] & 0x01
        v[decoded.x] = (v[decoded.x] << 1) & 0xFF

    def op_ld_index(self, decoded: DecodedOpcode) -> None:
        self.state.i = decoded.nnn

    def op_rnd(self, decoded: DecodedOpcode) -> None:
        self.state.v[decoded.x] = self.rng.randint(0, 0xFF) & decoded.nn

    def op_drw(self, decoded: DecodedOpcode) -> None:
        state = self.state
        origin_x = state.v[decoded.x] & (WIDTH - 1)
        origin_y = state.v[decoded.y] & (HEIGHT - 1)
        sprite = [self.memory.read(state.i + row) for row in range(decoded.n)]

        collided = False
        for row, line in enumerate(sprite):
            y = origin_y + row
            if y >= HEIGHT:
                break
            for column in range(8):
                x = origin_x + column
                if x >= WIDTH:
                    break
                bit = (line >> (7 - column)) & 0x01
                if self.framebuffer.flip_pixel(x, y, bit):
                    collided = True
        state.v[FLAG_REGISTER] = 1 if collided else 0

    def op_skp(self, decoded: DecodedOpcode) -> None:
        if self.keypad.is_key_down(self.state.v[decoded.x] & 0x0F):
            self._skip()

    def op_sknp(self, decoded: DecodedOpcode) -> None:
        if not self.keypad.is_key_down(self.state.v[decoded.x] & 0x0F):
            self._skip()

    def op_ld_get_delay(self, decoded: DecodedOpcode) -> None:
        self.state.v[decoded.x] = self.state.delay_timer

    def op_ld_wait_key(self, decoded: DecodedOpcode) -> None:
        self.state.waiting_register = decoded.x
        if debug_enabled("input"):
            debug_log("input", "wait_for_key register=V%X", decoded.x)

    def op_ld_set_delay(self, decoded: DecodedOpcode) -> None:
        self.state.delay_timer = self.state.v[decoded.x]

    def op_ld_set_sound(self, decoded: DecodedOpcode) -> None:
        self.state.sound_timer = self.state.v[decoded.x]

    def op_add_index(self, decoded: DecodedOpcode) -> None:
        self.state.i = (self.state.i + self.state.v[decoded.x]) & 0xFFFF

    def op_ld_font(self, decoded: DecodedOpcode) -> None:
        self.state.i = glyph_address(self.state.v[decoded.x]) & 0xFFFF

    def op_ld_bcd(self, decoded: DecodedOpcode) -> None:
        value = self.state.v[decoded.x]
        self._store(self.state.i, (value // 100, (value % 100) // 10, value % 10))

    def op_store_registers(self, decoded: DecodedOpcode) -> None:
        self._store(self.state.i, self.state.v[: decoded.x + 1])

    def op_load_registers(self, decoded: DecodedOpcode) -> None:
        count = decoded.x + 1
        values = [self.memory.read(self.state.i + offset) for offset in range(count)]
        self.state.v[:count] = bytes(values)

    # ------------------------------------------------------------------
    # Helpers

    def _fetch(self, pc: int) -> int:
        try:
            return self.memory.load16(pc)
        except MemoryError as exc:
            raise MemoryFault(f"instruction fetch failed: {exc}", pc=pc) from exc

    def _jump(self, target: int) -> None:
        self.state.pc = (target - 2) & 0xFFFF

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _store(self, address: int, values) -> None:
        # Validated up front so a failing write leaves memory untouched.
        self.memory.write_bulk(address, values)

    def _poll_key(self) -> None:
        register = self.state.waiting_register
        nibble = self.keypad.is_any_key_down()
        if nibble is None:
            return
        self.state.v[register] = nibble & 0xFF
        self.state.waiting_register = None
        if debug_enabled("input"):
            debug_log("input", "key_received register=V%X key=%X", register, nibble)

    def _tick_timers(self) -> None:
        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            if state.sound_timer == 1:
                self._emit_beep()
            state.sound_timer -= 1

    def _emit_beep(self) -> None:
        if debug_enabled("audio"):
            debug_log("audio", "beep")
        if self.beep is not None:
            self.beep()

    def _halt(self, fault: VMFault, pc: int, word: int | None) -> None:
        self.halted = True
        self.fault = fault
        if self.trace is not None:
            self._record_trace(pc, word, False, note="fault")
        if debug_enabled("cpu"):
            debug_log("cpu", "fault %s", fault)

    def _clear_fault(self) -> None:
        self.halted = False
        self.fault = None

    def _record_trace(self, pc: int, word: int | None, blocked: bool, note: str = "") -> None:
        mnemonic = ""
        if word is not None:
            instruction = self.instruction_table.lookup(word)
            if instruction is not None:
                mnemonic = instruction.format(decode(word))
        snapshot = self.state.clone()
        snapshot.pc = pc
        self.trace.record_step(
            snapshot,
            word,
            blocked=blocked,
            halted=self.halted,
            mnemonic=mnemonic,
            note=note,
        )
