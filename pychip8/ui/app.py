"""Pygame front-end for the CHIP-8 interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import BeepTone
from pychip8.cpu import VMFault
from pychip8.cpu.core import DEFAULT_SPEED
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.io import KeypadState
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import HEIGHT, MONOCHROME, WIDTH, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    speed: int = DEFAULT_SPEED
    fullscreen: bool = False
    palette: Sequence[RGBColor] = MONOCHROME
    show_status: bool = True


class Chip8App:
    """Thin wrapper around the pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        self._config = config
        self._running = False
        self._keypad = KeypadState()
        self._beeper: BeepTone | None = None
        self._machine: Machine | None = None
        self._renderer = Renderer(config.palette)
        self._status_font = None
        self._beep_count = 0
        self._frame_counter = 0

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def beep_count(self) -> int:
        return self._beep_count

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")
        rom_path = self._config.rom_path
        if not rom_path.exists():
            raise RuntimeError(f"ROM file not found: {rom_path}")

        machine = self._create_machine(rom_path)
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {rom_path.name}")

        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)

        mixer_state = pygame.mixer.get_init()
        if mixer_state is not None:
            try:
                self._beeper = BeepTone(sample_rate=mixer_state[0])
            except RuntimeError as exc:
                self._beeper = None
                if debug_enabled("audio"):
                    debug_log("audio", "beeper_init_failed=%s", exc)
        elif debug_enabled("audio"):
            debug_log("audio", "mixer_unavailable")

        display_width = WIDTH * self._config.scale
        display_height = HEIGHT * self._config.scale
        status_height = _STATUS_LINES * _STATUS_LINE_HEIGHT if self._config.show_status else 0
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode((display_width, display_height + status_height), flags)

        clock = pygame.time.Clock()
        self._running = True

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                if not self._running:
                    break

                self._step_cpu(machine)

                frame = self._renderer.render(machine.framebuffer, scale=self._config.scale)
                screen.blit(frame.to_surface(), (0, 0))
                if status_height:
                    screen.blit(self._draw_status(pygame, machine, display_width, status_height), (0, display_height))
                pygame.display.flip()

                clock.tick(_FRAME_RATE)
                self._frame_counter += 1
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    # ------------------------------------------------------------------
    # Machine control

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            rom = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

        trace_capacity = 512 if debug_enabled("trace") else 0
        return create_machine(
            MachineConfig(
                speed=self._config.speed,
                rom_image=rom.data,
                beep=self._handle_beep,
                keypad=self._keypad,
                trace_capacity=trace_capacity,
            )
        )

    def _step_cpu(self, machine: Machine) -> int:
        try:
            return machine.cpu.cycle()
        except VMFault as exc:
            self._running = False
            trace = machine.cpu.trace
            if trace is not None:
                trace.dump("trace", limit=64)
            raise RuntimeError(f"CHIP-8 fault: {exc}") from exc

    def adjust_speed(self, delta: int) -> int:
        machine = self._machine
        if machine is None:
            return self._config.speed
        speed = max(_MIN_SPEED, machine.cpu.speed + delta)
        machine.cpu.set_speed(speed)
        if debug_enabled("cpu"):
            debug_log("cpu", "speed=%d", speed)
        return speed

    def reset_machine(self) -> None:
        if self._machine is not None:
            self._machine.cpu.reset()
            self._keypad.reset()

    def _handle_beep(self) -> None:
        self._beep_count += 1
        if self._beeper is not None:
            self._beeper.beep()

    # ------------------------------------------------------------------
    # Input

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        name = pygame.key.name(key_code).lower()
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed and self._handle_control_key(name):
            return
        if pressed:
            self._keypad.press(name)
        else:
            self._keypad.release(name)

    def _handle_control_key(self, name: str) -> bool:
        if name == "escape":
            self._running = False
        elif name == "f5":
            self.reset_machine()
        elif name == "f6":
            if self._beeper is not None:
                self._beeper.beep()
        elif name in ("=", "+", "[+]"):
            self.adjust_speed(_SPEED_STEP)
        elif name in ("-", "[-]"):
            self.adjust_speed(-_SPEED_STEP)
        else:
            return False
        return True

    # ------------------------------------------------------------------
    # Status line

    def status_lines(self, machine: Machine) -> list[str]:
        cpu = machine.cpu
        state = "WAIT" if cpu.blocked else "RUN"
        return [
            f"PC: {cpu.pc:04X}  I: {cpu.i:04X}  SP: {cpu.sp}  {state}",
            f"Instructions per frame: {cpu.speed}  [F5] reset  [F6] beep  [-/=] speed",
        ]

    def _draw_status(self, pygame, machine: Machine, width: int, height: int):
        surface = pygame.Surface((width, height))
        background, foreground = self._renderer.palette
        surface.fill(background)

        if self._status_font is None:
            pygame.font.init()
            self._status_font = pygame.font.Font(pygame.font.get_default_font(), _STATUS_LINE_HEIGHT - 4)

        y = 2
        for text in self.status_lines(machine):
            rendered = self._status_font.render(text, False, foreground)
            surface.blit(rendered, (4, y))
            y += _STATUS_LINE_HEIGHT
        return surface


_FRAME_RATE = 60
_SPEED_STEP = 10
_MIN_SPEED = 1
_STATUS_LINES = 2
_STATUS_LINE_HEIGHT = 18
