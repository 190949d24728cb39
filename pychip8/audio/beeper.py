"""Short square-wave beep played when the sound timer expires."""

from __future__ import annotations

from array import array
from typing import Optional


class BeepTone:
    """Play a fixed-length tone through pygame's mixer on each :meth:`beep`."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = 440.0,
        duration_ms: int = 120,
        volume: float = 0.35,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating BeepTone")
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._duration_ms = max(1, duration_ms)
        self._volume = max(0.0, min(1.0, volume))
        self._sound: Optional[pygame.mixer.Sound] = None
        self._channel: Optional[pygame.mixer.Channel] = None

    # ------------------------------------------------------------------
    # Public API

    def beep(self) -> None:
        """Start the tone; a beep already playing is restarted."""

        sound = self._sound
        if sound is None:
            sound = self._build_sound()
            self._sound = sound

        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                return
            self._channel = channel

        channel.play(sound)
        channel.set_volume(self._volume)

    __call__ = beep

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _build_sound(self) -> "pygame.mixer.Sound":
        total_samples = max(1, self._sample_rate * self._duration_ms // 1000)
        half_period = max(1, int(round(self._sample_rate / (2.0 * self._frequency))))

        buffer = array("h")
        amplitude = 12_000
        for index in range(total_samples):
            high = (index // half_period) % 2 == 0
            buffer.append(amplitude if high else -amplitude)

        return self._pygame.mixer.Sound(buffer=buffer.tobytes())


__all__ = ["BeepTone"]
