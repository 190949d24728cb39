"""Audio output for the CHIP-8 front-end."""

from __future__ import annotations

from .beeper import BeepTone

__all__ = ["BeepTone"]
