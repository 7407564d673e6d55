from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


MAX_RANGE = 10000


class Phase(str, Enum):
    INITIAL = "initial"
    SETTINGS = "settings"
    READY = "ready"
    DRAWING = "drawing"
    RESULT = "result"


@dataclass(frozen=True)
class Settings:
    start_number: int = 1
    end_number: int = 12
    draw_count: int = 1
    allow_duplicates: bool = False
    sound_enabled: bool = True

    def copy(self, **updates) -> "Settings":
        return replace(self, **updates)


DEFAULT_SETTINGS = Settings()


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class DrawState:
    """Immutable snapshot of the draw lifecycle.

    ``excluded_numbers`` mirrors ``history`` while duplicates are disallowed
    and is left untouched by draws while they are allowed. ``settings`` may
    hold unconfirmed edits while the settings panel is open;
    ``confirmed_settings`` is what closing the panel falls back to.
    """

    phase: Phase = Phase.INITIAL
    settings: Settings = DEFAULT_SETTINGS
    confirmed_settings: Settings = DEFAULT_SETTINGS
    settings_open: bool = False
    history: Tuple[int, ...] = ()
    excluded_numbers: Tuple[int, ...] = ()
    current_result: Tuple[int, ...] = ()
    display_number: Optional[int] = None
    is_animating: bool = False

    def copy(self, **updates) -> "DrawState":
        return replace(self, **updates)


INITIAL_STATE = DrawState()
