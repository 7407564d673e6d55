from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from .animation import EASINGS
from .types import MAX_RANGE, Settings


def _bool_from_env(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


@dataclass(frozen=True)
class AnimationSettings:
    duration_ms: int = 2000
    min_interval_ms: int = 50
    max_interval_ms: int = 400
    frame_interval_ms: int = 16
    easing: str = "ease_out_quart"


@dataclass(frozen=True)
class DrawDefaults:
    start_number: int = 1
    end_number: int = 12
    draw_count: int = 1
    allow_duplicates: bool = False
    sound_enabled: bool = True

    def to_settings(self) -> Settings:
        return Settings(
            start_number=self.start_number,
            end_number=self.end_number,
            draw_count=self.draw_count,
            allow_duplicates=self.allow_duplicates,
            sound_enabled=self.sound_enabled,
        )


@dataclass(frozen=True)
class LuckyDrawConfig:
    animation: AnimationSettings = AnimationSettings()
    defaults: DrawDefaults = DrawDefaults()
    max_range: int = MAX_RANGE
    preferences_file: Optional[str] = None

    def copy(self, **updates) -> "LuckyDrawConfig":
        return replace(self, **updates)


def load_from_environment() -> LuckyDrawConfig:
    easing = os.getenv("LUCKYDRAW_EASING", "ease_out_quart")
    if easing not in EASINGS:
        raise ValueError(f"Unknown easing: {easing}")

    animation = AnimationSettings(
        duration_ms=_int_from_env(os.getenv("LUCKYDRAW_DURATION_MS"), 2000),
        min_interval_ms=_int_from_env(os.getenv("LUCKYDRAW_MIN_INTERVAL_MS"), 50),
        max_interval_ms=_int_from_env(os.getenv("LUCKYDRAW_MAX_INTERVAL_MS"), 400),
        frame_interval_ms=_int_from_env(os.getenv("LUCKYDRAW_FRAME_INTERVAL_MS"), 16),
        easing=easing,
    )
    if animation.min_interval_ms <= 0 or animation.max_interval_ms < animation.min_interval_ms:
        raise ValueError("Animation intervals must satisfy 0 < min <= max")
    if animation.frame_interval_ms <= 0:
        raise ValueError("LUCKYDRAW_FRAME_INTERVAL_MS must be positive")

    defaults = DrawDefaults(
        start_number=_int_from_env(os.getenv("LUCKYDRAW_START_NUMBER"), 1),
        end_number=_int_from_env(os.getenv("LUCKYDRAW_END_NUMBER"), 12),
        draw_count=_int_from_env(os.getenv("LUCKYDRAW_DRAW_COUNT"), 1),
        allow_duplicates=_bool_from_env(os.getenv("LUCKYDRAW_ALLOW_DUPLICATES"), False),
        sound_enabled=_bool_from_env(os.getenv("LUCKYDRAW_SOUND_ENABLED"), True),
    )

    max_range = _int_from_env(os.getenv("LUCKYDRAW_MAX_RANGE"), MAX_RANGE)
    if max_range < 1:
        raise ValueError("LUCKYDRAW_MAX_RANGE must be at least 1")

    preferences_file = os.getenv("LUCKYDRAW_PREFERENCES_FILE") or None

    return LuckyDrawConfig(
        animation=animation,
        defaults=defaults,
        max_range=max_range,
        preferences_file=preferences_file,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> LuckyDrawConfig:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
