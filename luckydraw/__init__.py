"""Lucky number draws with exclusion rules and a decelerating reveal."""

from .animation import AnimationSchedule, generate_schedule, run_animation
from .machine import DrawStateMachine
from .orchestrator import DrawOrchestrator
from .pool import (
    available_numbers,
    can_draw,
    remaining_count,
    sample_many,
    sample_one,
    total_range,
    validate_settings,
)
from .session import DrawSession
from .types import DEFAULT_SETTINGS, MAX_RANGE, DrawState, Phase, Settings, ValidationResult

__all__ = [
    "AnimationSchedule",
    "DEFAULT_SETTINGS",
    "DrawOrchestrator",
    "DrawSession",
    "DrawState",
    "DrawStateMachine",
    "MAX_RANGE",
    "Phase",
    "Settings",
    "ValidationResult",
    "available_numbers",
    "can_draw",
    "generate_schedule",
    "remaining_count",
    "run_animation",
    "sample_many",
    "sample_one",
    "total_range",
    "validate_settings",
]
