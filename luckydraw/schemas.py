from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from .types import Phase


class SettingsUpdate(BaseModel):
    """Partial settings edit. Omitted fields keep their current value."""

    model_config = ConfigDict(extra="forbid")

    start_number: Optional[int] = Field(None, description="First number of the range.")
    end_number: Optional[int] = Field(None, description="Last number of the range (inclusive).")
    draw_count: Optional[int] = Field(None, description="Numbers drawn per round.")
    allow_duplicates: Optional[StrictBool] = None
    sound_enabled: Optional[StrictBool] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class SettingsModel(BaseModel):
    start_number: int
    end_number: int
    draw_count: int
    allow_duplicates: bool
    sound_enabled: bool


class MachineSnapshot(BaseModel):
    phase: Phase
    settings: SettingsModel
    settings_open: bool = False
    history: List[int] = Field(default_factory=list)
    excluded_numbers: List[int] = Field(default_factory=list)
    current_result: List[int] = Field(default_factory=list)
    display_number: Optional[int] = None
    is_animating: bool = False
    total_range: int
    remaining_count: int
    can_draw_now: bool
