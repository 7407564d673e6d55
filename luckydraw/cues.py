from __future__ import annotations

import logging
import sys
from typing import Optional, Protocol, TextIO

from .preferences import PreferenceStore, sound_enabled

BASE_FREQUENCY_HZ = 440.0
MAX_FREQUENCY_HZ = 880.0


class CuePlayer(Protocol):
    def tick(self, progress: float) -> None:
        ...

    def success(self) -> None:
        ...


def tick_frequency(progress: float) -> float:
    """Pitch of a tick: A4 at the start of a draw rising to A5 at the end."""
    clamped = min(max(progress, 0.0), 1.0)
    return BASE_FREQUENCY_HZ + (MAX_FREQUENCY_HZ - BASE_FREQUENCY_HZ) * clamped


class GatedCues:
    """Forwards cues to ``player`` only while the sound preference is on."""

    def __init__(self, player: CuePlayer, preferences: PreferenceStore) -> None:
        self._player = player
        self._preferences = preferences

    @property
    def enabled(self) -> bool:
        return sound_enabled(self._preferences)

    def tick(self, progress: float) -> None:
        if self.enabled:
            self._player.tick(progress)

    def success(self) -> None:
        if self.enabled:
            self._player.success()


class TerminalCues:
    """Rings the terminal bell when a result is revealed.

    Ticks are logged at DEBUG with their tone frequency.
    """

    def __init__(
        self, stream: Optional[TextIO] = None, logger: Optional[logging.Logger] = None
    ) -> None:
        self._stream = stream or sys.stdout
        self._logger = logger or logging.getLogger("luckydraw.cues")

    def tick(self, progress: float) -> None:
        self._logger.debug("tick %.0f Hz", tick_frequency(progress))

    def success(self) -> None:
        self._stream.write("\a")
        self._stream.flush()
