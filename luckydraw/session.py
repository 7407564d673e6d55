from __future__ import annotations

import logging
from typing import List, Optional

from .cues import CuePlayer
from .machine import DrawStateMachine
from .orchestrator import DrawOrchestrator
from .types import Phase


class DrawSession:
    """Connects the state machine to an orchestrator and optional cue player.

    Ticks update the machine's display number and play the tick cue; the
    completion commits the precomputed result and plays the success cue.
    """

    def __init__(
        self,
        machine: DrawStateMachine,
        orchestrator: DrawOrchestrator,
        cues: Optional[CuePlayer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._machine = machine
        self._orchestrator = orchestrator
        self._cues = cues
        self._logger = logger or logging.getLogger("luckydraw.session")
        orchestrator.on_tick = self._handle_tick
        orchestrator.on_complete = self._handle_complete

    @property
    def machine(self) -> DrawStateMachine:
        return self._machine

    @property
    def orchestrator(self) -> DrawOrchestrator:
        return self._orchestrator

    def draw(self) -> bool:
        """Start a draw from the ready phase. Returns ``False`` if none started."""
        machine = self._machine
        if machine.phase is not Phase.READY:
            self._logger.debug("Draw requested in phase %s; ignoring.", machine.phase.value)
            return False
        validation = machine.validation()
        if not validation.valid:
            self._logger.info("Draw refused: %s", validation.error)
            return False
        if not machine.can_draw_now or self._orchestrator.is_animating:
            return False

        settings = machine.settings
        machine.start_draw()
        self._logger.info(
            "Drawing %s from %s..%s (duplicates %s, %s remaining)",
            settings.draw_count,
            settings.start_number,
            settings.end_number,
            "allowed" if settings.allow_duplicates else "excluded",
            machine.remaining_count,
        )
        return self._orchestrator.start(
            settings.start_number,
            settings.end_number,
            settings.draw_count,
            machine.excluded_numbers,
            settings.allow_duplicates,
        )

    def close(self) -> None:
        self._orchestrator.stop()

    def _sound_on(self) -> bool:
        return self._cues is not None and self._machine.settings.sound_enabled

    def _handle_tick(self, number: int, progress: float) -> None:
        self._machine.update_display(number)
        if self._sound_on():
            self._cues.tick(progress)

    def _handle_complete(self, numbers: List[int]) -> None:
        self._machine.finish_draw(numbers)
        if numbers and self._sound_on():
            self._cues.success()
