from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from . import pool
from .animation import (
    DEFAULT_DURATION_MS,
    MAX_INTERVAL_MS,
    MIN_INTERVAL_MS,
    Easing,
    FrameScheduler,
    ease_out_quart,
    generate_schedule,
    get_easing,
    run_animation,
)
from .config import AnimationSettings

TickObserver = Callable[[int, float], None]
CompletionObserver = Callable[[List[int]], None]


class DrawOrchestrator:
    """Runs one draw: the real result is sampled up front, then a cosmetic
    animation of random numbers plays before it is revealed.

    The number shown at the end is always the first element of the
    precomputed result, never a value sampled on the last tick.
    """

    def __init__(
        self,
        frames: Optional[FrameScheduler] = None,
        *,
        rng: Optional[pool.RandomSource] = None,
        duration: float = DEFAULT_DURATION_MS,
        easing: Easing = ease_out_quart,
        min_interval: float = MIN_INTERVAL_MS,
        max_interval: float = MAX_INTERVAL_MS,
        on_tick: Optional[TickObserver] = None,
        on_complete: Optional[CompletionObserver] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._frames = frames
        self._rng = rng
        self._duration = duration
        self._easing = easing
        self._min_interval = min_interval
        self._max_interval = max_interval
        self.on_tick = on_tick
        self.on_complete = on_complete
        self._logger = logger or logging.getLogger("luckydraw.orchestrator")
        self._cancel: Optional[Callable[[], None]] = None
        self._final: List[int] = []
        self._is_animating = False
        self._current_display: Optional[int] = None

    @classmethod
    def from_settings(
        cls,
        settings: AnimationSettings,
        frames: Optional[FrameScheduler] = None,
        **kwargs,
    ) -> "DrawOrchestrator":
        return cls(
            frames,
            duration=settings.duration_ms,
            easing=get_easing(settings.easing),
            min_interval=settings.min_interval_ms,
            max_interval=settings.max_interval_ms,
            **kwargs,
        )

    @property
    def is_animating(self) -> bool:
        return self._is_animating

    @property
    def current_display(self) -> Optional[int]:
        return self._current_display

    def start(
        self,
        start: int,
        end: int,
        draw_count: int,
        excluded: Iterable[int] = (),
        allow_duplicates: bool = False,
    ) -> bool:
        """Begin a draw. Returns ``False`` when one is already running."""
        if self._is_animating:
            self._logger.debug("Draw already in progress; start ignored.")
            return False

        final = pool.sample_many(
            start, end, draw_count, excluded, allow_duplicates, rng=self._rng
        )
        if not final:
            self._logger.info("No numbers available in %s..%s; nothing to draw.", start, end)
            self._notify_complete([])
            return True

        self._final = final
        self._is_animating = True
        schedule = generate_schedule(
            self._duration, self._easing, self._min_interval, self._max_interval
        )
        total_ticks = schedule.tick_count
        self._logger.debug(
            "Animating %s ticks over %s ms for result %s", total_ticks, schedule.total_duration, final
        )

        def _tick(index: int) -> None:
            number = pool.sample_one(start, end, (), rng=self._rng)
            progress = index / (total_ticks - 1) if total_ticks > 1 else 1.0
            if number is not None:
                self._current_display = number
                if self.on_tick is not None:
                    self.on_tick(number, progress)

        def _complete() -> None:
            self._cancel = None
            self._is_animating = False
            self._current_display = self._final[0] if self._final else None
            self._notify_complete(list(self._final))

        cancel = run_animation(schedule, _tick, _complete, self._frames)
        if self._is_animating:
            self._cancel = cancel
        return True

    def stop(self) -> None:
        """Cancel a running animation and clear the display. Safe to repeat."""
        if self._cancel is not None:
            self._cancel()
            self._cancel = None
        self._is_animating = False
        self._current_display = None

    def _notify_complete(self, numbers: List[int]) -> None:
        if self.on_complete is not None:
            self.on_complete(numbers)
