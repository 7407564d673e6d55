"""Decelerating tick schedules and the frame-driven runner that plays them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

Easing = Callable[[float], float]

DEFAULT_DURATION_MS = 2000
MIN_INTERVAL_MS = 50
MAX_INTERVAL_MS = 400

logger = logging.getLogger("luckydraw.animation")


def ease_out_quart(t: float) -> float:
    return 1 - (1 - t) ** 4


def ease_out_expo(t: float) -> float:
    return 1.0 if t == 1 else 1 - 2 ** (-10 * t)


def linear(t: float) -> float:
    return t


EASINGS: Dict[str, Easing] = {
    "ease_out_quart": ease_out_quart,
    "ease_out_expo": ease_out_expo,
    "linear": linear,
}


def get_easing(name: str) -> Easing:
    try:
        return EASINGS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown easing: {name}") from exc


@dataclass(frozen=True)
class AnimationSchedule:
    """Tick timestamps in milliseconds, relative to the first frame."""

    timestamps: Tuple[float, ...]
    total_duration: float

    @property
    def tick_count(self) -> int:
        return len(self.timestamps)


def generate_schedule(
    duration: float = DEFAULT_DURATION_MS,
    easing: Easing = ease_out_quart,
    min_interval: float = MIN_INTERVAL_MS,
    max_interval: float = MAX_INTERVAL_MS,
) -> AnimationSchedule:
    """Build a schedule whose tick spacing stretches from ``min_interval`` to
    ``max_interval`` as eased progress approaches 1.

    The last timestamp is always ``duration`` itself, so the final tick lands
    exactly when the animation completes.
    """
    if duration <= 0:
        return AnimationSchedule(timestamps=(0,), total_duration=0)
    if min_interval <= 0:
        raise ValueError("min_interval must be positive")

    timestamps = []
    elapsed = 0.0
    while elapsed < duration:
        timestamps.append(elapsed)
        progress = easing(elapsed / duration)
        elapsed += min_interval + (max_interval - min_interval) * progress
    timestamps.append(duration)
    return AnimationSchedule(timestamps=tuple(timestamps), total_duration=duration)


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[float], None]) -> Any:
        ...

    def cancel_frame(self, handle: Any) -> None:
        ...


class AsyncioFrameScheduler:
    """Frame primitive backed by an asyncio event loop.

    Callbacks receive the loop clock in milliseconds.
    """

    def __init__(
        self,
        frame_interval_ms: float = 16,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._interval = frame_interval_ms / 1000.0
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def request_frame(self, callback: Callable[[float], None]) -> asyncio.TimerHandle:
        loop = self._get_loop()

        def _fire() -> None:
            callback(loop.time() * 1000.0)

        return loop.call_later(self._interval, _fire)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class AnimationRun:
    """A single playback of a schedule.

    ``cancel`` may be called any number of times, before or after completion;
    once called no further callback is delivered.
    """

    def __init__(
        self,
        schedule: AnimationSchedule,
        on_tick: Callable[[int], None],
        on_complete: Callable[[], None],
        frames: FrameScheduler,
    ) -> None:
        self._schedule = schedule
        self._on_tick = on_tick
        self._on_complete = on_complete
        self._frames = frames
        self._index = 0
        self._start_time: Optional[float] = None
        self._handle: Any = None
        self._cancelled = False
        self._finished = False

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._finished)

    def start(self) -> None:
        self._handle = self._frames.request_frame(self._frame)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._frames.cancel_frame(self._handle)
            self._handle = None

    def _frame(self, timestamp: float) -> None:
        if self._cancelled or self._finished:
            return
        self._handle = None
        if self._start_time is None:
            self._start_time = timestamp
        elapsed = timestamp - self._start_time

        timestamps = self._schedule.timestamps
        while self._index < len(timestamps) and elapsed >= timestamps[self._index]:
            index = self._index
            self._index += 1
            self._on_tick(index)
            if self._cancelled:
                return

        if elapsed < self._schedule.total_duration:
            self._handle = self._frames.request_frame(self._frame)
            return

        self._finished = True
        logger.debug("Animation finished after %.0f ms and %s ticks", elapsed, self._index)
        self._on_complete()


def run_animation(
    schedule: AnimationSchedule,
    on_tick: Callable[[int], None],
    on_complete: Callable[[], None],
    frames: Optional[FrameScheduler] = None,
) -> Callable[[], None]:
    """Play ``schedule`` and return its cancel function."""
    run = AnimationRun(schedule, on_tick, on_complete, frames or AsyncioFrameScheduler())
    run.start()
    return run.cancel


__all__ = [
    "AnimationRun",
    "AnimationSchedule",
    "AsyncioFrameScheduler",
    "EASINGS",
    "Easing",
    "FrameScheduler",
    "ease_out_expo",
    "ease_out_quart",
    "generate_schedule",
    "get_easing",
    "linear",
    "run_animation",
]
