"""Phase state machine for the draw lifecycle.

State changes are expressed as event values applied by :func:`transition`,
which never mutates its input. :class:`DrawStateMachine` keeps the current
state and exposes one entry point per event plus the derived read model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from . import pool
from .config import LuckyDrawConfig
from .schemas import MachineSnapshot, SettingsModel, SettingsUpdate
from .types import DEFAULT_SETTINGS, MAX_RANGE, DrawState, Phase, Settings, ValidationResult


@dataclass(frozen=True)
class OpenSettings:
    pass


@dataclass(frozen=True)
class CloseSettings:
    pass


@dataclass(frozen=True)
class UpdateSettings:
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfirmSettings:
    pass


@dataclass(frozen=True)
class StartDraw:
    pass


@dataclass(frozen=True)
class UpdateDisplay:
    number: int


@dataclass(frozen=True)
class FinishDraw:
    numbers: Tuple[int, ...]


@dataclass(frozen=True)
class RestoreNumber:
    number: int


@dataclass(frozen=True)
class DrawAgain:
    pass


@dataclass(frozen=True)
class ResetAll:
    pass


Event = Union[
    OpenSettings,
    CloseSettings,
    UpdateSettings,
    ConfirmSettings,
    StartDraw,
    UpdateDisplay,
    FinishDraw,
    RestoreNumber,
    DrawAgain,
    ResetAll,
]

ALL_PHASES: FrozenSet[Phase] = frozenset(Phase)

# Phases in which each event is accepted; anything else is ignored.
ALLOWED_PHASES: Dict[Type[Any], FrozenSet[Phase]] = {
    OpenSettings: frozenset({Phase.INITIAL, Phase.READY, Phase.RESULT}),
    CloseSettings: frozenset({Phase.SETTINGS}),
    UpdateSettings: frozenset({Phase.SETTINGS}),
    ConfirmSettings: frozenset({Phase.SETTINGS}),
    StartDraw: frozenset({Phase.READY}),
    UpdateDisplay: frozenset({Phase.DRAWING}),
    FinishDraw: frozenset({Phase.DRAWING}),
    RestoreNumber: frozenset({Phase.READY, Phase.RESULT}),
    DrawAgain: frozenset({Phase.RESULT}),
    ResetAll: ALL_PHASES,
}


def _merge_settings(settings: Settings, changes: Mapping[str, Any]) -> Settings:
    merged = settings.copy(**changes)
    if merged.start_number > merged.end_number:
        merged = merged.copy(
            start_number=merged.end_number, end_number=merged.start_number
        )
    return merged


def _without(values: Sequence[int], number: int) -> Tuple[int, ...]:
    return tuple(n for n in values if n != number)


def transition(
    state: DrawState,
    event: Event,
    *,
    defaults: Settings = DEFAULT_SETTINGS,
    max_range: int = MAX_RANGE,
) -> DrawState:
    """Return the state that results from applying ``event`` to ``state``.

    Events that are not legal in the current phase, and a settings
    confirmation that fails validation, return ``state`` unchanged.
    """
    allowed = ALLOWED_PHASES.get(type(event))
    if allowed is None:
        raise TypeError(f"Unsupported event: {event!r}")
    if state.phase not in allowed:
        return state

    if isinstance(event, OpenSettings):
        return state.copy(phase=Phase.SETTINGS, settings_open=True)

    if isinstance(event, CloseSettings):
        return state.copy(
            phase=Phase.RESULT if state.history else Phase.INITIAL,
            settings=state.confirmed_settings,
            settings_open=False,
        )

    if isinstance(event, UpdateSettings):
        return state.copy(settings=_merge_settings(state.settings, event.changes))

    if isinstance(event, ConfirmSettings):
        if not pool.validate_settings(state.settings, max_range=max_range).valid:
            return state
        return state.copy(
            phase=Phase.READY,
            confirmed_settings=state.settings,
            settings_open=False,
            history=(),
            excluded_numbers=(),
            current_result=(),
        )

    if isinstance(event, StartDraw):
        return state.copy(phase=Phase.DRAWING, is_animating=True, current_result=())

    if isinstance(event, UpdateDisplay):
        return state.copy(display_number=event.number)

    if isinstance(event, FinishDraw):
        numbers = tuple(event.numbers)
        excluded = state.excluded_numbers
        if not state.settings.allow_duplicates:
            excluded = excluded + numbers
        return state.copy(
            phase=Phase.RESULT,
            is_animating=False,
            display_number=None,
            current_result=numbers,
            history=state.history + numbers,
            excluded_numbers=excluded,
        )

    if isinstance(event, RestoreNumber):
        # Every occurrence of the value is released, not just one entry.
        return state.copy(
            history=_without(state.history, event.number),
            excluded_numbers=_without(state.excluded_numbers, event.number),
        )

    if isinstance(event, DrawAgain):
        return state.copy(phase=Phase.READY, current_result=(), display_number=None)

    return DrawState(settings=defaults, confirmed_settings=defaults)


class DrawStateMachine:
    """Holds the draw state and applies events to it."""

    def __init__(
        self,
        config: Optional[LuckyDrawConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config or LuckyDrawConfig()
        self._defaults = self._config.defaults.to_settings()
        self._logger = logger or logging.getLogger("luckydraw.machine")
        self._state = DrawState(
            settings=self._defaults, confirmed_settings=self._defaults
        )
        self._listeners: list[Callable[[DrawState], None]] = []

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def settings(self) -> Settings:
        return self._state.settings

    @property
    def history(self) -> Tuple[int, ...]:
        return self._state.history

    @property
    def excluded_numbers(self) -> Tuple[int, ...]:
        return self._state.excluded_numbers

    @property
    def current_result(self) -> Tuple[int, ...]:
        return self._state.current_result

    @property
    def display_number(self) -> Optional[int]:
        return self._state.display_number

    @property
    def is_animating(self) -> bool:
        return self._state.is_animating

    @property
    def max_range(self) -> int:
        return self._config.max_range

    @property
    def total_range(self) -> int:
        s = self._state.settings
        return pool.total_range(s.start_number, s.end_number)

    @property
    def remaining_count(self) -> int:
        s = self._state.settings
        return pool.remaining_count(
            s.start_number, s.end_number, self._state.excluded_numbers, s.allow_duplicates
        )

    @property
    def can_draw_now(self) -> bool:
        s = self._state.settings
        return pool.can_draw(
            s.start_number,
            s.end_number,
            s.draw_count,
            self._state.excluded_numbers,
            s.allow_duplicates,
        )

    def validation(self) -> ValidationResult:
        return pool.validate_settings(self._state.settings, max_range=self._config.max_range)

    def subscribe(self, listener: Callable[[DrawState], None]) -> Callable[[], None]:
        """Call ``listener`` with the new state after every change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, event: Event) -> DrawState:
        previous = self._state
        current = transition(
            previous,
            event,
            defaults=self._defaults,
            max_range=self._config.max_range,
        )
        if current is previous:
            self._logger.debug(
                "Ignored %s in phase %s", type(event).__name__, previous.phase.value
            )
            return current

        self._state = current
        if current.phase is not previous.phase:
            self._logger.debug(
                "%s: %s -> %s",
                type(event).__name__,
                previous.phase.value,
                current.phase.value,
            )
        for listener in list(self._listeners):
            listener(current)
        return current

    def open_settings(self) -> DrawState:
        return self.dispatch(OpenSettings())

    def close_settings(self) -> DrawState:
        return self.dispatch(CloseSettings())

    def update_settings(
        self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any
    ) -> DrawState:
        """Merge a partial settings edit.

        Raises ``pydantic.ValidationError`` for unknown fields or values of
        the wrong type.
        """
        payload = dict(changes or {})
        payload.update(kwargs)
        update = SettingsUpdate(**payload)
        return self.dispatch(UpdateSettings(changes=update.changes()))

    def confirm_settings(self) -> DrawState:
        result = self.validation()
        if not result.valid:
            self._logger.info("Settings rejected: %s", result.error)
        return self.dispatch(ConfirmSettings())

    def start_draw(self) -> DrawState:
        return self.dispatch(StartDraw())

    def update_display(self, number: int) -> DrawState:
        return self.dispatch(UpdateDisplay(number=number))

    def finish_draw(self, numbers: Iterable[int]) -> DrawState:
        state = self.dispatch(FinishDraw(numbers=tuple(numbers)))
        if state.phase is Phase.RESULT:
            self._logger.info(
                "Draw committed: %s (history size %s)",
                list(state.current_result),
                len(state.history),
            )
        return state

    def restore_number(self, number: int) -> DrawState:
        return self.dispatch(RestoreNumber(number=number))

    def draw_again(self) -> DrawState:
        return self.dispatch(DrawAgain())

    def reset_all(self) -> DrawState:
        return self.dispatch(ResetAll())

    def snapshot(self) -> MachineSnapshot:
        state = self._state
        s = state.settings
        return MachineSnapshot(
            phase=state.phase,
            settings=SettingsModel(
                start_number=s.start_number,
                end_number=s.end_number,
                draw_count=s.draw_count,
                allow_duplicates=s.allow_duplicates,
                sound_enabled=s.sound_enabled,
            ),
            settings_open=state.settings_open,
            history=list(state.history),
            excluded_numbers=list(state.excluded_numbers),
            current_result=list(state.current_result),
            display_number=state.display_number,
            is_animating=state.is_animating,
            total_range=self.total_range,
            remaining_count=self.remaining_count,
            can_draw_now=self.can_draw_now,
        )


__all__ = [
    "ALLOWED_PHASES",
    "CloseSettings",
    "ConfirmSettings",
    "DrawAgain",
    "DrawStateMachine",
    "Event",
    "FinishDraw",
    "OpenSettings",
    "ResetAll",
    "RestoreNumber",
    "StartDraw",
    "UpdateDisplay",
    "UpdateSettings",
    "transition",
]
