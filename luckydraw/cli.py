from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from dataclasses import replace
from typing import Any, Dict, Optional, TextIO

from .animation import EASINGS, AsyncioFrameScheduler
from .config import LuckyDrawConfig, load_config
from .cues import GatedCues, TerminalCues
from .machine import DrawStateMachine
from .orchestrator import DrawOrchestrator
from .preferences import (
    SOUND_ENABLED_KEY,
    InMemoryPreferences,
    JsonFilePreferences,
    PreferenceStore,
    set_sound_enabled,
    sound_enabled,
)
from .session import DrawSession
from .types import DrawState, Phase


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


class TerminalRenderer:
    """Prints the rolling number in place and each committed result."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._last_display: Optional[int] = None

    def __call__(self, state: DrawState) -> None:
        if state.phase is Phase.DRAWING and state.display_number is not None:
            if state.display_number != self._last_display:
                self._last_display = state.display_number
                self._stream.write(f"\r  {state.display_number:>5}  ")
                self._stream.flush()
        elif state.phase is Phase.RESULT and self._last_display is not None:
            self._last_display = None
            self._stream.write("\r" + " " * 11 + "\r")

    def result(self, round_no: int, state: DrawState, remaining: int) -> None:
        numbers = ", ".join(str(n) for n in state.current_result) or "-"
        self._stream.write(f"Round {round_no}: {numbers}  (remaining: {remaining})\n")
        self._stream.flush()


def build_preferences(args: argparse.Namespace, config: LuckyDrawConfig) -> PreferenceStore:
    path = args.prefs_file or config.preferences_file
    store: PreferenceStore = JsonFilePreferences(path) if path else InMemoryPreferences()
    if args.sound is not None:
        set_sound_enabled(store, args.sound == "on")
    return store


def _settings_changes(args: argparse.Namespace, store: PreferenceStore) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    if store.get(SOUND_ENABLED_KEY) is not None:
        changes["sound_enabled"] = sound_enabled(store)
    if args.start is not None:
        changes["start_number"] = args.start
    if args.end is not None:
        changes["end_number"] = args.end
    if args.count is not None:
        changes["draw_count"] = args.count
    if args.allow_duplicates:
        changes["allow_duplicates"] = True
    return changes


async def run(args: argparse.Namespace, stream: Optional[TextIO] = None) -> int:
    out = stream or sys.stdout
    config = load_config(args.env_file)
    configure_logging(args.verbose)
    logger = logging.getLogger("luckydraw.cli")

    animation = config.animation
    if args.duration is not None:
        animation = replace(animation, duration_ms=args.duration)
    if args.easing is not None:
        animation = replace(animation, easing=args.easing)
    config = config.copy(animation=animation)

    preferences = build_preferences(args, config)
    machine = DrawStateMachine(config)
    machine.open_settings()
    machine.update_settings(_settings_changes(args, preferences))
    validation = machine.validation()
    if not validation.valid:
        print(f"Invalid settings: {validation.error}", file=sys.stderr)
        return 2
    machine.confirm_settings()

    rng = random.Random(args.seed) if args.seed is not None else None
    orchestrator = DrawOrchestrator.from_settings(
        animation, AsyncioFrameScheduler(animation.frame_interval_ms), rng=rng
    )
    session = DrawSession(machine, orchestrator, GatedCues(TerminalCues(out), preferences))
    renderer = TerminalRenderer(out)
    unsubscribe = machine.subscribe(renderer)
    loop = asyncio.get_running_loop()

    try:
        for round_no in range(1, args.rounds + 1):
            if machine.phase is Phase.RESULT:
                machine.draw_again()
            if not machine.can_draw_now:
                out.write("All numbers have been drawn.\n")
                break

            done: asyncio.Future = loop.create_future()

            def _on_change(state: DrawState, done: asyncio.Future = done) -> None:
                if state.phase is Phase.RESULT and not done.done():
                    done.set_result(state)

            stop_watching = machine.subscribe(_on_change)
            try:
                session.draw()
                state = await done
            finally:
                stop_watching()
            renderer.result(round_no, state, machine.remaining_count)
    finally:
        unsubscribe()
        session.close()

    logger.info("Finished with history %s", list(machine.history))
    if args.json:
        out.write(machine.snapshot().model_dump_json(indent=2) + "\n")
    return 0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lucky number draw with a slot-machine reveal")
    parser.add_argument("--start", type=int, default=None, help="First number of the range.")
    parser.add_argument("--end", type=int, default=None, help="Last number of the range.")
    parser.add_argument("--count", type=int, default=None, help="Numbers drawn per round.")
    parser.add_argument(
        "--allow-duplicates", action="store_true", help="Allow numbers to be drawn again."
    )
    parser.add_argument("--rounds", type=int, default=1, help="Number of draws to run.")
    parser.add_argument("--duration", type=int, default=None, help="Animation length in ms.")
    parser.add_argument("--easing", choices=sorted(EASINGS), default=None)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible draws.")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file")
    parser.add_argument("--prefs-file", type=str, default=None, help="JSON preferences file.")
    parser.add_argument("--sound", choices=("on", "off"), default=None, help="Persist the sound preference.")
    parser.add_argument("--json", action="store_true", help="Print the final state as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Draw stopped by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
