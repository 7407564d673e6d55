import random
import unittest

from luckydraw.animation import generate_schedule, linear
from luckydraw.config import AnimationSettings
from luckydraw.orchestrator import DrawOrchestrator
from luckydraw.tests.fakes import CyclingRandom, ManualFrameScheduler


class DrawOrchestratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.frames = ManualFrameScheduler()
        self.ticks = []
        self.results = []

    def _make(self, **kwargs) -> DrawOrchestrator:
        kwargs.setdefault("rng", random.Random(7))
        return DrawOrchestrator(
            self.frames,
            on_tick=lambda number, progress: self.ticks.append((number, progress)),
            on_complete=self.results.append,
            **kwargs,
        )

    def test_animates_then_reveals_precomputed_result(self) -> None:
        orchestrator = self._make()

        self.assertTrue(orchestrator.start(1, 10, 3))
        self.assertTrue(orchestrator.is_animating)
        self.frames.run_until_idle()

        self.assertEqual(len(self.results), 1)
        final = self.results[0]
        self.assertEqual(len(final), 3)
        self.assertEqual(len(set(final)), 3)
        self.assertTrue(all(1 <= n <= 10 for n in final))
        self.assertFalse(orchestrator.is_animating)
        self.assertEqual(orchestrator.current_display, final[0])

    def test_tick_progress_runs_from_zero_to_one(self) -> None:
        orchestrator = self._make()
        orchestrator.start(1, 10, 1)
        self.frames.run_until_idle()

        expected_ticks = generate_schedule(2000).tick_count
        self.assertEqual(len(self.ticks), expected_ticks)
        self.assertEqual(self.ticks[0][1], 0.0)
        self.assertEqual(self.ticks[-1][1], 1.0)
        progresses = [progress for _, progress in self.ticks]
        self.assertEqual(progresses, sorted(progresses))

    def test_ticks_ignore_exclusions(self) -> None:
        orchestrator = self._make(rng=CyclingRandom())
        orchestrator.start(1, 3, 1, excluded=[1, 2])
        self.frames.run_until_idle()

        self.assertEqual(self.results, [[3]])
        shown = {number for number, _ in self.ticks}
        self.assertIn(1, shown)
        self.assertIn(2, shown)

    def test_final_display_is_not_the_last_tick(self) -> None:
        rng = CyclingRandom()
        orchestrator = self._make(rng=rng, duration=100, easing=linear, min_interval=50, max_interval=50)
        orchestrator.start(1, 5, 1)
        self.frames.run_until_idle()

        # The result took the first draw from the source (index 0 -> 1); ticks
        # consumed the following values.
        self.assertEqual(self.results, [[1]])
        self.assertEqual([number for number, _ in self.ticks], [2, 3, 4])
        self.assertEqual(orchestrator.current_display, 1)

    def test_empty_pool_completes_without_animation(self) -> None:
        orchestrator = self._make()

        orchestrator.start(1, 3, 1, excluded=[1, 2, 3])

        self.assertEqual(self.results, [[]])
        self.assertEqual(self.frames.requested, 0)
        self.assertFalse(orchestrator.is_animating)

    def test_second_start_while_running_is_ignored(self) -> None:
        orchestrator = self._make()
        orchestrator.start(1, 10, 1)
        requested = self.frames.requested

        self.assertFalse(orchestrator.start(1, 10, 1))
        self.assertEqual(self.frames.requested, requested)

        self.frames.run_until_idle()
        self.assertEqual(len(self.results), 1)

    def test_stop_cancels_and_clears_display(self) -> None:
        orchestrator = self._make()
        orchestrator.start(1, 10, 2)
        for _ in range(5):
            self.frames.step(16)
        ticks_seen = len(self.ticks)
        self.assertIsNotNone(orchestrator.current_display)

        orchestrator.stop()
        orchestrator.stop()
        for _ in range(300):
            self.frames.step(16)

        self.assertEqual(len(self.ticks), ticks_seen)
        self.assertEqual(self.results, [])
        self.assertFalse(orchestrator.is_animating)
        self.assertIsNone(orchestrator.current_display)

    def test_can_restart_after_completion(self) -> None:
        orchestrator = self._make()
        orchestrator.start(1, 10, 1)
        self.frames.run_until_idle()
        self.assertTrue(orchestrator.start(1, 10, 1))
        self.frames.run_until_idle()
        self.assertEqual(len(self.results), 2)

    def test_from_settings_uses_configured_schedule(self) -> None:
        settings = AnimationSettings(
            duration_ms=300, min_interval_ms=100, max_interval_ms=100, easing="linear"
        )
        orchestrator = DrawOrchestrator.from_settings(
            settings,
            self.frames,
            rng=random.Random(1),
            on_tick=lambda number, progress: self.ticks.append(progress),
            on_complete=self.results.append,
        )
        orchestrator.start(1, 10, 1)
        self.frames.run_until_idle()

        self.assertEqual(self.ticks, [0.0, 1 / 3, 2 / 3, 1.0])
        self.assertEqual(len(self.results), 1)


if __name__ == "__main__":
    unittest.main()
