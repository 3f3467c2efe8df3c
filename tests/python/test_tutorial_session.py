from __future__ import annotations

import unittest
from typing import List

from analytics import MetricsExporter, TutorialAnalytics
from tutorial import Director, ManualScheduler, SessionState, TutorialSession, TutorialStep


class PendingStep(TutorialStep):
    """Step that waits until a test completes it."""

    def __init__(self, log: List[str], label: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.log = log
        self.label = label

    def render(self) -> None:
        self.show_message()

    def restore(self) -> None:
        super().restore()
        self.log.append(f"restore:{self.label}")

    def invoke_events(self) -> None:
        self.log.append(f"invoke:{self.label}")


class TutorialSessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = ManualScheduler()
        self.metrics = MetricsExporter()
        self.director = Director(self.scheduler, analytics=TutorialAnalytics(exporter=self.metrics))
        self.log: List[str] = []

    def _pending(self, count: int) -> List[PendingStep]:
        return [PendingStep(self.log, str(index)) for index in range(count)]

    def test_auto_advance_runs_every_step(self) -> None:
        steps = [TutorialStep() for _ in range(3)]
        session = TutorialSession(steps, name="auto", auto_advance=True, director=self.director)
        seen = []
        finished = []
        session.add_step_listener(seen.append)
        session.add_completion_listener(lambda: finished.append(True))

        session.run()

        self.assertEqual(session.current_step_index, 3)
        self.assertEqual(session.state, SessionState.DONE)
        self.assertTrue(all(step.is_complete for step in steps))
        self.assertEqual(seen, steps)
        self.assertEqual(finished, [True])
        self.assertNotIn(session, self.director.sessions)

        counts = self.metrics.export_counts()
        self.assertEqual(counts["tutorial_session_started:auto"], 1)
        self.assertEqual(counts["tutorial_step_completed:auto"], 3)
        self.assertEqual(counts["tutorial_session_completed:auto"], 1)

    def test_without_auto_advance_waits_for_run(self) -> None:
        session = TutorialSession([TutorialStep(), TutorialStep()], director=self.director)
        session.run()
        self.assertEqual(session.current_step_index, 1)
        self.assertEqual(session.state, SessionState.RUNNING)
        self.assertFalse(session.is_executing)
        self.assertFalse(session.current_step.is_complete)

        session.run()
        self.assertTrue(session.is_finished)
        self.assertEqual(session.current_step_index, 2)

    def test_run_arms_remaining_steps(self) -> None:
        steps = self._pending(3)
        for step in steps:
            step.is_complete = True
        session = TutorialSession(steps, director=self.director)
        session.skip_to(1)
        session.run()
        self.assertTrue(steps[0].is_complete)
        self.assertTrue(steps[1].is_executing)
        self.assertFalse(steps[2].is_complete)

    def test_terminate_invokes_last_step_and_restores(self) -> None:
        session = TutorialSession(self._pending(4), director=self.director)
        session.run()
        self.assertTrue(session.is_executing)

        session.terminate(invoke_last_step=True)

        self.assertEqual(session.current_step_index, 3)
        self.assertEqual(session.state, SessionState.DONE)
        self.assertEqual(
            self.log,
            ["invoke:3", "restore:0", "restore:1", "restore:2", "restore:3"],
        )
        self.assertNotIn(session, self.director.sessions)
        self.assertEqual(self.metrics.export_counts()["tutorial_session_terminated"], 1)

    def test_terminate_before_running_skips_restore(self) -> None:
        session = TutorialSession(self._pending(2), director=self.director)
        session.terminate()
        self.assertEqual(self.log, [])
        self.assertTrue(session.is_finished)
        self.assertEqual(session.current_step_index, 1)

    def test_terminate_empty_session(self) -> None:
        session = TutorialSession([], director=self.director)
        session.terminate(invoke_last_step=True)
        self.assertTrue(session.is_finished)
        self.assertEqual(session.current_step_index, 0)

    def test_skip_advances_once_with_no_step(self) -> None:
        steps = self._pending(2)
        session = TutorialSession(steps, director=self.director)
        seen = []
        session.add_step_listener(seen.append)
        session.run()

        session.skip()

        self.assertEqual(session.current_step_index, 1)
        self.assertEqual(seen, [None])
        self.assertFalse(steps[0].is_executing)

        # a late completion from the skipped step is not counted again
        steps[0].complete()
        self.assertEqual(session.current_step_index, 1)
        self.assertEqual(seen, [None])
        self.assertEqual(self.metrics.export_counts()["tutorial_step_skipped"], 1)

    def test_terminate_after_completion_is_ignored(self) -> None:
        steps = self._pending(3)
        session = TutorialSession(steps, auto_advance=True, director=self.director)
        session.run()
        for step in steps:
            step.complete()
        self.assertTrue(session.is_finished)

        session.terminate(invoke_last_step=True)

        self.assertEqual(session.current_step_index, 3)
        self.assertIsNone(session.current_step)
        self.assertEqual(self.log, [])
        self.assertNotIn("tutorial_session_terminated", self.metrics.export_counts())

    def test_skip_cancels_pending_delay(self) -> None:
        delayed = PendingStep(self.log, "0", delay=1.0, message="later")
        session = TutorialSession([delayed, PendingStep(self.log, "1")], director=self.director)
        session.run()
        self.assertEqual(self.scheduler.pending, 1)

        session.skip()

        self.assertEqual(self.scheduler.pending, 0)
        self.assertFalse(delayed.is_executing)
        self.assertEqual(self.log, ["restore:0"])
        self.scheduler.advance(5)
        self.assertEqual(session.current_step_index, 1)
        self.assertFalse(session.current_step.is_executing)

    def test_skip_last_step_finishes(self) -> None:
        session = TutorialSession(self._pending(1), director=self.director)
        finished = []
        session.add_completion_listener(lambda: finished.append(True))
        session.run()
        session.skip()
        self.assertTrue(session.is_finished)
        self.assertEqual(finished, [True])
        session.skip()
        self.assertEqual(session.current_step_index, 1)

    def test_skip_to_clamps_out_of_range(self) -> None:
        session = TutorialSession(self._pending(3), director=self.director)
        with self.assertLogs("tutorial.session", level="WARNING"):
            session.skip_to(10)
        self.assertEqual(session.current_step_index, 3)
        self.assertIsNone(session.current_step)
        with self.assertLogs("tutorial.session", level="WARNING"):
            session.skip_to(-2)
        self.assertEqual(session.current_step_index, 0)
        session.skip_to(1)
        self.assertEqual(session.current_step_index, 1)

    def test_skip_to_end(self) -> None:
        session = TutorialSession(self._pending(3), director=self.director)
        session.skip_to_end()
        self.assertEqual(session.current_step_index, 2)
        self.assertTrue(session.is_last_step)

    def test_empty_session_is_safe(self) -> None:
        session = TutorialSession([], director=self.director)
        self.assertIsNone(session.current_step)
        self.assertTrue(session.is_last_step)
        self.assertEqual(session.total_steps, 0)
        session.run()
        self.assertEqual(session.state, SessionState.RUNNING)
        self.assertFalse(session.is_executing)
        session.skip_to_end()
        self.assertEqual(session.current_step_index, 0)

    def test_run_after_done_is_ignored(self) -> None:
        steps = self._pending(2)
        session = TutorialSession(steps, director=self.director)
        session.terminate()
        session.run()
        self.assertFalse(steps[1].is_executing)

    def test_index_is_monotonic_and_bounded(self) -> None:
        session = TutorialSession([TutorialStep() for _ in range(4)], director=self.director)
        indices = []
        session.add_step_listener(lambda _: indices.append(session.current_step_index))
        for _ in range(6):
            session.run()
        self.assertEqual(indices, [1, 2, 3, 4])
        self.assertEqual(session.current_step_index, session.total_steps)

    def test_activate_honours_start_delay(self) -> None:
        session = TutorialSession(
            self._pending(1),
            name="delayed",
            run_on_start=True,
            start_delay=2.0,
            director=self.director,
        )
        session.activate()
        self.assertIn(session, self.director.sessions)
        self.assertFalse(session.is_executing)
        self.scheduler.advance(2.0)
        self.assertTrue(session.is_executing)

    def test_activate_without_run_on_start_only_registers(self) -> None:
        session = TutorialSession(self._pending(1), director=self.director)
        session.activate()
        self.assertEqual(session.state, SessionState.READY)
        self.assertFalse(session.is_executing)

    def test_destroy_cancels_start_and_deregisters(self) -> None:
        session = TutorialSession(
            self._pending(1),
            run_on_start=True,
            start_delay=1.0,
            director=self.director,
        )
        session.activate()
        session.destroy()
        self.assertEqual(self.scheduler.pending, 0)
        self.assertNotIn(session, self.director.sessions)

    def test_queries(self) -> None:
        steps = self._pending(2)
        session = TutorialSession(steps, name="tutor.query", director=self.director)
        self.assertIsNone(session.state)
        self.assertEqual(session.name, "tutor.query")
        self.assertIs(session.current_step, steps[0])
        self.assertFalse(session.is_last_step)
        session.run()
        self.assertTrue(session.is_executing)
        self.assertFalse(session.is_finished)

    def test_negative_start_delay_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TutorialSession([], start_delay=-1, director=self.director)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
