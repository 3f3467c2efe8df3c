from __future__ import annotations

import unittest

from tutorial import Director, ManualScheduler, MessageStep, Overlay, StepState, TutorialSession, TutorialStep


class TutorialStepTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = ManualScheduler()
        self.director = Director(self.scheduler)

    def test_init_always_resets_flags(self) -> None:
        step = TutorialStep()
        step.is_complete = True
        step.is_executing = True
        step.init()
        self.assertFalse(step.is_complete)
        self.assertFalse(step.is_executing)
        self.assertEqual(step.state, StepState.NOT_STARTED)
        step.init()
        self.assertTrue(step.can_execute)

    def test_unbound_step_completes_synchronously(self) -> None:
        step = TutorialStep(message="hello")
        step.execute()
        self.assertTrue(step.is_complete)
        self.assertFalse(step.is_executing)
        self.assertEqual(step.state, StepState.COMPLETE)
        self.assertFalse(step.can_execute)

    def test_complete_step_never_re_executes(self) -> None:
        step = TutorialStep()
        step.execute()
        step.execute()
        self.assertTrue(step.is_complete)
        self.assertFalse(step.is_executing)

    def test_execute_is_reentrancy_safe(self) -> None:
        overlay = Overlay()
        step = MessageStep(message="Read me")
        TutorialSession([step], director=self.director, presentation=overlay)
        step.execute()
        step.execute()
        self.assertEqual(step.state, StepState.EXECUTING)
        self.assertEqual(overlay.handler_count, 1)

    def test_delay_defers_work_phase(self) -> None:
        step = TutorialStep(delay=1.0)
        session = TutorialSession([step], director=self.director)
        session.run()
        self.assertTrue(step.is_executing)
        self.assertFalse(step.is_complete)
        self.scheduler.advance(0.5)
        self.assertFalse(step.is_complete)
        self.scheduler.advance(0.5)
        self.assertTrue(step.is_complete)
        self.assertTrue(session.is_finished)

    def test_init_cancels_pending_delay(self) -> None:
        step = TutorialStep(delay=2.0)
        session = TutorialSession([step, TutorialStep()], director=self.director)
        session.run()
        self.assertEqual(self.scheduler.pending, 1)
        step.init()
        self.assertEqual(self.scheduler.pending, 0)
        self.scheduler.advance(5)
        self.assertFalse(step.is_complete)
        self.assertEqual(session.current_step_index, 0)

    def test_duplicate_completion_does_not_double_count(self) -> None:
        first, second = TutorialStep(), MessageStep(message="wait")
        session = TutorialSession([first, second], director=self.director, presentation=Overlay())
        session.run()
        self.assertEqual(session.current_step_index, 1)
        first.complete()
        first.complete()
        self.assertEqual(session.current_step_index, 1)

    def test_negative_delay_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TutorialStep(delay=-1)

    def test_step_belongs_to_one_session(self) -> None:
        step = TutorialStep()
        TutorialSession([step], director=self.director)
        with self.assertRaises(ValueError):
            TutorialSession([step], director=self.director)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
