"""Analytics helpers tailored to tutorial session progress."""

from __future__ import annotations

from typing import Optional

from .metrics import MetricsExporter


class TutorialAnalytics:
    """Wraps metric exports for session and step lifecycle events."""

    def __init__(self, exporter: Optional[MetricsExporter] = None) -> None:
        self._exporter = exporter or MetricsExporter()

    @property
    def exporter(self) -> MetricsExporter:
        return self._exporter

    def track_session_queued(self, session: str) -> None:
        self._exporter.record("tutorial_session_queued", {"session": session})

    def track_session_started(self, session: str) -> None:
        self._exporter.record("tutorial_session_started", {"session": session})

    def track_step_completed(self, session: str, index: int, kind: str) -> None:
        self._exporter.record(
            "tutorial_step_completed",
            {"session": session, "step": index, "kind": kind},
        )

    def track_step_skipped(self, session: str, index: int) -> None:
        self._exporter.record(
            "tutorial_step_skipped",
            {"session": session, "step": index},
        )

    def track_session_completed(self, session: str, steps_completed: int) -> None:
        self._exporter.record(
            "tutorial_session_completed",
            {"session": session, "steps": steps_completed},
        )

    def track_session_terminated(self, session: str, index: int) -> None:
        self._exporter.record(
            "tutorial_session_terminated",
            {"session": session, "step": index},
        )


__all__ = ["TutorialAnalytics"]
