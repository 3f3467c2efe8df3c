"""Utilities for exporting tutorial events to the metrics system."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricsEvent:
    """Container describing a single analytics event."""

    name: str
    payload: Dict[str, object]


class MetricsExporter:
    """Collects analytics events and optionally forwards them to a sink.

    A failing sink never interrupts tutorial progression; the event is kept
    locally and the failure is logged.
    """

    def __init__(
        self,
        emitter: Optional[Callable[[MetricsEvent], None]] = None,
    ) -> None:
        self._events: List[MetricsEvent] = []
        self._emitter = emitter

    def record(self, name: str, payload: Optional[Dict[str, object]] = None) -> None:
        event = MetricsEvent(name=name, payload=dict(payload or {}))
        self._events.append(event)
        if self._emitter is None:
            return
        try:
            self._emitter(event)
        except Exception:
            logger.exception("Metrics sink rejected %s", name)

    @property
    def events(self) -> List[MetricsEvent]:
        return list(self._events)

    def events_named(self, name: str) -> List[MetricsEvent]:
        return [event for event in self._events if event.name == name]

    def export_counts(self) -> Dict[str, int]:
        """Aggregate counts per metric, keyed ``name:session`` when a session is known."""

        counts: Dict[str, int] = {}
        for event in self._events:
            session = event.payload.get("session")
            key = f"{event.name}:{session}" if session else event.name
            counts[key] = counts.get(key, 0) + 1
        return counts

    def clear(self) -> None:
        self._events.clear()


__all__ = ["MetricsEvent", "MetricsExporter"]
