"""Analytics for tutorial session progress."""

from .metrics import MetricsEvent, MetricsExporter
from .tutorial import TutorialAnalytics

__all__ = ["MetricsEvent", "MetricsExporter", "TutorialAnalytics"]
