"""Observability utilities for the mock interview services."""
from .logger import log_event, summary_line
from .tracing import Stopwatch, span

__all__ = ["Stopwatch", "log_event", "span", "summary_line"]
