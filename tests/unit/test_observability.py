from __future__ import annotations

import logging

from observability import log_event, span, summary_line


def test_log_event_returns_payload():
    event = log_event("question_generated", "abc123", question_number=3, ms=41, level=logging.DEBUG)

    assert event["kind"] == "question_generated"
    assert event["session_id"] == "abc123"
    assert event["question_number"] == 3
    assert "level" not in event
    assert len(event["trace"]) == 32


def test_summary_line_lists_known_keys_in_order():
    line = summary_line({"session_id": "s1", "kind": "coding_started", "ms": 12, "status": "completed", "extra": "x"})

    assert line == "session=s1 kind=coding_started status=completed ms=12"


def test_span_measures_elapsed_time():
    with span() as watch:
        pass
    frozen = watch.seconds

    assert frozen >= 0
    assert watch.seconds == frozen
    assert watch.ms == int(frozen * 1000)
