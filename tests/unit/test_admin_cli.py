from __future__ import annotations

from interview_evaluation import FeedbackReport
from observability.admin_cli import list_interviews, main, show_interview
from storage.interviews import AnswerEntry, InterviewStore


def test_list_and_show_interviews(capsys):
    store = InterviewStore()
    record = store.create_interview("alice", job_description="SRE")
    store.save_answers(
        record.interview_id,
        "alice",
        [AnswerEntry(position=1, question="Why SLOs?", answer="Error budgets")],
    )
    store.save_feedback(
        record.interview_id,
        "alice",
        FeedbackReport(total_score=64, hiring_recommendation="No Hire"),
    )

    lines = list_interviews("alice", store)
    assert len(lines) == 1
    assert "questions=1 score=64 verdict=No Hire" in lines[0]

    shown = show_interview(record.interview_id, "alice", store)
    assert "Q1: Why SLOs?" in shown
    assert "A1: Error budgets" in shown
    assert shown[-1] == "feedback: total=64 verdict=No Hire"

    assert show_interview(record.interview_id, "bob", store) == [f"interview {record.interview_id} not found for bob"]

    main(["--owner", "alice"])
    assert record.interview_id in capsys.readouterr().out
