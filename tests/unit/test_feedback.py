from __future__ import annotations

import json

import pytest

from coding_challenge import CodingChallenge, CodingOutcome, EvaluationResult
from flow_manager import ConversationTurn
from interview_evaluation import FeedbackReport, build_feedback_prompt, generate_feedback, transcript_entries
from llm_gateway import MalformedResponseError


REPORT = {
    "totalScore": 130,
    "interviewScore": -5,
    "codingScore": "72.6",
    "strengths": "Communicates clearly",
    "weaknesses": ["Shallow on caching", ""],
    "detailedFeedback": "Good candidate.",
    "hiringRecommendation": "strong hire",
}


def test_generate_feedback_normalises_report(route, make_client):
    client = make_client(["Report:\n```json\n" + json.dumps(REPORT) + "\n```"])

    report = generate_feedback([{"question": "Q", "expectedAnswer": "E", "answer": "A"}], None, cfg=route, client=client)

    assert report.total_score == 100
    assert report.interview_score == 0
    assert report.coding_score == 73
    assert report.strengths == ["Communicates clearly"]
    assert report.weaknesses == ["Shallow on caching"]
    assert report.hiring_recommendation == "Strong Hire"


def test_unknown_recommendation_is_terminal(route, make_client):
    client = make_client([json.dumps(dict(REPORT, hiringRecommendation="Maybe"))])

    with pytest.raises(MalformedResponseError):
        generate_feedback([], None, cfg=route, client=client)

    assert len(client.requests) == 1


def test_non_numeric_score_rejected():
    with pytest.raises(ValueError):
        FeedbackReport.model_validate(dict(REPORT, totalScore="excellent"))


@pytest.mark.parametrize("override", [{"strengths": 5}, {"totalScore": [80]}, {"weaknesses": {"a": 1}}])
def test_wrongly_shaped_report_is_malformed(route, make_client, override):
    client = make_client([json.dumps(dict(REPORT, **override))])

    with pytest.raises(MalformedResponseError):
        generate_feedback([], None, cfg=route, client=client)


def test_prompt_for_skipped_coding_round():
    prompt = build_feedback_prompt([], CodingOutcome.skipped_round())

    assert "Challenge: Skipped" in prompt
    assert "// Coding round was skipped" in prompt
    assert '"skipped": true' in prompt


def test_prompt_without_coding_round():
    prompt = build_feedback_prompt([{"question": "Q1", "expectedAnswer": "E1"}], None)

    assert "Challenge: N/A" in prompt
    assert '"question": "Q1"' in prompt


def test_prompt_with_evaluated_code():
    challenge = CodingChallenge(title="Two Sum")
    outcome = CodingOutcome(
        challenge=challenge,
        code="def solve(): pass",
        result=EvaluationResult(passed=True, feedback="Works"),
    )

    prompt = build_feedback_prompt([], outcome)

    assert "Challenge: Two Sum" in prompt
    assert "def solve(): pass" in prompt
    assert '"feedback": "Works"' in prompt


def test_transcript_entries_embed_answers():
    turns = [
        ConversationTurn(question="Why Kafka?", answer="Ordering", expected_answer="Partitions"),
        ConversationTurn(question="Why not?", answer=""),
    ]

    assert transcript_entries(turns) == [
        {"question": "Why Kafka?", "expectedAnswer": "Partitions", "answer": "Ordering"},
        {"question": "Why not?", "expectedAnswer": ""},
    ]
