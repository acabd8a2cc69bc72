from __future__ import annotations  # Final scoring and feedback generation

import json
import logging
from textwrap import dedent
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.prompts import PromptTemplate
from pydantic import ValidationError

from coding_challenge import CodingOutcome
from config import LlmRoute
from llm_gateway import HttpClient, MalformedResponseError, call_json
from .models import FeedbackReport


logger = logging.getLogger(__name__)

FEEDBACK_PROMPT = PromptTemplate.from_template(
    dedent(
        """
        You are a senior engineering manager. Generate a final interview report based on the candidate's performance.

        INTERVIEW Q&A:
        {transcript}

        CODING ROUND:
        Challenge: {challenge_title}
        Code Submitted:
        {code}
        Evaluation: {evaluation}

        TASK:
        Generate a JSON report with:
        {{
          "totalScore": 0-100,
          "interviewScore": 0-100,
          "codingScore": 0-100,
          "strengths": ["...", "..."],
          "weaknesses": ["...", "..."],
          "detailedFeedback": "Paragraph...",
          "hiringRecommendation": "Strong Hire / Hire / No Hire"
        }}

        Return ONLY the valid JSON object, no other text.
        """
    ).strip()
)


def build_feedback_prompt(transcript: Sequence[Dict[str, str]], coding: Optional[CodingOutcome]) -> str:  # Render feedback prompt
    title = "N/A"
    code = "N/A"
    evaluation: Dict[str, Any] = {}
    if coding is not None:
        if coding.challenge is not None:
            title = coding.challenge.title
        elif coding.skipped:
            title = "Skipped"
        code = coding.code or "N/A"
        if coding.result is not None:
            evaluation = coding.result.model_dump()
            if coding.skipped:
                evaluation["skipped"] = True
    return FEEDBACK_PROMPT.format(
        transcript=json.dumps(list(transcript), ensure_ascii=False),
        challenge_title=title,
        code=code,
        evaluation=json.dumps(evaluation, ensure_ascii=False),
    )


def generate_feedback(
    transcript: Sequence[Dict[str, str]],
    coding: Optional[CodingOutcome],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> FeedbackReport:  # One gateway call; any failure is terminal for this attempt
    payload = call_json(build_feedback_prompt(transcript, coding), "Generate Feedback", cfg=cfg, client=client)
    if not isinstance(payload, dict):
        raise MalformedResponseError("Feedback reply was not a JSON object")
    try:
        report = FeedbackReport.model_validate(payload)
    except ValidationError as exc:
        logger.error("Feedback reply failed validation: %s", exc)
        raise MalformedResponseError("Feedback reply did not match the report shape") from exc
    logger.info(
        "Feedback generated total=%d interview=%d coding=%d recommendation=%s",
        report.total_score,
        report.interview_score,
        report.coding_score,
        report.hiring_recommendation,
    )
    return report


def transcript_entries(entries: Sequence[Any]) -> List[Dict[str, str]]:  # Map turns to question/expectedAnswer/answer dicts
    rows: List[Dict[str, str]] = []
    for entry in entries:
        row = {"question": entry.question, "expectedAnswer": entry.expected_answer or ""}
        if entry.answer:
            row["answer"] = entry.answer
        rows.append(row)
    return rows


__all__ = ["build_feedback_prompt", "generate_feedback", "transcript_entries"]
