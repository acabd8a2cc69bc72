from __future__ import annotations  # Question agent generating one interview question per turn

from typing import Optional

from pydantic import ValidationError

from config import LlmRoute
from llm_gateway import HttpClient, MalformedResponseError, call_json
from ..context_window import BoundedContext
from ..models import GeneratedQuestion, QuestionRole
from ..prompts import build_question_prompt


class QuestionAgent:  # Renders the question prompt and parses the JSON reply
    def __init__(self, route: LlmRoute, *, client: Optional[HttpClient] = None) -> None:
        self._route = route
        self._client = client

    def generate(
        self,
        role: QuestionRole,
        context: BoundedContext,
        *,
        job_description: str,
        question_number: int,
        total_questions: int,
    ) -> GeneratedQuestion:  # Single attempt; failures propagate to the orchestrator
        prompt = build_question_prompt(role, context, job_description, question_number, total_questions)
        payload = call_json(
            prompt,
            f"Generate Question {question_number}",
            cfg=self._route,
            client=self._client,
        )
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            payload = payload[0]
        if not isinstance(payload, dict):
            raise MalformedResponseError("Question reply was not a JSON object")
        try:
            return GeneratedQuestion.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError("Question reply is missing a usable 'question' field") from exc


__all__ = ["QuestionAgent"]
