from __future__ import annotations  # Coding challenge generation and code review

import json
import logging
import time
from textwrap import dedent
from typing import Any, Callable, Optional, Type, TypeVar

from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel, ValidationError

from config import LlmRoute, RetryPolicy
from llm_gateway import HttpClient, MalformedResponseError, call_json, with_retry
from .models import CodingChallenge, EvaluationResult


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

RESUME_EXCERPT_CHARS = 1500

CHALLENGE_PROMPT = PromptTemplate.from_template(
    dedent(
        """
        You are a strict technical interviewer. Based on the candidate's resume below, identify their primary programming language.
        Then, generate a medium-difficulty coding challenge suitable for a live interview.

        RESUME TEXT:
        {resume_excerpt}

        Return ONLY a valid JSON object. Do not include any explanation.
        Structure:
        {{
          "language": "javascript",
          "title": "Problem Title",
          "description": "Short description of the problem.",
          "problemStatement": "Detailed explanation of the problem, input/output format, and examples.",
          "constraints": "List of constraints (e.g. time limit, input size, memory usage). Must be a string.",
          "starterCode": "function solve(input) {{\\n  // Your code here\\n}}",
          "testCases": [
            {{ "input": "...", "expectedOutput": "..." }},
            {{ "input": "...", "expectedOutput": "..." }}
          ]
        }}
        """
    ).strip()
)

REVIEW_PROMPT = PromptTemplate.from_template(
    dedent(
        """
        You are a code evaluator.

        PROBLEM:
        {description}
        {problem_statement}

        CONSTRAINTS:
        {constraints}

        TEST CASES:
        {test_cases}

        USER CODE ({language}):
        {code}

        TASK:
        Analyze the user's code. Determine if it correctly solves the problem and passes all test cases.
        Check for time complexity and edge cases.

        Return ONLY a valid JSON object. NO conversational text.
        {{
          "passed": true or false,
          "feedback": "Detailed feedback on correctness, efficiency, and cleanliness.",
          "testResults": [
            {{ "input": "...", "expected": "...", "actual": "...", "passed": true or false }}
          ]
        }}
        """
    ).strip()
)


def build_challenge_prompt(resume_text: str) -> str:  # Render challenge prompt from a resume excerpt
    return CHALLENGE_PROMPT.format(resume_excerpt=(resume_text or "")[:RESUME_EXCERPT_CHARS])


def build_review_prompt(code: str, language: str, challenge: CodingChallenge) -> str:  # Render code review prompt
    return REVIEW_PROMPT.format(
        description=challenge.description,
        problem_statement=challenge.problem_statement,
        constraints=challenge.constraints,
        test_cases=json.dumps(
            [{"input": case.input, "expectedOutput": case.expected_output} for case in challenge.test_cases],
            ensure_ascii=False,
        ),
        language=language or challenge.language,
        code=code,
    )


def generate_coding_challenge(
    resume_text: str,
    *,
    cfg: LlmRoute,
    policy: RetryPolicy | None = None,
    client: Optional[HttpClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CodingChallenge:  # Generate a challenge, retrying parse and upstream failures
    policy = policy or RetryPolicy()
    prompt = build_challenge_prompt(resume_text)
    attempt = 0

    def _attempt() -> CodingChallenge:
        nonlocal attempt
        attempt += 1
        payload = call_json(prompt, f"Generate Coding Challenge (Attempt {attempt})", cfg=cfg, client=client)
        if not isinstance(payload, dict):
            raise MalformedResponseError("Coding challenge reply was not a JSON object")
        return _validated(CodingChallenge, payload)

    challenge = with_retry(
        _attempt,
        attempts=policy.attempts,
        delay_s=policy.delay_s,
        operation="Generate Coding Challenge",
        sleep=sleep,
    )
    logger.info("Coding challenge '%s' generated after %d attempt(s)", challenge.title, attempt)
    return challenge


def evaluate_code(
    code: str,
    language: str,
    challenge: CodingChallenge,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> EvaluationResult:  # Single-attempt LLM review of a submission
    payload = call_json(build_review_prompt(code, language, challenge), "Evaluate Code", cfg=cfg, client=client)
    if not isinstance(payload, dict):
        raise MalformedResponseError("Code evaluation reply was not a JSON object")
    return _validated(EvaluationResult, payload)


def _validated(schema: Type[M], payload: Any) -> M:  # Shape errors count as malformed replies
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(f"{schema.__name__} reply failed validation: {exc.error_count()} error(s)") from exc


__all__ = [
    "RESUME_EXCERPT_CHARS",
    "build_challenge_prompt",
    "build_review_prompt",
    "evaluate_code",
    "generate_coding_challenge",
]
