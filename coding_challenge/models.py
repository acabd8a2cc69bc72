from __future__ import annotations  # Coding round domain models

import json
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_LANGUAGE = "javascript"
DEFAULT_STARTER_CODE = "// Write your solution here"
SKIPPED_CODE = "// Coding round was skipped"
SKIPPED_FEEDBACK = "Skipped coding round"

_CHALLENGE_DEFAULTS = {
    "language": DEFAULT_LANGUAGE,
    "title": "Coding Challenge",
    "description": "No description provided.",
    "problem_statement": "No problem statement provided.",
    "constraints": "No specific constraints provided.",
    "starter_code": DEFAULT_STARTER_CODE,
}


def _as_text(value: Any) -> str:  # LLM output may carry numbers, lists or objects where text is expected
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class ChallengeCase(BaseModel):  # Single input/expected-output example
    model_config = ConfigDict(populate_by_name=True)

    input: str = ""
    expected_output: str = Field(default="", validation_alias=AliasChoices("expected_output", "expectedOutput"))

    @field_validator("input", "expected_output", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)


class CodingChallenge(BaseModel):  # Generated coding problem for the session
    model_config = ConfigDict(populate_by_name=True)

    language: str = DEFAULT_LANGUAGE
    title: str = "Coding Challenge"
    description: str = "No description provided."
    problem_statement: str = Field(
        default="No problem statement provided.",
        validation_alias=AliasChoices("problem_statement", "problemStatement"),
    )
    constraints: str = "No specific constraints provided."
    starter_code: str = Field(
        default=DEFAULT_STARTER_CODE,
        validation_alias=AliasChoices("starter_code", "starterCode"),
    )
    test_cases: List[ChallengeCase] = Field(
        default_factory=list,
        validation_alias=AliasChoices("test_cases", "testCases"),
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_blanks(cls, data: Any) -> Any:  # Empty or missing fields fall back to defaults
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        camel = {"problem_statement": "problemStatement", "starter_code": "starterCode"}
        for field, default in _CHALLENGE_DEFAULTS.items():
            keys = [field] + ([camel[field]] if field in camel else [])
            present = [key for key in keys if key in cleaned]
            value = cleaned.get(present[0]) if present else None
            if isinstance(value, list):
                value = "\n".join(_as_text(item) for item in value)
            elif value is not None and not isinstance(value, str):
                value = _as_text(value)
            for key in present:
                cleaned.pop(key)
            cleaned[field] = value if value else default
        cases = cleaned.pop("testCases", cleaned.pop("test_cases", None))
        cleaned["test_cases"] = cases if isinstance(cases, list) else []
        return cleaned


class CaseResult(BaseModel):  # Evaluator verdict for one test case
    input: str = ""
    expected: str = ""
    actual: str = ""
    passed: bool = False

    @field_validator("input", "expected", "actual", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)


class EvaluationResult(BaseModel):  # LLM review of a code submission
    model_config = ConfigDict(populate_by_name=True)

    passed: bool = False
    feedback: str = ""
    test_results: List[CaseResult] = Field(
        default_factory=list,
        validation_alias=AliasChoices("test_results", "testResults"),
    )


class CodingOutcome(BaseModel):  # Coding round attachment stored on the session
    challenge: Optional[CodingChallenge] = None
    code: str = ""
    result: Optional[EvaluationResult] = None
    skipped: bool = False

    @classmethod
    def skipped_round(cls) -> "CodingOutcome":
        return cls(
            challenge=None,
            code=SKIPPED_CODE,
            result=EvaluationResult(passed=False, feedback=SKIPPED_FEEDBACK),
            skipped=True,
        )


__all__ = [
    "CaseResult",
    "ChallengeCase",
    "CodingChallenge",
    "CodingOutcome",
    "EvaluationResult",
    "SKIPPED_CODE",
    "SKIPPED_FEEDBACK",
]
