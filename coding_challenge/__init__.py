from .challenge import (
    build_challenge_prompt,
    build_review_prompt,
    evaluate_code,
    generate_coding_challenge,
)
from .models import (
    CaseResult,
    ChallengeCase,
    CodingChallenge,
    CodingOutcome,
    EvaluationResult,
)

__all__ = [
    "CaseResult",
    "ChallengeCase",
    "CodingChallenge",
    "CodingOutcome",
    "EvaluationResult",
    "build_challenge_prompt",
    "build_review_prompt",
    "evaluate_code",
    "generate_coding_challenge",
]
