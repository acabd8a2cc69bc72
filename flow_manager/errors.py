from __future__ import annotations  # Session-level error taxonomy

from typing import Iterable

from .models import SessionStatus


class ValidationError(ValueError):  # Required input missing or unusable; fixable by the caller
    pass


class SessionStateError(RuntimeError):  # Operation not allowed from the session's current status
    def __init__(self, operation: str, status: SessionStatus, allowed: Iterable[SessionStatus]) -> None:
        allowed_names = ", ".join(item.value for item in allowed)
        suffix = f" (allowed: {allowed_names})" if allowed_names else ""
        super().__init__(f"Cannot {operation} while session is {status.value}{suffix}")
        self.operation = operation
        self.status = status


class QuestionGenerationError(RuntimeError):  # Question generation failed; retry the same question number
    def __init__(self, question_number: int, cause: Exception) -> None:
        super().__init__(f"Failed to generate question {question_number}: {cause}")
        self.question_number = question_number
        self.cause = cause


__all__ = ["QuestionGenerationError", "SessionStateError", "ValidationError"]
