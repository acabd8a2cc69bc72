from __future__ import annotations  # Interview flow orchestration

from .agents import QuestionAgent
from .context_window import BoundedContext, build_bounded_context, render_history, truncate_resume
from .errors import QuestionGenerationError, SessionStateError, ValidationError
from .models import (
    ConversationTurn,
    GeneratedQuestion,
    PendingQuestion,
    QuestionRole,
    SessionState,
    SessionStatus,
)
from .orchestrator import InterviewOrchestrator
from .prompts import build_question_prompt, question_category

__all__ = [
    "BoundedContext",
    "ConversationTurn",
    "GeneratedQuestion",
    "InterviewOrchestrator",
    "PendingQuestion",
    "QuestionAgent",
    "QuestionGenerationError",
    "QuestionRole",
    "SessionState",
    "SessionStateError",
    "SessionStatus",
    "ValidationError",
    "build_bounded_context",
    "build_question_prompt",
    "question_category",
    "render_history",
    "truncate_resume",
]
