from __future__ import annotations  # Interview session state models

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from coding_challenge import CodingChallenge, CodingOutcome
from interview_evaluation import FeedbackReport


class SessionStatus(str, Enum):  # Lifecycle of one interview session, in transition order
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    AWAITING_CODING_DECISION = "awaiting_coding_decision"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = list(SessionStatus)


class QuestionRole(str, Enum):  # Which prompt variant generates the question
    FIRST = "first"
    FOLLOW_UP = "follow_up"


class ConversationTurn(BaseModel):  # One answered question, frozen once recorded
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    expected_answer: Optional[str] = None


class GeneratedQuestion(BaseModel):  # Question payload requested from the LLM
    model_config = ConfigDict(populate_by_name=True)

    question: str
    expected_answer: str = Field(
        default="",
        validation_alias=AliasChoices("expected_answer", "expectedAnswer", "answer"),
    )

    @field_validator("question")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("question must not be blank")
        return text

    @field_validator("expected_answer", mode="before")
    @classmethod
    def _flatten(cls, value: object) -> str:  # Some models return key points as a list
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(f"- {item}" for item in value)
        return str(value)


class PendingQuestion(BaseModel):  # Question shown to the user and awaiting an answer
    number: int = Field(ge=1)
    question: str
    expected_answer: str = ""


class SessionState(BaseModel):  # Explicit per-session state passed between orchestrator calls
    session_id: str
    interview_id: Optional[str] = None
    owner_id: Optional[str] = None
    resume_text: str = ""
    job_description: str = ""
    turns: List[ConversationTurn] = Field(default_factory=list)
    pending_question: Optional[PendingQuestion] = None
    current_question_number: int = Field(default=0, ge=0)
    total_questions: int = Field(default=10, ge=1)
    status: SessionStatus = SessionStatus.NOT_STARTED
    coding_challenge: Optional[CodingChallenge] = None
    coding_result: Optional[CodingOutcome] = None
    feedback: Optional[FeedbackReport] = None
    feedback_saved: bool = False


__all__ = [
    "ConversationTurn",
    "GeneratedQuestion",
    "PendingQuestion",
    "QuestionRole",
    "SessionState",
    "SessionStatus",
]
