"""Pydantic schemas for the mock interview API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from coding_challenge import CodingChallenge, CodingOutcome
from flow_manager import ConversationTurn, SessionState
from interview_evaluation import FeedbackReport
from storage.interviews import InterviewRecord


class CreateInterviewReq(BaseModel):
    resume_text: Optional[str] = None
    resume_url: Optional[str] = None
    job_description: Optional[str] = None
    total_questions: Optional[int] = Field(default=None, ge=1, le=50)


class AnswerReq(BaseModel):
    answer: str


class CodeReq(BaseModel):
    code: str
    language: Optional[str] = None


class QuestionPayload(BaseModel):
    number: int
    text: str


class SessionView(BaseModel):
    session_id: str
    interview_id: Optional[str] = None
    status: str
    current_question_number: int
    total_questions: int
    question: Optional[QuestionPayload] = None
    turns: List[ConversationTurn] = Field(default_factory=list)
    coding_challenge: Optional[CodingChallenge] = None
    coding_result: Optional[CodingOutcome] = None
    feedback: Optional[FeedbackReport] = None
    feedback_saved: bool = False

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionView":
        pending = state.pending_question
        return cls(
            session_id=state.session_id,
            interview_id=state.interview_id,
            status=state.status.value,
            current_question_number=state.current_question_number,
            total_questions=state.total_questions,
            question=QuestionPayload(number=pending.number, text=pending.question) if pending else None,
            turns=list(state.turns),
            coding_challenge=state.coding_challenge,
            coding_result=state.coding_result,
            feedback=state.feedback,
            feedback_saved=state.feedback_saved,
        )


class CreateInterviewResp(BaseModel):
    interview: InterviewRecord
    session: SessionView
