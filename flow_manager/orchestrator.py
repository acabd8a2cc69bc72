from __future__ import annotations  # Interview session state machine

import logging
import time
from typing import Callable, List, Mapping, Optional, Sequence

from coding_challenge import CodingOutcome, evaluate_code, generate_coding_challenge
from config import (
    CODE_REVIEW_ROUTE_KEY,
    CODING_ROUTE_KEY,
    FEEDBACK_ROUTE_KEY,
    QUESTION_ROUTE_KEY,
    ROUTE_KEYS,
    FlowSettings,
    LlmRoute,
)
from interview_evaluation import generate_feedback, transcript_entries
from llm_gateway import HttpClient, LlmGatewayError
from observability import log_event, span
from storage.interviews import AnswerEntry, InterviewNotFound, InterviewStore, PersistenceError
from .agents.question import QuestionAgent
from .context_window import build_bounded_context
from .errors import QuestionGenerationError, SessionStateError, ValidationError
from .models import ConversationTurn, PendingQuestion, QuestionRole, SessionState, SessionStatus


logger = logging.getLogger(__name__)


class InterviewOrchestrator:
    """Drives one interview from the first question to the final report.

    Every public method takes the current :class:`SessionState` and returns a
    new one. When an operation raises, the state passed in is left exactly as
    it was, so the caller can retry the same action. Persistence is best
    effort: failed writes are logged and never block progression, except the
    final feedback save whose outcome is reported through ``feedback_saved``.
    """

    def __init__(
        self,
        routes: Mapping[str, LlmRoute],
        *,
        flow: Optional[FlowSettings] = None,
        store: Optional[InterviewStore] = None,
        client: Optional[HttpClient] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        missing = [key for key in ROUTE_KEYS if key not in routes]
        if missing:
            raise KeyError(f"Routes missing for: {', '.join(missing)}")
        self._routes = dict(routes)
        self._flow = flow or FlowSettings()
        self._store = store
        self._client = client
        self._sleep = sleep
        self._questions = QuestionAgent(self._routes[QUESTION_ROUTE_KEY], client=client)

    @property
    def flow(self) -> FlowSettings:
        return self._flow

    def start(self, state: SessionState) -> SessionState:  # NotStarted -> InProgress with question 1
        _require(state, "start interview", SessionStatus.NOT_STARTED)
        if not state.resume_text.strip() and not state.job_description.strip():
            raise ValidationError("resume text or job description is required")
        pending = self._next_question(state, [], 1, QuestionRole.FIRST)
        log_event("session_started", state.session_id, status=SessionStatus.IN_PROGRESS.value, question_number=1)
        return state.model_copy(
            update={
                "status": SessionStatus.IN_PROGRESS,
                "pending_question": pending,
                "current_question_number": 1,
            }
        )

    def submit_answer(self, state: SessionState, answer: str) -> SessionState:  # Record a turn and ask the next question
        _require(state, "submit answer", SessionStatus.IN_PROGRESS)
        pending = state.pending_question
        if pending is None:
            raise SessionStateError("submit answer", state.status, [SessionStatus.IN_PROGRESS])
        if not (answer or "").strip():
            raise ValidationError("answer is required")
        turn = ConversationTurn(
            question=pending.question,
            answer=answer,
            expected_answer=pending.expected_answer or None,
        )
        turns = [*state.turns, turn]
        if len(turns) >= state.total_questions:
            return self._close_question_round(state, turns, outcome="all_answered")
        self._persist_answers(state, turns)
        number = state.current_question_number + 1
        next_pending = self._next_question(state, turns, number, QuestionRole.FOLLOW_UP)
        log_event("answer_recorded", state.session_id, question_number=number, turns=len(turns))
        return state.model_copy(
            update={
                "turns": turns,
                "pending_question": next_pending,
                "current_question_number": number,
            }
        )

    def end_early(self, state: SessionState) -> SessionState:  # Stop at a turn boundary; the unanswered question is dropped
        _require(state, "end interview", SessionStatus.IN_PROGRESS)
        return self._close_question_round(state, list(state.turns), outcome="ended_early")

    def proceed_to_coding(self, state: SessionState) -> SessionState:  # AwaitingCodingDecision -> Completed with a challenge
        _require(state, "start coding round", SessionStatus.AWAITING_CODING_DECISION)
        source = state.resume_text.strip() or state.job_description
        with span() as watch:
            challenge = generate_coding_challenge(
                source,
                cfg=self._routes[CODING_ROUTE_KEY],
                policy=self._flow.coding_retry,
                client=self._client,
                sleep=self._sleep,
            )
        log_event("coding_started", state.session_id, status=SessionStatus.COMPLETED.value, ms=watch.ms)
        return state.model_copy(
            update={
                "status": SessionStatus.COMPLETED,
                "coding_challenge": challenge,
                "coding_result": CodingOutcome(challenge=challenge),
            }
        )

    def skip_coding(self, state: SessionState) -> SessionState:  # AwaitingCodingDecision -> Completed without coding
        _require(state, "skip coding round", SessionStatus.AWAITING_CODING_DECISION)
        outcome = CodingOutcome.skipped_round()
        self._persist_coding(state, outcome)
        log_event("coding_skipped", state.session_id, status=SessionStatus.COMPLETED.value)
        return state.model_copy(update={"status": SessionStatus.COMPLETED, "coding_result": outcome})

    def submit_code(self, state: SessionState, code: str, language: Optional[str] = None) -> SessionState:  # Evaluate a solution
        _require(state, "submit code", SessionStatus.COMPLETED)
        challenge = state.coding_challenge
        if challenge is None or (state.coding_result is not None and state.coding_result.skipped):
            raise SessionStateError("submit code without a coding challenge", state.status, [])
        if not (code or "").strip():
            raise ValidationError("code is required")
        result = evaluate_code(
            code,
            language or challenge.language,
            challenge,
            cfg=self._routes[CODE_REVIEW_ROUTE_KEY],
            client=self._client,
        )
        outcome = CodingOutcome(challenge=challenge, code=code, result=result)
        self._persist_coding(state, outcome)
        log_event("code_evaluated", state.session_id, outcome="passed" if result.passed else "failed")
        return state.model_copy(update={"coding_result": outcome, "feedback": None, "feedback_saved": False})

    def finalize(self, state: SessionState) -> SessionState:  # Produce, cache and save the feedback report
        _require(state, "generate feedback", SessionStatus.COMPLETED)
        if state.feedback is not None:
            return state
        with span() as watch:
            report = generate_feedback(
                transcript_entries(state.turns),
                state.coding_result,
                cfg=self._routes[FEEDBACK_ROUTE_KEY],
                client=self._client,
            )
        saved = self._persist_feedback(state, report)
        log_event(
            "feedback_generated",
            state.session_id,
            ms=watch.ms,
            outcome=report.hiring_recommendation,
            status="saved" if saved else "unsaved",
        )
        return state.model_copy(update={"feedback": report, "feedback_saved": saved})

    def reset(self, state: SessionState, interview_id: Optional[str] = None) -> SessionState:
        """Start over with the same resume and job description.

        The previous interview record is left as it was; answers of the new run
        are recorded under ``interview_id`` when one is given.
        """

        log_event("session_reset", state.session_id, turns=len(state.turns))
        return SessionState(
            session_id=state.session_id,
            interview_id=interview_id,
            owner_id=state.owner_id,
            resume_text=state.resume_text,
            job_description=state.job_description,
            total_questions=state.total_questions,
        )

    def _next_question(
        self,
        state: SessionState,
        turns: Sequence[ConversationTurn],
        number: int,
        role: QuestionRole,
    ) -> PendingQuestion:  # Generate question `number` from the bounded view of `turns`
        context = build_bounded_context(
            turns,
            state.resume_text,
            window=self._flow.context_window,
            char_budget=self._flow.resume_char_budget,
        )
        try:
            with span() as watch:
                generated = self._questions.generate(
                    role,
                    context,
                    job_description=state.job_description,
                    question_number=number,
                    total_questions=state.total_questions,
                )
        except LlmGatewayError as exc:
            log_event(
                "question_failed",
                state.session_id,
                level=logging.ERROR,
                question_number=number,
                error=type(exc).__name__,
            )
            raise QuestionGenerationError(number, exc) from exc
        log_event("question_generated", state.session_id, question_number=number, ms=watch.ms)
        return PendingQuestion(number=number, question=generated.question, expected_answer=generated.expected_answer)

    def _close_question_round(self, state: SessionState, turns: List[ConversationTurn], *, outcome: str) -> SessionState:
        self._persist_answers(state, turns)
        log_event(
            "questions_closed",
            state.session_id,
            status=SessionStatus.AWAITING_CODING_DECISION.value,
            turns=len(turns),
            outcome=outcome,
        )
        return state.model_copy(
            update={
                "turns": turns,
                "pending_question": None,
                "status": SessionStatus.AWAITING_CODING_DECISION,
            }
        )

    def _persisted(self, state: SessionState) -> bool:
        return self._store is not None and bool(state.interview_id) and bool(state.owner_id)

    def _persist_answers(self, state: SessionState, turns: Sequence[ConversationTurn]) -> None:
        if not self._persisted(state):
            return
        entries = [
            AnswerEntry(
                position=index,
                question=turn.question,
                expected_answer=turn.expected_answer or "",
                answer=turn.answer,
            )
            for index, turn in enumerate(turns, start=1)
        ]
        try:
            self._store.save_answers(state.interview_id, state.owner_id, entries)
        except (PersistenceError, InterviewNotFound) as exc:
            logger.warning("Failed to save answers for session %s: %s", state.session_id, exc)

    def _persist_coding(self, state: SessionState, outcome: CodingOutcome) -> None:
        if not self._persisted(state):
            return
        try:
            self._store.save_coding_result(state.interview_id, state.owner_id, outcome)
        except (PersistenceError, InterviewNotFound) as exc:
            logger.warning("Failed to save coding result for session %s: %s", state.session_id, exc)

    def _persist_feedback(self, state: SessionState, report) -> bool:
        if not self._persisted(state):
            return False
        try:
            self._store.save_feedback(state.interview_id, state.owner_id, report)
        except (PersistenceError, InterviewNotFound) as exc:
            logger.error("Failed to save feedback for session %s: %s", state.session_id, exc)
            return False
        return True


def _require(state: SessionState, operation: str, *allowed: SessionStatus) -> None:
    if state.status not in allowed:
        raise SessionStateError(operation, state.status, allowed)


__all__ = ["InterviewOrchestrator"]
