"""FastAPI routes for interviews and interview sessions."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from api.schemas import AnswerReq, CodeReq, CreateInterviewReq, CreateInterviewResp, SessionView
from config import load_routes
from config.settings import settings
from flow_manager import (
    InterviewOrchestrator,
    QuestionGenerationError,
    SessionState,
    SessionStateError,
    ValidationError,
)
from llm_gateway import LlmGatewayError
from observability import log_event
from services.sessions import load_session, new_session, save_session
from storage.interviews import (
    InterviewDetail,
    InterviewNotFound,
    InterviewRecord,
    InterviewStore,
    PersistenceError,
)


logger = logging.getLogger(__name__)

GENERAL_INTERVIEW = "General Interview"

router = APIRouter(prefix="/api")


def get_owner(x_user_id: Optional[str] = Header(default=None)) -> str:
    owner = (x_user_id or "").strip()
    if not owner:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return owner


def get_store() -> InterviewStore:
    return InterviewStore()


def get_orchestrator(store: InterviewStore = Depends(get_store)) -> InterviewOrchestrator:
    routes, flow = load_routes(settings)
    return InterviewOrchestrator(routes, flow=flow, store=store)


def _load_owned(session_id: str, owner: str) -> SessionState:
    state = load_session(session_id)
    if state is None or state.owner_id != owner:
        raise HTTPException(status_code=404, detail="session not found")
    return state


def _advance(session_id: str, owner: str, action: Callable[[SessionState], SessionState]) -> SessionView:
    state = _load_owned(session_id, owner)
    try:
        updated = action(state)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except QuestionGenerationError as exc:
        logger.exception("Question generation failed for session %s", session_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except LlmGatewayError as exc:
        logger.exception("LLM request failed for session %s", session_id)
        raise HTTPException(status_code=500, detail=f"LLM request failed: {exc}") from exc
    save_session(updated)
    return SessionView.from_state(updated)


@router.post("/interviews", response_model=CreateInterviewResp, status_code=201)
def create_interview(
    req: CreateInterviewReq,
    owner: str = Depends(get_owner),
    store: InterviewStore = Depends(get_store),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> CreateInterviewResp:
    resume_text = (req.resume_text or "").strip()
    resume_url = (req.resume_url or "").strip() or None
    job_description = (req.job_description or "").strip()
    if not resume_text and not resume_url and not job_description:
        raise HTTPException(status_code=400, detail="Resume or job description is required")
    if not resume_text and resume_url:
        resume_text = job_description or GENERAL_INTERVIEW  # resume documents are not fetched
    try:
        record = store.create_interview(owner, resume_url=resume_url, job_description=job_description)
    except PersistenceError as exc:
        raise HTTPException(status_code=500, detail="Unable to create interview") from exc
    state = new_session(
        resume_text=resume_text,
        job_description=job_description,
        total_questions=req.total_questions or orchestrator.flow.total_questions,
        interview_id=record.interview_id,
        owner_id=owner,
    )
    save_session(state)
    log_event("session_created", state.session_id, status=state.status.value)
    return CreateInterviewResp(interview=record, session=SessionView.from_state(state))


@router.get("/interviews", response_model=List[InterviewRecord])
def list_interviews(
    owner: str = Depends(get_owner),
    store: InterviewStore = Depends(get_store),
) -> List[InterviewRecord]:
    try:
        return store.list_interviews(owner)
    except PersistenceError as exc:
        raise HTTPException(status_code=500, detail="Unable to list interviews") from exc


@router.get("/interviews/{interview_id}", response_model=InterviewDetail)
def get_interview(
    interview_id: str,
    owner: str = Depends(get_owner),
    store: InterviewStore = Depends(get_store),
) -> InterviewDetail:
    try:
        return store.get_interview(interview_id, owner)
    except InterviewNotFound as exc:
        raise HTTPException(status_code=404, detail="Interview not found") from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=500, detail="Unable to load interview") from exc


@router.get("/sessions/{session_id}", response_model=SessionView)
def get_session(session_id: str, owner: str = Depends(get_owner)) -> SessionView:
    return SessionView.from_state(_load_owned(session_id, owner))


@router.post("/sessions/{session_id}/start", response_model=SessionView)
def start_session(
    session_id: str,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, orchestrator.start)


@router.post("/sessions/{session_id}/answer", response_model=SessionView)
def submit_answer(
    session_id: str,
    req: AnswerReq,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, lambda state: orchestrator.submit_answer(state, req.answer))


@router.post("/sessions/{session_id}/end", response_model=SessionView)
def end_interview(
    session_id: str,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, orchestrator.end_early)


@router.post("/sessions/{session_id}/coding", response_model=SessionView)
def start_coding(
    session_id: str,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, orchestrator.proceed_to_coding)


@router.post("/sessions/{session_id}/coding/skip", response_model=SessionView)
def skip_coding(
    session_id: str,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, orchestrator.skip_coding)


@router.post("/sessions/{session_id}/code", response_model=SessionView)
def submit_code(
    session_id: str,
    req: CodeReq,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, lambda state: orchestrator.submit_code(state, req.code, req.language))


@router.post("/sessions/{session_id}/feedback", response_model=SessionView)
def generate_feedback(
    session_id: str,
    owner: str = Depends(get_owner),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    return _advance(session_id, owner, orchestrator.finalize)


@router.post("/sessions/{session_id}/reset", response_model=SessionView)
def reset_session(
    session_id: str,
    owner: str = Depends(get_owner),
    store: InterviewStore = Depends(get_store),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionView:
    state = _load_owned(session_id, owner)
    try:
        resume_url = None
        if state.interview_id:
            resume_url = store.get_interview(state.interview_id, owner).resume_url
        record = store.create_interview(owner, resume_url=resume_url, job_description=state.job_description)
    except (InterviewNotFound, PersistenceError) as exc:
        raise HTTPException(status_code=500, detail="Unable to create interview") from exc
    return _advance(session_id, owner, lambda current: orchestrator.reset(current, record.interview_id))
