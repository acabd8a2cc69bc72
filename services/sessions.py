"""Create, checkpoint and load interview sessions by handle."""
from __future__ import annotations

import json
import os
import re
import uuid
from typing import Optional

from config.settings import settings
from flow_manager.models import SessionState

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def _checkpoint_path(session_id: str) -> str:
    if not _SESSION_ID_RE.match(session_id):
        raise ValueError("invalid session id")
    return os.path.join(settings.CHECKPOINT_DIR, f"{session_id}.json")


def new_session(
    *,
    resume_text: str,
    job_description: str,
    total_questions: int,
    interview_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> SessionState:
    """Build a fresh NotStarted session with a generated identifier."""

    return SessionState(
        session_id=uuid.uuid4().hex,
        interview_id=interview_id,
        owner_id=owner_id,
        resume_text=resume_text,
        job_description=job_description,
        total_questions=total_questions,
    )


def save_session(state: SessionState) -> str:
    """Persist the full session state atomically and return the file path."""

    os.makedirs(settings.CHECKPOINT_DIR, exist_ok=True)
    path = _checkpoint_path(state.session_id)
    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as handle:
        handle.write(state.model_dump_json())
        handle.flush()
        os.fsync(handle.fileno())
    os.replace(tmp_path, path)
    return path


def load_session(session_id: str) -> Optional[SessionState]:
    """Load the last checkpointed state for ``session_id`` if present."""

    try:
        path = _checkpoint_path(session_id)
    except ValueError:
        return None
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    return SessionState.model_validate(data)


__all__ = ["load_session", "new_session", "save_session"]
