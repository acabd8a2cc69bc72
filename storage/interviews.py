"""Persistence adapter for interviews, questions, coding results and feedback."""
from __future__ import annotations

import datetime as dt
import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Type
from uuid import uuid4

from pydantic import BaseModel, Field

from coding_challenge import ChallengeCase, CodingOutcome
from interview_evaluation import FeedbackReport
from .sqlite import get_conn


logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """A database write or read failed."""


class InterviewNotFound(LookupError):
    """No interview with that id belongs to the requesting owner."""


class AnswerEntry(BaseModel):
    position: int = Field(ge=1)
    question: str
    expected_answer: str = ""
    answer: str = ""


class QuestionRecord(BaseModel):
    position: int
    question_text: str
    expected_answer: str = ""
    user_answer: Optional[str] = None


class CodingRecord(BaseModel):
    title: str
    description: str = ""
    problem_statement: str = ""
    constraints: str = ""
    language: str
    starter_code: str = ""
    test_cases: List[ChallengeCase] = Field(default_factory=list)
    user_code: str = ""
    passed: bool = False
    ai_feedback: str = ""
    skipped: bool = False


class InterviewRecord(BaseModel):
    interview_id: str
    owner_id: str
    resume_url: Optional[str] = None
    job_description: str = ""
    status: str
    created_at: str
    updated_at: str
    question_count: int = 0
    feedback: Optional[FeedbackReport] = None


class InterviewDetail(InterviewRecord):
    questions: List[QuestionRecord] = Field(default_factory=list)
    coding: Optional[CodingRecord] = None


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")


@contextmanager
def _sqlite_errors(action: str) -> Iterator[None]:  # Surface sqlite failures as PersistenceError
    try:
        yield
    except sqlite3.Error as exc:
        logger.error("Failed to %s: %s", action, exc)
        raise PersistenceError(f"Failed to {action}") from exc


class InterviewStore:
    """SQLite-backed store; every operation is keyed by interview id and owner id."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self._db_path = db_path

    def _conn(self):
        return get_conn(self._db_path)

    def create_interview(
        self,
        owner_id: str,
        *,
        resume_url: Optional[str] = None,
        job_description: str = "",
    ) -> InterviewRecord:
        interview_id = uuid4().hex
        now = _now()
        with _sqlite_errors("create interview"), self._conn() as conn:
            conn.execute(
                """INSERT INTO interviews
                   (interview_id, owner_id, resume_url, job_description, status, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (interview_id, owner_id, resume_url, job_description or "", "in_progress", now, now),
            )
        return InterviewRecord(
            interview_id=interview_id,
            owner_id=owner_id,
            resume_url=resume_url,
            job_description=job_description or "",
            status="in_progress",
            created_at=now,
            updated_at=now,
        )

    def save_answers(self, interview_id: str, owner_id: str, answers: Sequence[AnswerEntry]) -> int:
        """Store the answered turns as the interview's full transcript.

        Rows are upserted by position and any row past the last entry is removed,
        so rerunning with the same entries is a no-op.
        """

        with _sqlite_errors("save answers"), self._conn() as conn:
            self._require_owned(conn, interview_id, owner_id)
            for entry in answers:
                conn.execute(
                    """INSERT INTO interview_questions
                       (interview_id, position, question_text, expected_answer, user_answer)
                       VALUES (?, ?, ?, ?, ?)
                       ON CONFLICT (interview_id, position)
                       DO UPDATE SET question_text = excluded.question_text,
                                     expected_answer = excluded.expected_answer,
                                     user_answer = excluded.user_answer""",
                    (interview_id, entry.position, entry.question, entry.expected_answer or "", entry.answer),
                )
            conn.execute(
                "DELETE FROM interview_questions WHERE interview_id = ? AND position > ?",
                (interview_id, len(answers)),
            )
            self._touch(conn, interview_id)
        return len(answers)

    def save_coding_result(self, interview_id: str, owner_id: str, outcome: CodingOutcome) -> None:
        challenge = outcome.challenge
        result = outcome.result
        cases = [case.model_dump() for case in challenge.test_cases] if challenge else []
        row = (
            challenge.title if challenge else "Skipped",
            challenge.description if challenge else "",
            challenge.problem_statement if challenge else "",
            challenge.constraints if challenge else "",
            challenge.language if challenge else "javascript",
            challenge.starter_code if challenge else "",
            json.dumps(cases, ensure_ascii=False),
            outcome.code,
            1 if result is not None and result.passed else 0,
            result.feedback if result is not None else "",
            1 if outcome.skipped else 0,
            _now(),
        )
        with _sqlite_errors("save coding result"), self._conn() as conn:
            self._require_owned(conn, interview_id, owner_id)
            conn.execute(
                """INSERT INTO coding_results
                   (interview_id, title, description, problem_statement, constraints, language, starter_code,
                    test_cases_json, user_code, passed, ai_feedback, skipped, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT (interview_id) DO UPDATE SET
                     title = excluded.title,
                     description = excluded.description,
                     problem_statement = excluded.problem_statement,
                     constraints = excluded.constraints,
                     language = excluded.language,
                     starter_code = excluded.starter_code,
                     test_cases_json = excluded.test_cases_json,
                     user_code = excluded.user_code,
                     passed = excluded.passed,
                     ai_feedback = excluded.ai_feedback,
                     skipped = excluded.skipped,
                     updated_at = excluded.updated_at""",
                (interview_id, *row),
            )
            self._touch(conn, interview_id)

    def save_feedback(self, interview_id: str, owner_id: str, report: FeedbackReport) -> None:
        """Upsert the feedback report and mark the interview completed."""

        now = _now()
        with _sqlite_errors("save feedback"), self._conn() as conn:
            self._require_owned(conn, interview_id, owner_id)
            conn.execute(
                "UPDATE interviews SET status = 'completed', updated_at = ? WHERE interview_id = ?",
                (now, interview_id),
            )
            conn.execute(
                """INSERT INTO interview_feedback
                   (interview_id, total_score, interview_score, coding_score, strengths_json, weaknesses_json,
                    detailed_feedback, recommendation, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT (interview_id) DO UPDATE SET
                     total_score = excluded.total_score,
                     interview_score = excluded.interview_score,
                     coding_score = excluded.coding_score,
                     strengths_json = excluded.strengths_json,
                     weaknesses_json = excluded.weaknesses_json,
                     detailed_feedback = excluded.detailed_feedback,
                     recommendation = excluded.recommendation,
                     updated_at = excluded.updated_at""",
                (
                    interview_id,
                    report.total_score,
                    report.interview_score,
                    report.coding_score,
                    json.dumps(report.strengths, ensure_ascii=False),
                    json.dumps(report.weaknesses, ensure_ascii=False),
                    report.detailed_feedback,
                    report.hiring_recommendation,
                    now,
                ),
            )

    def list_interviews(self, owner_id: str) -> List[InterviewRecord]:
        """Owner's interviews, newest first, with question counts and feedback."""

        with _sqlite_errors("list interviews"), self._conn() as conn:
            rows = conn.execute(
                """SELECT i.*, (SELECT COUNT(*) FROM interview_questions q
                                WHERE q.interview_id = i.interview_id) AS question_count
                   FROM interviews i
                   WHERE i.owner_id = ?
                   ORDER BY i.created_at DESC, i.rowid DESC""",
                (owner_id,),
            ).fetchall()
            return [self._record(conn, row, InterviewRecord) for row in rows]

    def get_interview(self, interview_id: str, owner_id: str) -> InterviewDetail:
        with _sqlite_errors("get interview"), self._conn() as conn:
            row = conn.execute(
                """SELECT i.*, (SELECT COUNT(*) FROM interview_questions q
                                WHERE q.interview_id = i.interview_id) AS question_count
                   FROM interviews i
                   WHERE i.interview_id = ? AND i.owner_id = ?""",
                (interview_id, owner_id),
            ).fetchone()
            if row is None:
                raise InterviewNotFound("Interview not found")
            detail = self._record(conn, row, InterviewDetail)
            questions = conn.execute(
                """SELECT position, question_text, expected_answer, user_answer
                   FROM interview_questions WHERE interview_id = ? ORDER BY position ASC""",
                (interview_id,),
            ).fetchall()
            detail.questions = [QuestionRecord(**dict(item)) for item in questions]
            coding = conn.execute("SELECT * FROM coding_results WHERE interview_id = ?", (interview_id,)).fetchone()
            if coding is not None:
                detail.coding = CodingRecord(
                    title=coding["title"],
                    description=coding["description"],
                    problem_statement=coding["problem_statement"],
                    constraints=coding["constraints"],
                    language=coding["language"],
                    starter_code=coding["starter_code"],
                    test_cases=json.loads(coding["test_cases_json"]),
                    user_code=coding["user_code"],
                    passed=bool(coding["passed"]),
                    ai_feedback=coding["ai_feedback"],
                    skipped=bool(coding["skipped"]),
                )
            return detail

    @staticmethod
    def _require_owned(conn: sqlite3.Connection, interview_id: str, owner_id: str) -> None:
        row = conn.execute(
            "SELECT 1 FROM interviews WHERE interview_id = ? AND owner_id = ?",
            (interview_id, owner_id),
        ).fetchone()
        if row is None:
            raise InterviewNotFound("Interview not found")

    @staticmethod
    def _touch(conn: sqlite3.Connection, interview_id: str) -> None:
        conn.execute("UPDATE interviews SET updated_at = ? WHERE interview_id = ?", (_now(), interview_id))

    @staticmethod
    def _record(conn: sqlite3.Connection, row: sqlite3.Row, model: Type[InterviewRecord]) -> InterviewRecord:
        feedback_row = conn.execute(
            "SELECT * FROM interview_feedback WHERE interview_id = ?", (row["interview_id"],)
        ).fetchone()
        feedback = None
        if feedback_row is not None:
            feedback = FeedbackReport(
                total_score=feedback_row["total_score"],
                interview_score=feedback_row["interview_score"],
                coding_score=feedback_row["coding_score"],
                strengths=json.loads(feedback_row["strengths_json"]),
                weaknesses=json.loads(feedback_row["weaknesses_json"]),
                detailed_feedback=feedback_row["detailed_feedback"],
                hiring_recommendation=feedback_row["recommendation"],
            )
        return model(
            interview_id=row["interview_id"],
            owner_id=row["owner_id"],
            resume_url=row["resume_url"],
            job_description=row["job_description"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            question_count=row["question_count"],
            feedback=feedback,
        )


__all__ = [
    "AnswerEntry",
    "CodingRecord",
    "InterviewDetail",
    "InterviewNotFound",
    "InterviewRecord",
    "InterviewStore",
    "PersistenceError",
    "QuestionRecord",
]
