"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable, Optional

from config.settings import settings

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interviews (
  interview_id TEXT PRIMARY KEY,
  owner_id TEXT NOT NULL,
  resume_url TEXT,
  job_description TEXT NOT NULL DEFAULT '',
  status TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_interviews_owner ON interviews (owner_id, created_at);
""",
    """
CREATE TABLE IF NOT EXISTS interview_questions (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  interview_id TEXT NOT NULL,
  position INTEGER NOT NULL,
  question_text TEXT NOT NULL,
  expected_answer TEXT NOT NULL DEFAULT '',
  user_answer TEXT,
  UNIQUE (interview_id, position),
  FOREIGN KEY (interview_id) REFERENCES interviews (interview_id) ON DELETE CASCADE
);
""",
    """
CREATE TABLE IF NOT EXISTS coding_results (
  interview_id TEXT PRIMARY KEY,
  title TEXT NOT NULL,
  description TEXT NOT NULL DEFAULT '',
  problem_statement TEXT NOT NULL DEFAULT '',
  constraints TEXT NOT NULL DEFAULT '',
  language TEXT NOT NULL,
  starter_code TEXT NOT NULL DEFAULT '',
  test_cases_json TEXT NOT NULL,
  user_code TEXT NOT NULL DEFAULT '',
  passed INTEGER NOT NULL,
  ai_feedback TEXT NOT NULL DEFAULT '',
  skipped INTEGER NOT NULL,
  updated_at TEXT NOT NULL,
  FOREIGN KEY (interview_id) REFERENCES interviews (interview_id) ON DELETE CASCADE
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_feedback (
  interview_id TEXT PRIMARY KEY,
  total_score INTEGER NOT NULL,
  interview_score INTEGER NOT NULL,
  coding_score INTEGER NOT NULL,
  strengths_json TEXT NOT NULL,
  weaknesses_json TEXT NOT NULL,
  detailed_feedback TEXT NOT NULL,
  recommendation TEXT NOT NULL,
  updated_at TEXT NOT NULL,
  FOREIGN KEY (interview_id) REFERENCES interviews (interview_id) ON DELETE CASCADE
);
""",
]


def migrate(db_path: Optional[str] = None) -> None:
    """Apply schema migrations to the SQLite database."""

    path = db_path or settings.DB_PATH
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()
