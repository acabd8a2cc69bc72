from __future__ import annotations  # Agent exports for interview flow manager

from .question import QuestionAgent

__all__ = ["QuestionAgent"]
