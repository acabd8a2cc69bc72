from __future__ import annotations  # Sliding-window conversation context

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from .models import ConversationTurn


TRUNCATION_MARKER = "... [truncated]"
DEFAULT_WINDOW = 6
DEFAULT_CHAR_BUDGET = 2500


class BoundedContext(BaseModel):  # Recent turns plus resume excerpt sent with each prompt
    turns: List[ConversationTurn] = Field(default_factory=list)
    omitted_count: int = Field(default=0, ge=0)
    resume_excerpt: str = ""
    resume_truncated: bool = False

    @property
    def omission_note(self) -> Optional[str]:
        if self.omitted_count <= 0:
            return None
        noun = "exchange" if self.omitted_count == 1 else "exchanges"
        return f"({self.omitted_count} earlier {noun} omitted)"


def truncate_resume(resume_text: str, char_budget: int = DEFAULT_CHAR_BUDGET) -> tuple[str, bool]:  # Cut to budget and mark
    text = resume_text or ""
    if len(text) <= char_budget:
        return text, False
    return text[:char_budget] + TRUNCATION_MARKER, True


def build_bounded_context(
    turns: Sequence[ConversationTurn],
    resume_text: str,
    *,
    window: int = DEFAULT_WINDOW,
    char_budget: int = DEFAULT_CHAR_BUDGET,
) -> BoundedContext:  # Keep the last `window` turns verbatim; earlier ones are dropped, not condensed
    if window < 1:
        raise ValueError("window must be at least 1")
    if char_budget < 1:
        raise ValueError("char_budget must be at least 1")
    history = list(turns)
    omitted = max(0, len(history) - window)
    excerpt, truncated = truncate_resume(resume_text, char_budget)
    return BoundedContext(
        turns=history[omitted:],
        omitted_count=omitted,
        resume_excerpt=excerpt,
        resume_truncated=truncated,
    )


def render_history(context: BoundedContext) -> str:  # Human-readable Q/A listing for prompts
    if not context.turns:
        return "(no previous questions)"
    lines: List[str] = []
    if context.omission_note:
        lines.append(context.omission_note)
    start = context.omitted_count + 1
    for offset, turn in enumerate(context.turns):
        number = start + offset
        lines.append(f"Q{number}: {turn.question}")
        lines.append(f"A{number}: {turn.answer.strip() or '(no answer given)'}")
    return "\n".join(lines)


__all__ = [
    "DEFAULT_CHAR_BUDGET",
    "DEFAULT_WINDOW",
    "TRUNCATION_MARKER",
    "BoundedContext",
    "build_bounded_context",
    "render_history",
    "truncate_resume",
]
