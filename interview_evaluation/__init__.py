from .evaluation import build_feedback_prompt, generate_feedback, transcript_entries
from .models import FeedbackReport, HiringRecommendation

__all__ = [
    "FeedbackReport",
    "HiringRecommendation",
    "build_feedback_prompt",
    "generate_feedback",
    "transcript_entries",
]
