from __future__ import annotations  # Final feedback report schema

from typing import Any, List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


HiringRecommendation = Literal["Strong Hire", "Hire", "No Hire"]

_RECOMMENDATIONS = {
    "strong hire": "Strong Hire",
    "hire": "Hire",
    "no hire": "No Hire",
}


class FeedbackReport(BaseModel):  # Scored evaluation of the whole session
    model_config = ConfigDict(populate_by_name=True)

    total_score: int = Field(default=0, ge=0, le=100, validation_alias=AliasChoices("total_score", "totalScore"))
    interview_score: int = Field(
        default=0, ge=0, le=100, validation_alias=AliasChoices("interview_score", "interviewScore")
    )
    coding_score: int = Field(default=0, ge=0, le=100, validation_alias=AliasChoices("coding_score", "codingScore"))
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    detailed_feedback: str = Field(
        default="", validation_alias=AliasChoices("detailed_feedback", "detailedFeedback")
    )
    hiring_recommendation: HiringRecommendation = Field(
        validation_alias=AliasChoices("hiring_recommendation", "hiringRecommendation", "recommendation"),
    )

    @field_validator("total_score", "interview_score", "coding_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> int:  # Scores are clipped into 0..100
        if value is None or value == "":
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(f"Score must be a number, got {type(value).__name__}")
        numeric = float(value)
        return int(max(0, min(100, round(numeric))))

    @field_validator("strengths", "weaknesses", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Expected a list of strings, got {type(value).__name__}")
        return [str(item).strip() for item in value if str(item).strip()]

    @field_validator("hiring_recommendation", mode="before")
    @classmethod
    def _normalize_recommendation(cls, value: Any) -> str:
        key = " ".join(str(value or "").replace("_", " ").replace("-", " ").split()).lower()
        if key in _RECOMMENDATIONS:
            return _RECOMMENDATIONS[key]
        raise ValueError(f"Unknown hiring recommendation: {value!r}")


__all__ = ["FeedbackReport", "HiringRecommendation"]
