from __future__ import annotations  # Configuration schema for LLM routing

from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field

from .settings import Settings


QUESTION_ROUTE_KEY = "flow_manager.question_agent"
CODING_ROUTE_KEY = "coding_challenge.generate"
CODE_REVIEW_ROUTE_KEY = "coding_challenge.evaluate"
FEEDBACK_ROUTE_KEY = "interview_evaluation.feedback"

ROUTE_KEYS = (QUESTION_ROUTE_KEY, CODING_ROUTE_KEY, CODE_REVIEW_ROUTE_KEY, FEEDBACK_ROUTE_KEY)


class LlmRoute(BaseModel):  # LLM endpoint configuration
    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    max_tokens: int = Field(default=4000, ge=1)
    api_key_env: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)


class RetryPolicy(BaseModel):  # Bounded retry with fixed backoff
    attempts: int = Field(default=3, ge=1)
    delay_s: float = Field(default=1.0, ge=0.0)


class FlowSettings(BaseModel):  # Interview flow configuration
    total_questions: int = Field(default=10, ge=1)
    context_window: int = Field(default=6, ge=1)
    resume_char_budget: int = Field(default=2500, ge=1)
    coding_retry: RetryPolicy = Field(default_factory=RetryPolicy)


class AppConfig(BaseModel):  # Application configuration root
    llm_routes: Dict[str, LlmRoute]
    registry: Dict[str, str] = Field(default_factory=dict)
    flow: FlowSettings = Field(default_factory=FlowSettings)


def load_config(path: Path) -> AppConfig:  # Load configuration from disk
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_route(cfg: AppConfig, key: str) -> LlmRoute:  # Look up the route bound to an operation
    if key not in cfg.registry:
        raise KeyError(f"Registry entry missing for '{key}'")
    route_id = cfg.registry[key]
    if route_id not in cfg.llm_routes:
        raise KeyError(f"Route '{route_id}' missing for '{key}'")
    return cfg.llm_routes[route_id]


def route_from_settings(settings: Settings) -> LlmRoute:  # Single default route built from env settings
    return LlmRoute(
        name="default",
        base_url=settings.LLM_BASE_URL,
        endpoint=settings.LLM_ENDPOINT,
        model=settings.LLM_MODEL,
        timeout_s=settings.LLM_TIMEOUT_S,
        max_tokens=settings.LLM_MAX_TOKENS,
        api_key_env=settings.LLM_API_KEY_ENV or None,
        extra_headers={"HTTP-Referer": settings.LLM_REFERER, "X-Title": settings.LLM_APP_TITLE},
    )


def flow_from_settings(settings: Settings) -> FlowSettings:  # Flow limits built from env settings
    return FlowSettings(
        total_questions=settings.TOTAL_QUESTIONS,
        context_window=settings.CONTEXT_WINDOW_TURNS,
        resume_char_budget=settings.RESUME_CHAR_BUDGET,
        coding_retry=RetryPolicy(
            attempts=settings.CODING_MAX_ATTEMPTS,
            delay_s=settings.CODING_RETRY_DELAY_S,
        ),
    )


def load_routes(settings: Settings) -> tuple[Dict[str, LlmRoute], FlowSettings]:  # Routes per operation plus flow limits
    if settings.APP_CONFIG_PATH:
        cfg = load_config(Path(settings.APP_CONFIG_PATH))
        return {key: resolve_route(cfg, key) for key in ROUTE_KEYS}, cfg.flow
    default = route_from_settings(settings)
    return {key: default for key in ROUTE_KEYS}, flow_from_settings(settings)
