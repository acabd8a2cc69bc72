"""Configuration package for the mock interview services."""
from .llm import (
    CODE_REVIEW_ROUTE_KEY,
    CODING_ROUTE_KEY,
    FEEDBACK_ROUTE_KEY,
    QUESTION_ROUTE_KEY,
    ROUTE_KEYS,
    AppConfig,
    FlowSettings,
    LlmRoute,
    RetryPolicy,
    flow_from_settings,
    load_config,
    load_routes,
    resolve_route,
    route_from_settings,
)
from .settings import Settings, settings

__all__ = [
    "CODE_REVIEW_ROUTE_KEY",
    "CODING_ROUTE_KEY",
    "FEEDBACK_ROUTE_KEY",
    "QUESTION_ROUTE_KEY",
    "ROUTE_KEYS",
    "AppConfig",
    "FlowSettings",
    "LlmRoute",
    "RetryPolicy",
    "flow_from_settings",
    "load_config",
    "load_routes",
    "resolve_route",
    "route_from_settings",
    "Settings",
    "settings",
]
