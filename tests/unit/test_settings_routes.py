from __future__ import annotations

import json

import pytest

from config import (
    CODING_ROUTE_KEY,
    FEEDBACK_ROUTE_KEY,
    QUESTION_ROUTE_KEY,
    ROUTE_KEYS,
    AppConfig,
    Settings,
    load_routes,
    resolve_route,
)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("LLM_MODEL", "openai/gpt-4o-mini")
    monkeypatch.setenv("TOTAL_QUESTIONS", "8")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://app.test")

    current = Settings()

    assert current.LLM_MODEL == "openai/gpt-4o-mini"
    assert current.TOTAL_QUESTIONS == 8
    assert current.cors_origins_list == ["http://localhost:3000", "https://app.test"]


def test_settings_defaults():
    current = Settings(_env_file=None)

    assert current.CONTEXT_WINDOW_TURNS == 6
    assert current.RESUME_CHAR_BUDGET == 2500
    assert current.CODING_MAX_ATTEMPTS == 3
    assert current.CODING_RETRY_DELAY_S == 1.0


def test_default_routes_share_one_endpoint():
    current = Settings(_env_file=None, LLM_REFERER="http://ui.test", LLM_APP_TITLE="Coach", TOTAL_QUESTIONS=4)

    routes, flow = load_routes(current)

    assert set(routes) == set(ROUTE_KEYS)
    route = routes[QUESTION_ROUTE_KEY]
    assert route.base_url == "https://openrouter.ai/api/v1"
    assert route.api_key_env == "OPENROUTER_API_KEY"
    assert route.extra_headers == {"HTTP-Referer": "http://ui.test", "X-Title": "Coach"}
    assert flow.total_questions == 4
    assert flow.coding_retry.attempts == 3


def test_routes_from_app_config(tmp_path):
    config_path = tmp_path / "app_config.json"
    config_path.write_text(
        json.dumps(
            {
                "llm_routes": {
                    "fast": {"name": "fast", "base_url": "http://a.test", "endpoint": "/v1/chat", "model": "small", "timeout_s": 10},
                    "smart": {"name": "smart", "base_url": "http://b.test", "endpoint": "/v1/chat", "model": "large", "timeout_s": 90},
                },
                "registry": {
                    "flow_manager.question_agent": "fast",
                    "coding_challenge.generate": "smart",
                    "coding_challenge.evaluate": "smart",
                    "interview_evaluation.feedback": "smart",
                },
                "flow": {"total_questions": 6, "context_window": 4},
            }
        ),
        encoding="utf-8",
    )

    routes, flow = load_routes(Settings(_env_file=None, APP_CONFIG_PATH=str(config_path)))

    assert routes[QUESTION_ROUTE_KEY].model == "small"
    assert routes[CODING_ROUTE_KEY].model == "large"
    assert routes[FEEDBACK_ROUTE_KEY].timeout_s == 90
    assert flow.total_questions == 6
    assert flow.context_window == 4


def test_resolve_route_requires_registry_entry():
    cfg = AppConfig(llm_routes={}, registry={QUESTION_ROUTE_KEY: "ghost"})

    with pytest.raises(KeyError):
        resolve_route(cfg, CODING_ROUTE_KEY)
    with pytest.raises(KeyError):
        resolve_route(cfg, QUESTION_ROUTE_KEY)
