"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interviews.db")
    CHECKPOINT_DIR: str = Field(default="data/sessions")
    APP_CONFIG_PATH: str = ""

    LLM_BASE_URL: str = "https://openrouter.ai/api/v1"
    LLM_ENDPOINT: str = "/chat/completions"
    LLM_MODEL: str = "nvidia/nemotron-3-nano-30b-a3b:free"
    LLM_API_KEY_ENV: str = "OPENROUTER_API_KEY"
    LLM_TIMEOUT_S: float = Field(default=60.0, gt=0)
    LLM_MAX_TOKENS: int = Field(default=4000, ge=1)
    LLM_REFERER: str = "http://localhost:3000"
    LLM_APP_TITLE: str = "AI Interview Coach"

    TOTAL_QUESTIONS: int = Field(default=10, ge=1)
    CONTEXT_WINDOW_TURNS: int = Field(default=6, ge=1)
    RESUME_CHAR_BUDGET: int = Field(default=2500, ge=1)
    CODING_MAX_ATTEMPTS: int = Field(default=3, ge=1)
    CODING_RETRY_DELAY_S: float = Field(default=1.0, ge=0.0)

    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"
    ENABLE_FILE_LOGS: bool = False
    LOG_FILE: str = "logs/mock_interview.jsonl"
    LOG_MAX_BYTES: int = Field(default=5_242_880, ge=1)
    LOG_BACKUP_COUNT: int = Field(default=5, ge=0)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
