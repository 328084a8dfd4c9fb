# backend/sentifi/core/config.py
from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

# Resolves to <repo-root>/backend/.env when this file is at backend/sentifi/core/config.py
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- app / server
    ENV: str = "development"
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = []
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    RELOAD: bool = False

    # --- logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # --- storage
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DB_NAME: str = "sentifi"

    # --- sentiment classifier (OpenAI)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-5-mini"
    OPENAI_MAX_RETRIES: int = 2
    CLASSIFIER_MODE: str = "score"             # "score" (structured JSON) or "label" (legacy one-word)
    CLASSIFIER_TIMEOUT_SECONDS: float = 30.0

    # --- feeds
    FEED_TIMEOUT_SECONDS: float = 10.0
    FEED_ITEMS_PER_SOURCE: int = 5

    # --- ingestion schedule
    SCHEDULER_ENABLED: bool = True
    INGEST_ON_STARTUP: bool = True
    INGEST_INTERVAL_MINUTES: int = 60

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        if isinstance(v, list):
            return v
        raw = v or os.getenv("ALLOWED_ORIGINS", "")
        return [o.strip() for o in str(raw).split(",") if o.strip()]

    @field_validator("RELOAD", "SCHEDULER_ENABLED", "INGEST_ON_STARTUP", mode="before")
    @classmethod
    def _parse_bool(cls, v):
        if isinstance(v, bool):
            return v
        return str(v).lower() in ("1", "true", "yes", "on")

    @field_validator("CLASSIFIER_MODE")
    @classmethod
    def _validate_classifier_mode(cls, v):
        mode = str(v).strip().lower()
        if mode not in ("score", "label"):
            raise ValueError("CLASSIFIER_MODE must be 'score' or 'label'")
        return mode

    @field_validator("CLASSIFIER_TIMEOUT_SECONDS", "FEED_TIMEOUT_SECONDS")
    @classmethod
    def _validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("FEED_ITEMS_PER_SOURCE")
    @classmethod
    def _validate_items_per_source(cls, v):
        if not 1 <= v <= 50:
            raise ValueError("FEED_ITEMS_PER_SOURCE must be between 1 and 50")
        return v

    @field_validator("INGEST_INTERVAL_MINUTES")
    @classmethod
    def _validate_interval(cls, v):
        if v < 1:
            raise ValueError("INGEST_INTERVAL_MINUTES must be at least 1")
        return v


settings = Settings()
