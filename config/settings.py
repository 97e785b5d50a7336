"""Configuration settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Decision loading
    decisions_dir: str = Field(
        default="decisions",
        description="Root directory the filesystem loader reads graph definitions from",
    )
    keep_decisions_in_memory: bool = Field(
        default=False,
        description="Memoize parsed graph definitions inside the filesystem loader",
    )

    # Evaluation defaults
    max_execution_time_ms: int = Field(
        default=30000,
        gt=0,
        description="Deadline for a single evaluation in milliseconds",
    )
    include_trace: bool = Field(default=False, description="Record a per-node trace")
    include_performance: bool = Field(
        default=False, description="Report total execution time"
    )

    log_level: str = Field(default="WARNING", description="Logging level")

    model_config = {"extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance loaded from environment."""
    return Settings(
        decisions_dir=os.getenv("DECISIONS_DIR", "decisions"),
        keep_decisions_in_memory=os.getenv("KEEP_DECISIONS_IN_MEMORY", "false"),  # type: ignore[arg-type]
        max_execution_time_ms=int(os.getenv("MAX_EXECUTION_TIME_MS", "30000")),
        include_trace=os.getenv("INCLUDE_TRACE", "false"),  # type: ignore[arg-type]
        include_performance=os.getenv("INCLUDE_PERFORMANCE", "false"),  # type: ignore[arg-type]
        log_level=os.getenv("LOG_LEVEL", "WARNING"),
    )
