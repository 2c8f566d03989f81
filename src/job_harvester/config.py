import os
from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Load environment variables from .env file
load_dotenv()

DEFAULT_INTER_STEP_DELAY_MS = 1000
DEFAULT_MAX_LOAD_RETRIES = 3


class CrawlConfig(BaseModel):
    """
    Options a crawl session recognizes. Settings arrive either with their
    camelCase names (interStepDelayMs, maxLoadRetries) or snake_case names;
    anything else in the mapping is ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True
    )

    inter_step_delay_ms: float = Field(default=DEFAULT_INTER_STEP_DELAY_MS, ge=0)
    max_load_retries: int = Field(default=DEFAULT_MAX_LOAD_RETRIES, ge=0)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any] | None = None) -> "CrawlConfig":
        return cls.model_validate(dict(settings or {}))

    @property
    def step_delay(self) -> float:
        """Inter-step delay in seconds."""
        return self.inter_step_delay_ms / 1000


def get_config() -> dict[str, str]:
    """
    Load configuration from environment variables.
    Called lazily to avoid crashing on import.
    """
    return {
        "INTER_STEP_DELAY_MS": os.getenv("INTER_STEP_DELAY_MS", str(DEFAULT_INTER_STEP_DELAY_MS)),
        "MAX_LOAD_RETRIES": os.getenv("MAX_LOAD_RETRIES", str(DEFAULT_MAX_LOAD_RETRIES)),
        "DB_PATH": os.getenv("DB_PATH", "jobs.db"),
    }


class _Config:
    """Lazy configuration that only validates when values are actually accessed."""

    def __init__(self) -> None:
        self._config: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def INTER_STEP_DELAY_MS(self) -> int:
        """Delay between crawl steps in milliseconds. Must be a non-negative integer."""
        raw = self._load()["INTER_STEP_DELAY_MS"]
        try:
            delay = int(raw)
        except ValueError:
            raise ValueError(
                f"INTER_STEP_DELAY_MS must be a non-negative integer, got '{raw}'"
            ) from None
        if delay < 0:
            raise ValueError(f"INTER_STEP_DELAY_MS must be a non-negative integer, got {delay}")
        return delay

    @property
    def MAX_LOAD_RETRIES(self) -> int:
        """Polling attempts while waiting for a page. Must be a non-negative integer."""
        raw = self._load()["MAX_LOAD_RETRIES"]
        try:
            retries = int(raw)
        except ValueError:
            raise ValueError(
                f"MAX_LOAD_RETRIES must be a non-negative integer, got '{raw}'"
            ) from None
        if retries < 0:
            raise ValueError(f"MAX_LOAD_RETRIES must be a non-negative integer, got {retries}")
        return retries

    @property
    def DB_PATH(self) -> str:
        return self._load()["DB_PATH"]


_cfg = _Config()

# Module-level type declarations for mypy.
# The actual values come from __getattr__ below.
INTER_STEP_DELAY_MS: int
MAX_LOAD_RETRIES: int
DB_PATH: str


# Module-level lazy access using __getattr__ (PEP 562).
def __getattr__(name: str) -> str | int:
    if name == "INTER_STEP_DELAY_MS":
        return _cfg.INTER_STEP_DELAY_MS
    if name == "MAX_LOAD_RETRIES":
        return _cfg.MAX_LOAD_RETRIES
    if name == "DB_PATH":
        return _cfg.DB_PATH
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
