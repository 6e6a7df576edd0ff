"""Per-request configuration.

A :class:`Config` describes one generation call: which provider and model
to use, the API keys available, HTTP timeout, retry budget, log level and
sampling options.  It is immutable; derive variants with
:meth:`Config.with_provider` or ``model_copy(update=...)``.

Example usage:

>>> from llmkit.config import Config
>>> cfg = Config(provider="ollama", model="llama3", max_retries=2)
>>> cfg.with_provider("openai", "gpt-4o").provider
'openai'
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .env_api_keys import load_api_keys, load_env
from .logger import LogLevel
from .models import DEFAULT_MODEL


class Config(BaseModel):
    """Settings for a single generation call."""

    model_config = ConfigDict(frozen=True)

    provider: str
    model: str = ""
    api_keys: Dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    log_level: LogLevel = LogLevel.INFO
    temperature: float = 0.7
    max_tokens: int = Field(default=1024, gt=0)
    # Base URL override for the local Ollama server; empty keeps the default.
    ollama_endpoint: str = ""

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    @field_validator("provider")
    @classmethod
    def _normalise_provider(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def api_key(self) -> str:
        """API key for this config's provider, or an empty string."""
        return self.api_keys.get(self.provider, "")

    def with_provider(self, provider: str, model: Optional[str] = None) -> "Config":
        """Return a copy targeting another provider/model."""
        provider = provider.strip().lower()
        return self.model_copy(update={"provider": provider, "model": model or DEFAULT_MODEL.get(provider, "")})

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides: Any) -> "Config":
        """Build a config from environment variables (and ``.env``).

        Env:
          - LLM_PROVIDER (default 'ollama'), LLM_MODEL
          - LLM_TIMEOUT, LLM_MAX_RETRIES, LLM_RETRY_DELAY, LLM_LOG_LEVEL
          - LLM_TEMPERATURE, LLM_MAX_TOKENS
          - OLLAMA_ENDPOINT
          - OPENAI_API_KEY, GEMINI_API_KEY, DEEPSEEK_API_KEY, DOUBAO_API_KEY
        """
        load_env(dotenv_path)
        provider = os.getenv("LLM_PROVIDER", "ollama").strip().lower()
        values: Dict[str, Any] = {
            "provider": provider,
            "model": os.getenv("LLM_MODEL") or DEFAULT_MODEL.get(provider, ""),
            "api_keys": load_api_keys(),
            "ollama_endpoint": os.getenv("OLLAMA_ENDPOINT", ""),
        }
        env_fields = {
            "timeout": "LLM_TIMEOUT",
            "max_retries": "LLM_MAX_RETRIES",
            "retry_delay": "LLM_RETRY_DELAY",
            "log_level": "LLM_LOG_LEVEL",
            "temperature": "LLM_TEMPERATURE",
            "max_tokens": "LLM_MAX_TOKENS",
        }
        for field, env_var in env_fields.items():
            raw = os.getenv(env_var)
            if raw:
                values[field] = raw
        values.update(overrides)
        return cls(**values)


__all__ = ["Config"]
