"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment (and an
optional .env file) or passed explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Default model per provider, used when LLM_MODEL is not set.
_DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash",
    "openai": "gpt-4.1-mini",
    "groq": "llama-3.3-70b-versatile",
    "ollama": "llama3.2",
}


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the to-do assistant.

    No module-level globals. Construct via from_env() or pass explicitly
    in tests.
    """

    # ── Remote model ────────────────────────────────────────────
    # Allowed providers: "gemini", "openai", "groq", "ollama"
    llm_provider: str = "gemini"
    llm_model: str = ""
    model_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434/"
    llm_temperature: float = 0.0

    # Retry policy: 1 + model_max_retries attempts, delays base * 2**n
    model_max_retries: int = 3
    model_retry_base_delay: float = 1.0
    model_retry_max_delay: float = 30.0

    # ── Agent / sessions ────────────────────────────────────────
    turn_timeout_seconds: float = 120.0
    session_ttl_seconds: float = 3600.0
    max_sessions: int = 1000
    rollback_on_failure: bool = False

    # ── Storage ─────────────────────────────────────────────────
    db_path: str = "todos.db"

    # ── HTTP ────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: tuple[str, ...] = ("*",)

    log_level: str = "INFO"

    @property
    def active_llm_model(self) -> str:
        """Return the configured model name, or the provider's default."""
        return self.llm_model or _DEFAULT_MODELS.get(self.llm_provider, "")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> Settings:
        """Build Settings from environment variables (and .env if present)."""
        from dotenv import load_dotenv
        load_dotenv(env_file)

        provider = os.getenv("LLM_PROVIDER", "gemini").lower().strip()
        api_key = os.getenv("MODEL_API_KEY") or os.getenv(
            f"{provider.upper()}_API_KEY", "",
        )
        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

        return cls(
            llm_provider=provider,
            llm_model=os.getenv("LLM_MODEL", ""),
            model_api_key=api_key,
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/"),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0")),
            model_max_retries=int(os.getenv("MODEL_MAX_RETRIES", "3")),
            model_retry_base_delay=float(os.getenv("MODEL_RETRY_BASE_DELAY", "1.0")),
            model_retry_max_delay=float(os.getenv("MODEL_RETRY_MAX_DELAY", "30.0")),
            turn_timeout_seconds=float(os.getenv("TURN_TIMEOUT_SECONDS", "120")),
            session_ttl_seconds=float(os.getenv("SESSION_TTL_SECONDS", "3600")),
            max_sessions=int(os.getenv("MAX_SESSIONS", "1000")),
            rollback_on_failure=_env_flag("ROLLBACK_ON_FAILURE"),
            db_path=os.getenv("DB_PATH", "todos.db"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            cors_allow_origins=tuple(
                o.strip() for o in origins.split(",") if o.strip()
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
