"""
Run the to-do assistant REST API.

Usage:
    python run_api.py [--reload]

    --reload            Restart the server on code changes (development only)

Environment variables (all optional unless noted):
    MODEL_API_KEY       Credential for the hosted model (required for gemini/openai/groq)
    LLM_PROVIDER        "gemini", "openai", "groq" or "ollama" (default: gemini)
    LLM_MODEL           Model name (default depends on provider)
    PORT                HTTP listen port (default: 3000)
    HOST                Bind address (default: 0.0.0.0)
    DB_PATH             SQLite database file path (default: todos.db)
    LOG_LEVEL           Logging level (default: INFO)
"""

import logging
import sys
from pathlib import Path

# Ensure src/ is importable when running from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

from todo_assistant.infrastructure.config import Settings


def main(argv=None) -> None:
    args = sys.argv[1:] if argv is None else argv
    config = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "todo_assistant.adapters.rest.app:app",
        host=config.host,
        port=config.port,
        reload="--reload" in args,
    )


if __name__ == "__main__":
    main()
