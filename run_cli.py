"""
Run the to-do assistant CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    serve      Run the REST API
    chat       Interactive chat session
    ask        One-shot request
    todos      Show the task list (--search TEXT to filter)

Examples:
    python run_cli.py chat
    python run_cli.py ask "remind me to water the plants"
    python run_cli.py todos --search plants

Environment variables (all optional unless noted):
    MODEL_API_KEY       Credential for the hosted model (required for gemini/openai/groq)
    LLM_PROVIDER        "gemini", "openai", "groq" or "ollama" (default: gemini)
    LLM_MODEL           Model name (default depends on provider)
    DB_PATH             SQLite database file path (default: todos.db)
    OLLAMA_BASE_URL     Ollama server URL (default: http://localhost:11434/)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from todo_assistant.adapters.cli.main import app

if __name__ == "__main__":
    app()
