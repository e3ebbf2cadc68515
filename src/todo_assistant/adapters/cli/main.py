"""
adapters.cli.main - CLI adapter for the to-do assistant.

Mirrors adapters/rest/ but for terminal use. Uses the same ServiceFactory,
SessionManager and AgentExecutor as the REST API so behaviour is identical.

Commands
--------
  serve   Run the REST API (uvicorn)
  chat    Interactive chat session (one local session, ">> " prompt)
  ask     One-shot request
  todos   Show the task list, optionally filtered

Usage
-----
  todo-assistant chat
  todo-assistant ask "remind me to call mum"
  todo-assistant todos --search milk
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from todo_assistant import __version__
from todo_assistant.application.sessions import SessionManager
from todo_assistant.domain.exceptions import (
    ContractViolation,
    DomainError,
    ServiceUnavailable,
)
from todo_assistant.factory import ServiceFactory
from todo_assistant.infrastructure.config import Settings

logger = logging.getLogger(__name__)
console = Console()
app = typer.Typer(
    help="Conversational to-do list assistant",
    add_completion=False,
    no_args_is_help=True,
)

_CLI_SESSION = "cli"


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def _make_factory(*, full_init: bool) -> ServiceFactory:
    """Create a ServiceFactory at the required initialisation level.

    full_init=False: runs DB migrations only. Enough for listing tasks.
    full_init=True:  also builds the chat model. Required for ask and chat.
    """
    config = Settings.from_env()
    factory = ServiceFactory(config)
    if full_init:
        await factory.initialize()
    else:
        await factory.run_migrations()
    return factory


def _friendly_error(exc: DomainError) -> str:
    """The terminal counterpart of the REST error bodies."""
    if isinstance(exc, ServiceUnavailable):
        return "The AI model is currently overloaded. Please try again later."
    if isinstance(exc, ContractViolation):
        return "Received invalid response from AI. Please try again."
    return f"An error occurred: {exc}"


async def _one_turn(sessions: SessionManager, text: str) -> None:
    try:
        with console.status("[bold cyan]Thinking…", spinner="dots"):
            result = await sessions.run_turn(_CLI_SESSION, text)
    except DomainError as exc:
        console.print(f"[bold red]{_friendly_error(exc)}[/bold red]")
        return
    except Exception as exc:
        logger.exception("Turn failed with an unexpected error")
        console.print(f"[bold red]An error occurred: {exc}[/bold red]")
        return
    console.print(result.reply)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"todo-assistant v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else Settings.from_env().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HOST or 0.0.0.0)."),
    port: Optional[int] = typer.Option(None, help="Listen port (default: PORT or 3000)."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the REST API."""
    import uvicorn

    config = Settings.from_env()
    uvicorn.run(
        "todo_assistant.adapters.rest.app:app",
        host=host or config.host,
        port=port or config.port,
        reload=reload,
    )


@app.command()
def chat() -> None:
    """Interactive chat session. Type 'quit' or 'exit' to leave."""

    async def _run() -> None:
        factory = await _make_factory(full_init=True)
        sessions = factory.create_session_manager()
        console.print(Panel(
            "[bold]AI Todo Assistant[/bold]\n"
            "Tell me what you need to do. Type [bold]quit[/bold] to leave.",
            border_style="blue",
        ))
        while True:
            query = await asyncio.to_thread(Prompt.ask, "[bold green]>>[/bold green]")
            if query.strip().lower() in {"quit", "exit"}:
                console.print("[dim]Goodbye.[/dim]")
                break
            if not query.strip():
                continue
            await _one_turn(sessions, query)

    asyncio.run(_run())


@app.command()
def ask(text: str = typer.Argument(..., help="What you want the assistant to do.")) -> None:
    """One-shot request."""

    async def _run() -> None:
        factory = await _make_factory(full_init=True)
        await _one_turn(factory.create_session_manager(), text)

    asyncio.run(_run())


@app.command()
def todos(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Only tasks containing this text."),
) -> None:
    """Show the task list."""

    async def _run() -> None:
        factory = await _make_factory(full_init=False)
        repo = factory.create_task_repository()
        tasks = await (repo.search(search) if search is not None else repo.list_all())

        if not tasks:
            console.print("[dim]No tasks.[/dim]")
            return
        t = Table(box=box.SIMPLE, padding=(0, 2))
        t.add_column("ID", style="bold", justify="right")
        t.add_column("Todo")
        for task in tasks:
            t.add_row(str(task.id), task.todo)
        console.print(Panel(t, title="Your Tasks", border_style="blue"))

    try:
        asyncio.run(_run())
    except DomainError as exc:
        console.print(f"[bold red]{_friendly_error(exc)}[/bold red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
