"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tone_picker.clients.api_client import DEFAULT_BASE_URL, ToneApiClient
from tone_picker.clients.llm_client import LLMClient
from tone_picker.config import AppConfig, load_config
from tone_picker.errors import ToneError
from tone_picker.logging.usage_store import UsageStore
from tone_picker.models.tone import ToneState
from tone_picker.pipeline.orchestrator import AdjustmentStatus, ToneOrchestrator
from tone_picker.pipeline.tone_adjuster import (
    ToneAdjuster,
    ToneProvider,
    describe_formality,
    describe_friendliness,
)
from tone_picker.storage.state_store import StateStore
from tone_picker.utils.validation import validate_levels, validate_text

app = typer.Typer(
    name="tone-picker",
    help="Rewrite text to a chosen formality and friendliness.",
    no_args_is_help=True,
)
console = Console()

SESSION_HELP = """\
Commands:
  edit <text>      replace the text (undoable)
  tone <F> <R>     adjust formality/friendliness, each in [-1, 1]
  reset            set both levels back to 0
  undo / redo      move through history
  show             print the current text and tone
  history          list every snapshot
  clear-cache      forget cached adjustments
  help             this message
  quit             save and exit"""


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _make_adjuster(config: AppConfig) -> ToneAdjuster:
    return ToneAdjuster(
        LLMClient(timeout=config.llm.timeout),
        model=config.llm.model,
        timeout=config.llm.timeout,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )


def _make_provider(config: AppConfig, server: str | None) -> ToneProvider:
    if server:
        return ToneApiClient(base_url=server, timeout=config.llm.timeout)
    return _make_adjuster(config)


def _parse_level(raw: str) -> float:
    try:
        return int(raw)
    except ValueError:
        return float(raw)


def _tone_label(state: ToneState) -> str:
    return (
        f"formality {state.formality_level} ({describe_formality(state.formality_level)}), "
        f"friendliness {state.friendliness_level} ({describe_friendliness(state.friendliness_level)})"
    )


def _show(orchestrator: ToneOrchestrator) -> None:
    state = orchestrator.current()
    history = orchestrator.history
    console.print(Panel(
        Text(state.text) if state.text else Text("(empty)", style="dim"),
        title=_tone_label(state),
        subtitle=f"step {history.cursor + 1}/{len(history)}",
    ))


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
) -> None:
    """Run the HTTP API server."""
    import uvicorn

    from tone_picker.api.app import create_app

    config = load_config()
    usage = UsageStore(config.storage.resolved_usage_db_path)
    api = create_app(config, usage_store=usage)
    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(f"[green]Server running on {bind_host}:{bind_port}[/green]")
    console.print(f"[dim]Health check: http://{bind_host}:{bind_port}/api/health[/dim]")
    uvicorn.run(api, host=bind_host, port=bind_port)


@app.command()
def adjust(
    text: str = typer.Argument(help="Text to rewrite"),
    formality: float = typer.Option(0, "--formality", "-f", help="Formality level in [-1, 1]"),
    friendliness: float = typer.Option(0, "--friendliness", "-r", help="Friendliness level in [-1, 1]"),
    server: str = typer.Option(None, "--server", help="Use a running server, e.g. http://localhost:5000/api"),
) -> None:
    """Rewrite TEXT once and print the result."""
    try:
        validate_text(text)
        validate_levels(formality, friendliness)
    except ToneError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    config = load_config()
    provider = _make_provider(config, server)

    with console.status("Adjusting tone..."):
        try:
            result = asyncio.run(provider.adjust(text.strip(), formality, friendliness))
        except ToneError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)

    if result == text.strip():
        console.print("[yellow]No tone adjustment was needed for this text.[/yellow]")
    console.print(Panel(Text(result), title="Adjusted text"))


def _run_command(orchestrator: ToneOrchestrator, line: str, run=asyncio.run) -> bool:
    """Execute one session command. Returns False when the session should end.

    ``run`` drives coroutines; a session passes its own runner so async clients
    stay on one event loop.
    """
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return True

    command = parts[0].lower()
    rest = parts[1] if len(parts) > 1 else ""
    args = rest.split()
    if command in ("quit", "exit"):
        return False
    if command == "help":
        console.print(SESSION_HELP)
    elif command == "edit":
        orchestrator.edit_text(rest)
        _show(orchestrator)
    elif command == "tone":
        if len(args) != 2:
            console.print("[red]usage: tone <formality> <friendliness>[/red]")
            return True
        try:
            levels = (_parse_level(args[0]), _parse_level(args[1]))
        except ValueError:
            console.print("[red]Levels must be numbers between -1 and 1[/red]")
            return True
        with console.status("Adjusting tone..."):
            result = run(orchestrator.adjust_tone(*levels))
        if result.status == AdjustmentStatus.SAME_TONE:
            console.print("[dim]Tone already selected.[/dim]")
        elif result.message:
            color = "red" if result.error else "yellow"
            console.print(f"[{color}]{result.message}[/{color}]")
        if result.changed:
            _show(orchestrator)
    elif command == "reset":
        orchestrator.reset_tone()
        _show(orchestrator)
    elif command == "undo":
        if not orchestrator.undo():
            console.print("[dim]Nothing to undo.[/dim]")
        _show(orchestrator)
    elif command == "redo":
        if not orchestrator.redo():
            console.print("[dim]Nothing to redo.[/dim]")
        _show(orchestrator)
    elif command == "show":
        _show(orchestrator)
    elif command == "history":
        table = Table("#", "formality", "friendliness", "text")
        for i, state in enumerate(orchestrator.history.snapshots):
            marker = "*" if i == orchestrator.history.cursor else ""
            table.add_row(
                f"{marker}{i + 1}",
                str(state.formality_level),
                str(state.friendliness_level),
                Text(state.text[:60]),
            )
        console.print(table)
    elif command == "clear-cache":
        stats = orchestrator.cache.stats()
        count = orchestrator.clear_cache()
        console.print(
            f"[green]Cache cleared ({count} entries; "
            f"{stats['hits']} hits, {stats['misses']} misses this session).[/green]"
        )
    else:
        console.print(f"[red]Unknown command: {command}[/red] (type 'help')")
    return True


@app.command()
def session(
    restore_history: bool = typer.Option(
        False, "--restore-history", help="Resume the saved undo/redo history"
    ),
    server: str = typer.Option(None, "--server", help="Use a running server instead of calling the LLM directly"),
    fresh: bool = typer.Option(False, "--fresh", help="Ignore and overwrite saved state"),
) -> None:
    """Interactive editing session with undo/redo."""
    config = load_config()
    store = StateStore(config.storage.resolved_db_path)
    if fresh:
        store.clear_all()
    initial = ToneState() if fresh else store.load_state()
    history = store.load_history(initial) if restore_history and not fresh else None
    orchestrator = ToneOrchestrator(
        _make_provider(config, server), initial, history=history
    )

    console.print(SESSION_HELP)
    _show(orchestrator)
    keep_going = True
    with asyncio.Runner() as runner:
        while keep_going:
            try:
                line = console.input("[bold]> [/bold]")
            except (EOFError, KeyboardInterrupt):
                break
            keep_going = _run_command(orchestrator, line, run=runner.run)
            store.save_state(orchestrator.current())
            store.save_history(orchestrator.history)

    store.save_state(orchestrator.current())
    store.save_history(orchestrator.history)


@app.command()
def health(
    url: str = typer.Option(DEFAULT_BASE_URL, "--url", help="API base URL"),
) -> None:
    """Check that a tone picker server is up."""

    async def _check() -> dict:
        async with ToneApiClient(base_url=url) as client:
            return await client.check_health()

    try:
        data = asyncio.run(_check())
    except ToneError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{data.get('status')}[/green] at {data.get('timestamp')}")


@app.command()
def usage(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of recent requests to list"),
) -> None:
    """Show recorded API usage and estimated cost."""
    config = load_config()
    store = UsageStore(config.storage.resolved_usage_db_path)
    summary = store.get_summary()
    console.print(Panel(
        f"Requests: {summary['total_requests']} | Cache hits: {summary['cache_hits']} | "
        f"Success: {summary['success_rate']:.1f}%\n"
        f"Tokens: {summary['total_input_tokens']} in / {summary['total_output_tokens']} out | "
        f"Cost: ${summary['total_cost_usd']:.4f}",
        title="Usage",
    ))
    logs = store.get_logs(limit=limit)
    if not logs:
        return
    table = Table("time", "tone", "chars", "cache", "result")
    for log in logs:
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            f"{log.formality_level:g}/{log.friendliness_level:g}",
            str(log.text_length),
            "hit" if log.cache_hit else "",
            "ok" if log.success else (log.error_type or "error"),
        )
    console.print(table)


if __name__ == "__main__":
    app()
