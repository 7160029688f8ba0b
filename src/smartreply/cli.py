"""SmartReply Command Line Interface."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from smartreply.logging import configure_logging, get_logger

app = typer.Typer(
    name="smartreply",
    help="SmartReply: intent classification, conversational memory and template responses",
    no_args_is_help=True,
)
console = Console()
logger = get_logger(__name__, component="cli")


def _build_orchestrator(config_path: Optional[Path], log_level: Optional[str] = None):
    from smartreply.config import Config, load_config
    from smartreply.orchestrator import Orchestrator

    config = load_config(config_path) if config_path else Config()
    configure_logging(
        log_level=log_level or config.system.log_level,
        log_format=config.system.log_format,
        log_file=config.system.log_file,
    )
    return Orchestrator.from_config(config)


def _start_metrics(metrics_port: Optional[int], announce: bool = True) -> None:
    if not metrics_port:
        return
    from smartreply.metrics import start_metrics_server

    try:
        start_metrics_server(port=metrics_port)
        if announce:
            console.print(f"[dim]Metrics available at http://localhost:{metrics_port}/metrics[/dim]")
    except Exception as e:
        console.print(f"[yellow]Warning: Could not start metrics server: {e}[/yellow]")


def _print_response(response) -> None:
    console.print(f"\n[bold green]{response.spoken_message}[/bold green]")
    console.print(response.display_message)

    if response.action_suggestions:
        console.print("\n[bold]Suggestions:[/bold]")
        for suggestion in response.action_suggestions:
            console.print(f"  • {suggestion}")

    if response.follow_up_questions:
        console.print("\n[bold]Follow-up:[/bold]")
        for question in response.follow_up_questions:
            console.print(f"  ? {question}")

    meta = response.metadata
    console.print(
        f"\n[dim]intent={response.intent.value} confidence={response.confidence:.2f} "
        f"type={response.response_type} personalization={meta.personalization_level} "
        f"({meta.processing_time_ms:.1f}ms)[/dim]"
    )


@app.command()
def version():
    """Show version information."""
    from smartreply import __version__

    console.print(f"SmartReply version {__version__}")


@app.command()
def classify(
    text: str = typer.Argument(..., help="Utterance to classify"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for concept expansion"),
):
    """Classify an utterance and list its entities."""
    import random

    from smartreply.nlp import EntityExtractor, IntentClassifier, normalize

    normalized = normalize(text)
    match = IntentClassifier().classify(normalized)
    entities = EntityExtractor(rng=random.Random(seed)).extract(normalized.split())

    console.print(f"\n[bold]Intent:[/bold] [cyan]{match.intent.value}[/cyan]")
    console.print(f"[bold]Confidence:[/bold] {match.confidence:.2f}")
    if match.matched_pattern_id:
        console.print(f"[dim]Pattern: {match.matched_pattern_id}[/dim]")

    if not entities:
        console.print("\n[yellow]No entities found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Value")
    table.add_column("Span", justify="right")
    table.add_column("Score", justify="right")
    for entity in entities:
        table.add_row(
            entity.category.value,
            entity.value,
            f"{entity.start_offset}:{entity.end_offset}",
            f"{entity.score:.1f}",
        )
    console.print()
    console.print(table)


@app.command()
def respond(
    text: str = typer.Argument(..., help="Utterance to respond to"),
    session: str = typer.Option("cli", "--session", "-s", help="Session key"),
    verbosity: Optional[str] = typer.Option(
        None, "--verbosity", help="concise, detailed or comprehensive"
    ),
    style: Optional[str] = typer.Option(None, "--style", help="formal, casual or friendly"),
    level: Optional[str] = typer.Option(
        None, "--level", help="beginner, intermediate or advanced"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file or directory"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level"),
    as_json: bool = typer.Option(False, "--json", help="Print the response as JSON"),
    metrics_port: Optional[int] = typer.Option(
        None, "--metrics-port", help="Port to expose Prometheus metrics (e.g., 9090)"
    ),
):
    """Run the full pipeline for one utterance."""
    from smartreply.errors import SmartReplyError

    try:
        orchestrator = _build_orchestrator(config_path, log_level)
        _start_metrics(metrics_port, announce=not as_json)
        changes = {
            "verbosity": verbosity,
            "communication_style": style,
            "technical_level": level,
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if changes:
            orchestrator.update_preferences(session, **changes)
        response = orchestrator.handle(session, text)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except SmartReplyError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(response.model_dump_json())
    else:
        _print_response(response)


@app.command()
def chat(
    session: str = typer.Option("chat", "--session", "-s", help="Session key"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file or directory"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level"),
    metrics_port: Optional[int] = typer.Option(
        None, "--metrics-port", help="Port to expose Prometheus metrics (e.g., 9090)"
    ),
):
    """Interactive conversation. /reset clears memory, /quit exits."""
    from smartreply.errors import SmartReplyError

    try:
        orchestrator = _build_orchestrator(config_path, log_level)
    except (FileNotFoundError, SmartReplyError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    _start_metrics(metrics_port)

    console.print("[bold]SmartReply chat[/bold] [dim](/reset, /quit)[/dim]")
    while True:
        try:
            text = console.input("\n[bold cyan]you>[/bold cyan] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        command = text.strip().lower()
        if command in ("/quit", "/exit"):
            break
        if command == "/reset":
            orchestrator.clear_session(session)
            console.print("[yellow]Session cleared[/yellow]")
            continue

        _print_response(orchestrator.handle(session, text))

    logger.info("chat_ended", session_key=session)


@app.command()
def memory(
    session: str = typer.Argument(..., help="Session key"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file or directory"
    ),
    clear: bool = typer.Option(False, "--clear", help="Delete the session's memory"),
):
    """Show (or clear) the memory held for a session."""
    from smartreply.errors import SmartReplyError

    try:
        orchestrator = _build_orchestrator(config_path, "WARNING")
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except SmartReplyError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    if clear:
        orchestrator.memory.clear(session)
        console.print(f"[green]✓ Cleared memory for {session}[/green]")
        return

    stats = orchestrator.memory.stats(session)
    context = orchestrator.memory.query(session)

    table = Table(show_header=True, header_style="bold cyan", title=f"Memory: {session}")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Short-term entries", str(stats.short_term_count))
    table.add_row("Long-term concepts", str(stats.long_term_count))
    table.add_row("Top concepts", ", ".join(stats.top_concepts) or "-")
    table.add_row("Frequent concepts", ", ".join(context.long_term) or "-")
    table.add_row("Patterns", ", ".join(context.patterns) or "-")
    console.print(table)


@app.command()
def init(
    config_dir: Path = typer.Option(
        Path("config"),
        "--config",
        "-c",
        help="Configuration directory",
    ),
):
    """Initialize SmartReply configuration."""
    from smartreply.config.loader import CONFIG_FILE_NAME

    if config_dir.exists():
        console.print(f"[yellow]Config directory already exists: {config_dir}[/yellow]")
        return

    config_dir.mkdir(parents=True)
    (config_dir / "environments").mkdir()

    default_config = """# SmartReply Configuration
version: "1.0"
environment: development

system:
  log_level: INFO
  log_format: console

memory:
  max_short_term: 50
  max_long_term: 200
  memory_decay_hours: 72
  pattern_threshold: 3
  recency_window_minutes: 30

storage:
  backend: file
  namespace: smartreply
  path: data/memory

extraction:
  expansion_probability: 0.3

responses:
  max_suggestions: 3
  max_follow_ups: 2
"""
    (config_dir / CONFIG_FILE_NAME).write_text(default_config)

    production_config = """# Production overrides
system:
  log_format: json

storage:
  backend: redis
  redis_url: redis://localhost:6379/0
"""
    (config_dir / "environments" / "production.yaml").write_text(production_config)

    console.print(f"[green]✓ Created configuration in {config_dir}[/green]")


if __name__ == "__main__":
    app()
