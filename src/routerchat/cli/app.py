"""Main CLI application using Typer."""
import asyncio
import os

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import DEFAULT_API_URL, DEFAULT_MODEL
from ..dispatch import DispatchFailure, DispatchResult, FailureKind
from ..session import ChatSession
from .providers import ConsoleDebugPrinter, get_config, get_session

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="routerchat",
    help="Interactive chat client for OpenRouter-compatible completion endpoints",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output; diagnostics go to stderr
console = Console()
err_console = Console(stderr=True)

EXIT_WORDS = ("exit", "quit", "q")

MODEL_OPTION = typer.Option(
    None,
    "--model",
    "-m",
    help=f"Model identifier (default: $OPENROUTER_MODEL or {DEFAULT_MODEL})"
)
URL_OPTION = typer.Option(
    None,
    "--url",
    help="Chat completions URL (default: $OPENROUTER_API_URL or OpenRouter)"
)
TIMEOUT_OPTION = typer.Option(
    None,
    "--timeout",
    "-t",
    help="Seconds before a request is abandoned (default: wait indefinitely)"
)


def _print_result(result: DispatchResult) -> None:
    """Print a relay result the way the terminal client reports it."""
    if not isinstance(result, DispatchFailure):
        console.print(f"[bold green]LLM:[/bold green] {escape(result.message.content)}\n")
        return

    console.print(f"[red]{escape(result.reason)}[/red]")
    if result.detail:
        label = "Raw response" if result.kind == FailureKind.DECODE else "Error details"
        console.print(f"[dim]{label}: {escape(result.detail)}[/dim]")
    console.print()


def _wait_for_reply(session: ChatSession) -> list[DispatchResult]:
    with console.status("[dim]Waiting for response...[/dim]", spinner="dots"):
        return session.wait()


@app.command()
def chat(
    model: str | None = MODEL_OPTION,
    url: str | None = URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Diagnostics printed to stderr: debug, info, warning, or error"
    ),
):
    """Interactive line-based chat in the terminal."""
    config = get_config(console, model=model, api_url=url, timeout=timeout)
    session, dispatcher = get_session(config)
    dispatcher.set_debug_callback(ConsoleDebugPrinter(err_console, log_level))

    console.print("[bold cyan]Chat with the LLM.[/bold cyan] Type your message and press Enter.")
    console.print(f"[dim]Model: {escape(config.model)}. Type 'quit' to exit.[/dim]\n")

    try:
        while True:
            try:
                user_input = console.input("[bold yellow]>[/bold yellow] ")
                text = user_input.strip()

                if text.lower() in EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break

                if not text:
                    continue

                session.poll()
                if not session.submit(text):
                    continue

                for result in _wait_for_reply(session):
                    _print_result(result)

            except KeyboardInterrupt:
                console.print("\n[dim]Goodbye![/dim]")
                break
            except EOFError:
                console.print("\n[dim]Goodbye![/dim]")
                break
    finally:
        session.close()


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Message to send"),
    model: str | None = MODEL_OPTION,
    url: str | None = URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Diagnostics printed to stderr: debug, info, warning, or error"
    ),
):
    """Send a single message and print the reply."""
    config = get_config(console, model=model, api_url=url, timeout=timeout)
    session, dispatcher = get_session(config)
    dispatcher.set_debug_callback(ConsoleDebugPrinter(err_console, log_level))

    if not session.submit(prompt):
        console.print("[red]Error: message is empty[/red]")
        raise typer.Exit(code=1)

    try:
        results = _wait_for_reply(session)
    finally:
        session.close()

    for result in results:
        _print_result(result)
    if session.last_failure is not None:
        raise typer.Exit(code=1)


@app.command(name="tui")
def tui_command(
    model: str | None = MODEL_OPTION,
    url: str | None = URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
    theme: str = typer.Option(
        "dark",
        "--theme",
        help="Color theme: dark or light"
    ),
):
    """Launch interactive TUI chat interface."""
    config = get_config(console, model=model, api_url=url, timeout=timeout)

    async def _tui():
        from ..ui import run_textual_tui

        session, dispatcher = get_session(config)
        try:
            await run_textual_tui(
                session=session,
                dispatcher=dispatcher,
                log_level=log_level,
                theme_name=theme,
            )
        finally:
            session.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def health():
    """Show which configuration values are set."""
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=20)
    table.add_column("Value")

    api_key = os.getenv("OPENROUTER_API_KEY")
    table.add_row(
        "OPENROUTER_API_KEY",
        "[green]SET[/green]" if api_key else "[red]NOT SET[/red]"
    )
    table.add_row("OPENROUTER_API_URL", escape(os.getenv("OPENROUTER_API_URL") or f"{DEFAULT_API_URL} (default)"))
    table.add_row("OPENROUTER_MODEL", escape(os.getenv("OPENROUTER_MODEL") or f"{DEFAULT_MODEL} (default)"))
    for name in ("HTTP_REFERER", "X_TITLE"):
        value = os.getenv(name)
        table.add_row(name, escape(value) if value else "[dim]-[/dim]")

    console.print(table)

    if not api_key:
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
