"""Provider factory functions for CLI.

Centralizes creation of the config, dispatcher and session from environment
variables and command-line overrides. Hides configuration details from
command implementations.
"""

from rich.console import Console
from rich.markup import escape

from ..config import ChatConfig
from ..dispatch import CompletionDispatcher
from ..errors import ConfigError
from ..session import ChatSession
from ..ui.config import LogLevel

# Default console for output
_console = Console()

LEVEL_STYLES = {
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}


def get_config(
    console: Console | None = None,
    model: str | None = None,
    api_url: str | None = None,
    timeout: float | None = None,
) -> ChatConfig:
    """Create the client config from environment variables.

    Args:
        console: Optional Rich console for output
        model: Model override (--model)
        api_url: Endpoint URL override (--url)
        timeout: Request timeout override (--timeout)

    Returns:
        ChatConfig instance

    Raises:
        SystemExit: If OPENROUTER_API_KEY is not set or a value is invalid

    Environment variables:
        OPENROUTER_API_KEY: Credential (required)
        OPENROUTER_API_URL: Endpoint URL
        OPENROUTER_MODEL: Model identifier
        HTTP_REFERER: Optional referer header
        X_TITLE: Optional title header
        OPENROUTER_TIMEOUT: Optional request timeout in seconds
    """
    import typer

    con = console or _console
    try:
        return ChatConfig.from_env(model=model, api_url=api_url, request_timeout=timeout)
    except ConfigError as e:
        con.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


class ConsoleDebugPrinter:
    """Debug callback that prints diagnostics to a Rich console.

    Dispatch threads call this directly; Rich consoles serialize writes.
    """

    def __init__(self, console: Console, log_level: str = "warning") -> None:
        self.console = console
        self.threshold = LogLevel.from_string(log_level)

    def __call__(self, level: str, component: str, message: str) -> None:
        numeric = LogLevel.from_string(level)
        if numeric < self.threshold:
            return
        style = LEVEL_STYLES.get(numeric, "white")
        self.console.print(
            f"[{style}]{LogLevel.name(numeric):<7}[/] [bold]\\[{component}][/] {escape(message)}"
        )


def get_session(config: ChatConfig) -> tuple[ChatSession, CompletionDispatcher]:
    """Wire a dispatcher and a fresh session for `config`."""
    dispatcher = CompletionDispatcher(config)
    session = ChatSession(dispatcher, model_id=config.model)
    return session, dispatcher
