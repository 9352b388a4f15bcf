"""Entry point: python -m dispatch_relay."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dispatch_relay.config import RelayConfig
from dispatch_relay.errors import ConfigError
from dispatch_relay.logging_config import resolve_level, setup_logging
from dispatch_relay.relay.server import HEALTH_PATH, TRIGGER_PATH, RelayServer

logger = logging.getLogger(__name__)

_console = Console()

_IS_WINDOWS = sys.platform == "win32"


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return f"{secret[:2]}…{secret[-2:]}"


def load_config() -> RelayConfig:
    """Load config from the environment or exit with a readable error."""
    try:
        return RelayConfig.from_env()
    except ConfigError as exc:
        _console.print(
            Panel(
                f"[bold red]{exc}[/bold red]\n\n"
                "Set TRIGGER_SECRET, GH_OWNER, GH_REPO and GH_TOKEN before starting.",
                title="[bold]Configuration[/bold]",
                border_style="red",
                padding=(1, 2),
            ),
        )
        sys.exit(1)


def _config_table(config: RelayConfig) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold green", min_width=16)
    table.add_column()
    table.add_row("Listen", f"http://{config.host}:{config.port}")
    table.add_row("Trigger route", f"POST {TRIGGER_PATH}")
    table.add_row("Health route", f"GET  {HEALTH_PATH}")
    table.add_row("Repository", config.repository)
    table.add_row("Dispatch URL", config.dispatch_url)
    table.add_row("Trigger secret", _mask(config.trigger_secret))
    table.add_row("GitHub token", _mask(config.gh_token))
    table.add_row("Log level", config.log_level.upper())
    return table


async def run_relay(config: RelayConfig) -> None:
    """Serve until the task is cancelled (SIGINT/SIGTERM)."""
    server = RelayServer(config)
    await server.start()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()


def _serve(verbose: bool) -> None:
    config = load_config()
    level = resolve_level(config.log_level)
    setup_logging(level=level, verbose=verbose, log_dir=config.log_dir)

    _console.print(
        Panel(_config_table(config), title="[bold]dispatch-relay[/bold]", border_style="cyan"),
    )

    loop = asyncio.new_event_loop()
    task = loop.create_task(run_relay(config))

    if not _IS_WINDOWS:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, task.cancel)

    try:
        loop.run_until_complete(task)
    except (asyncio.CancelledError, KeyboardInterrupt):
        logger.info("Shutting down...")
    finally:
        loop.close()


def _check() -> None:
    """Validate the environment and print the resolved config without serving."""
    config = load_config()
    _console.print(
        Panel(_config_table(config), title="[bold]Configuration OK[/bold]", border_style="green"),
    )


def _print_usage() -> None:
    _console.print()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold green", min_width=24)
    table.add_column()
    table.add_row("dispatch-relay", "Start the relay server")
    table.add_row("dispatch-relay serve", "Start the relay server")
    table.add_row("dispatch-relay check", "Validate environment configuration")
    table.add_row("dispatch-relay help", "Show this message")
    table.add_row("-v, --verbose", "Verbose logging output")
    _console.print(
        Panel(table, title="[bold]Commands[/bold]", border_style="blue", padding=(1, 0)),
    )
    _console.print()


_COMMANDS = frozenset({"serve", "check", "help"})


def main() -> None:
    """CLI entry point."""
    args = sys.argv[1:]
    positional = [a for a in args if not a.startswith("-")]
    verbose = "--verbose" in args or "-v" in args
    command = positional[0] if positional else "serve"

    if "--help" in args or "-h" in args:
        command = "help"

    if command not in _COMMANDS:
        _console.print(f"[bold red]Unknown command: {command}[/bold red]")
        _print_usage()
        sys.exit(2)

    if command == "help":
        _print_usage()
    elif command == "check":
        _check()
    else:
        _serve(verbose)


if __name__ == "__main__":
    main()
