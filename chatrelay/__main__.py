"""CLI entry point for chatrelay.

Usage:
    python -m chatrelay "Your message here"
    python -m chatrelay                     # interactive REPL
    python -m chatrelay --user alice "Hi"
    python -m chatrelay --config /path/to/chatrelay.yaml
    python -m chatrelay --api               # serve the HTTP API
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from chatrelay import __app_name__, __version__
from chatrelay.ai.provider_factory import create_provider
from chatrelay.core.config import RelayConfig, load_config
from chatrelay.core.errors import ChatFailure
from chatrelay.core.logging import setup_logging
from chatrelay.core.orchestrator import SessionOrchestrator
from chatrelay.memory.history_store import HistoryStore

console = Console()


def _print_banner(user_id: str) -> None:
    console.print(
        Panel(
            f"[bold green]{__app_name__} v{__version__}[/bold green] - chatting as "
            f"[bold]{user_id}[/bold]\n"
            "[dim]Type '/clear' to reset the conversation, 'exit' or 'quit' to leave.[/dim]",
            border_style="cyan",
        )
    )


async def _run_single(
    orchestrator: SessionOrchestrator, message: str, user_id: str | None
) -> None:
    """Send a single message and print the reply."""
    with console.status("[bold cyan]Thinking…[/bold cyan]", spinner="dots"):
        result = await orchestrator.handle_chat(user_id, message)

    console.print()
    if isinstance(result, ChatFailure):
        console.print(
            Panel(
                Text(result.message, style="red"),
                title=f"[dim]{result.kind.value}[/dim]",
                border_style="red",
            )
        )
        return
    console.print(
        Panel(
            Text(result.reply, style="green"),
            title=f"[dim]user: {result.user_id} | history: {result.history_count}[/dim]",
            border_style="green",
        )
    )


async def _repl(orchestrator: SessionOrchestrator, user_id: str | None) -> None:
    """Interactive REPL mode."""
    user_id = orchestrator.resolve_user_id(user_id)
    _print_banner(user_id)

    while True:
        try:
            user_input = console.input("[bold cyan]You:[/bold cyan] ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\n[dim]Goodbye![/dim]")
            break

        if not user_input:
            continue

        if user_input.lower() in {"exit", "quit"}:
            console.print("[dim]Goodbye![/dim]")
            break

        if user_input == "/clear":
            result = orchestrator.clear_history(user_id)
            console.print(f"[dim]{result.message}[/dim]")
            continue

        await _run_single(orchestrator, user_input, user_id)


def _serve(config: RelayConfig) -> None:
    try:
        import uvicorn  # type: ignore[import]
    except ImportError:
        console.print("[red]uvicorn is not installed. Run: pip install uvicorn[standard][/red]")
        sys.exit(1)

    from chatrelay.api.main import create_app

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.system.log_level.lower(),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatrelay",
        description=f"{__app_name__} - stateful chat proxy for LLM completion services",
    )
    parser.add_argument("message", nargs="?", help="Message to send (optional; omit for REPL)")
    parser.add_argument("--user", metavar="USER_ID", help="User id whose history to use")
    parser.add_argument("--config", metavar="PATH", help="Path to chatrelay.yaml")
    parser.add_argument("--api", action="store_true", help="Start the HTTP API server")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging("DEBUG" if config.system.debug else config.system.log_level)

    if args.api:
        _serve(config)
        return

    orchestrator = SessionOrchestrator(
        store=HistoryStore(),
        provider=create_provider(config.upstream),
        config=config,
    )

    async def _run() -> None:
        try:
            if args.message:
                await _run_single(orchestrator, args.message, args.user)
            else:
                await _repl(orchestrator, args.user)
        finally:
            await orchestrator.provider.aclose()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted. Goodbye![/dim]")
        sys.exit(0)


if __name__ == "__main__":
    main()
