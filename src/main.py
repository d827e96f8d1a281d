"""Entry point for the codebase health engine."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.api.server import CONFIG_FILE, HISTORY_FILE, NOTIFICATIONS_FILE
from src.config import settings
from src.health.history import HistoryStore
from src.health.layout import ProjectLayout
from src.health.models import HealthCheckResult
from src.health.notifications import NotificationEngine
from src.health.runner import HealthRunner

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

_STATUS_STYLE = {"pass": "green", "warn": "yellow", "fail": "red"}


def _stores() -> tuple[HistoryStore, NotificationEngine]:
    data_dir = Path(settings.health_data_dir)
    history = HistoryStore(data_dir / HISTORY_FILE, retention_days=settings.health_history_days)
    engine = NotificationEngine(
        data_dir / NOTIFICATIONS_FILE,
        data_dir / CONFIG_FILE,
        max_notifications=settings.health_max_notifications,
    )
    return history, engine


def render_result(result: HealthCheckResult) -> None:
    table = Table(title="Health checks")
    table.add_column("ID", style="dim")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Details")

    for check in result.checks:
        style = _STATUS_STYLE[check.status.value]
        status = check.status.value if check.implemented else f"{check.status.value} (stub)"
        table.add_row(check.id, check.name, f"[{style}]{status}[/{style}]", str(check.score), check.details)

    console.print(table)
    console.print(f"\n[bold]Overall score:[/bold] {result.overall_score}  [dim]{result.timestamp}[/dim]")


def run_server() -> None:
    """Start the FastAPI server."""
    console.print(Panel("Starting Health Engine API Server", style="bold green"))
    uvicorn.run(
        "src.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


def run_checks(root: str | None, save: bool, verbose: bool) -> None:
    """Run all checks once from the CLI."""
    layout = ProjectLayout.from_settings() if root is None else ProjectLayout.for_root(
        root,
        source_dir=settings.health_source_dir,
        public_dir=settings.health_public_dir,
        components_dir=settings.health_components_dir,
        manifest_file=settings.health_manifest_file,
    )
    console.print(Panel(f"Scanning {layout.source_dir}", title="Health", style="bold blue"))

    runner = HealthRunner(layout, max_workers=settings.health_max_workers, timeout=settings.health_check_timeout)
    try:
        with console.status("[bold green]Running checks..."):
            result = asyncio.run(runner.run())
    finally:
        runner.close()

    render_result(result)
    if verbose:
        for check in result.checks:
            if check.expanded:
                console.print(Panel(check.expanded, title=check.name, style="dim"))

    if save:
        history, engine = _stores()
        previous = history.latest_score(days=1)
        history.save(result.overall_score)
        created = engine.check_and_notify(result.checks, result.overall_score, previous)
        console.print(f"[dim]Saved score; {len(created)} notification(s) created[/dim]")


def show_history(days: int) -> None:
    history, _ = _stores()
    points = history.get_recent(days)
    if not points:
        console.print("[dim]No history recorded yet[/dim]")
        return
    table = Table(title=f"Health history (last {days} days)")
    table.add_column("Date")
    table.add_column("Score", justify="right")
    for p in points:
        table.add_row(p.date, str(p.score))
    console.print(table)


def show_notifications(mark_all_read: bool) -> None:
    _, engine = _stores()
    if mark_all_read:
        changed = engine.mark_all_as_read()
        console.print(f"Marked {changed} notification(s) as read")
        return
    notifications = engine.load()
    console.print(f"[bold]{engine.get_unread_count()} unread[/bold] of {len(notifications)}")
    for n in notifications:
        marker = " " if n.read else "[bold cyan]•[/bold cyan]"
        console.print(f"{marker} [dim]{n.timestamp}[/dim] {n.title} - {n.message}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Codebase Health Engine")
    sub = parser.add_subparsers(dest="command")

    # Server mode
    sub.add_parser("serve", help="Start the API server")

    # One-shot run
    run_parser = sub.add_parser("run", help="Run all health checks")
    run_parser.add_argument("--root", help="Project root (defaults to HEALTH_PROJECT_ROOT)")
    run_parser.add_argument("--save", action="store_true", help="Persist score and raise notifications")
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Show expanded findings")

    history_parser = sub.add_parser("history", help="Show recorded daily scores")
    history_parser.add_argument("--days", type=int, default=30)

    notif_parser = sub.add_parser("notifications", help="Show the notification inbox")
    notif_parser.add_argument("--mark-all-read", action="store_true")

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "run":
        run_checks(args.root, args.save, args.verbose)
    elif args.command == "history":
        show_history(args.days)
    elif args.command == "notifications":
        show_notifications(args.mark_all_read)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
