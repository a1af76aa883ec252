"""
predictarb CLI entry point.

Usage:
    # Evaluate the current snapshot once
    python -m predictarb.cli.main --once

    # Keep polling on the configured interval
    python -m predictarb.cli.main --watch

    # Show effective configuration
    python -m predictarb.cli.main --status
"""

import signal
import sys
import time
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from predictarb.arb.engine import ArbEngine
from predictarb.core.config import (
    RANKABLE_FIELDS,
    get_settings,
    load_analyzer_config,
    load_yaml_config,
)
from predictarb.core.errors import PredictArbError
from predictarb.core.http import get_http_client
from predictarb.core.logging import setup_logging, get_logger
from predictarb.domain.models import CycleReport
from predictarb.domain.priority import Priority
from predictarb.providers.base import ProviderStatus
from predictarb.providers.predictit import PredictItProvider
from predictarb.services.scheduler import create_scheduler_service

console = Console()
logger = get_logger("cli")

PRIORITY_STYLES = {
    Priority.HELD: "blue",
    Priority.ARBITRAGE: "bold green",
    Priority.LIQUIDATE_NOW: "bold magenta",
    Priority.POSITIVE_EXPECTATION: "yellow",
    Priority.NONE: "white",
}

HEALTH_STYLES = {
    ProviderStatus.HEALTHY: "green",
    ProviderStatus.DEGRADED: "yellow",
    ProviderStatus.UNAVAILABLE: "red",
}

DEFAULT_ALERT_BEEPS = 6


def _fmt_pct(value: Optional[float]) -> str:
    return "" if value is None else f"{value:+.2f}%"


def _fmt_cents(prices) -> str:
    return "" if prices is None else " ".join(f"{p}¢" for p in prices)


def display_report(report: CycleReport) -> None:
    """Display a ranked cycle report in the terminal."""
    table = Table(title=f"{report.run_id} | sorted by {report.sort_field}")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Market")
    table.add_column("Buy No", style="cyan")
    table.add_column("Guaranteed", justify="right")
    table.add_column("Expected", justify="right")
    table.add_column("Sell adv.", justify="right")
    table.add_column("Sell No", style="cyan")
    table.add_column("Buy by")
    table.add_column("Priority")

    for entry in report.results:
        result = entry.result
        style = PRIORITY_STYLES.get(entry.priority, "white")
        if result.worth_purchasing_by is not None:
            buy_by = result.worth_purchasing_by.isoformat()
        elif result.breakeven_error:
            buy_by = "[red]n/a[/red]"
        else:
            buy_by = ""

        table.add_row(
            str(result.market_id),
            escape(result.market_name),
            _fmt_cents(result.current_buy_no_prices_cents),
            _fmt_pct(result.guaranteed_profit_pct),
            _fmt_pct(result.expected_profit_pct),
            _fmt_pct(result.sell_shares_advantage_pct),
            _fmt_cents(result.current_sell_no_prices_cents),
            buy_by,
            entry.priority.value,
            style=style,
        )

    console.print(table)
    console.print(
        f"{report.markets_seen} markets seen, "
        f"{len(report.results)} with a guaranteed profit signal"
    )

    if report.errors:
        console.print("[bold yellow]Errors[/bold yellow]")
        for error in report.errors:
            console.print(f"  ⚠️ [{error.get('market_id')}] {error.get('message')}")

    if report.alert:
        console.print("[bold red]ALERT: opportunity above threshold[/bold red]")


def play_alert(beeps: int = DEFAULT_ALERT_BEEPS) -> None:
    """Ring the terminal bell once per second."""
    for _ in range(beeps):
        console.bell()
        time.sleep(1)


def _scheduler_config() -> dict:
    try:
        return load_yaml_config().get("scheduler", {})
    except FileNotFoundError:
        return {}


def run_cycle_once(engine: ArbEngine, sort_field: Optional[str] = None) -> Optional[CycleReport]:
    """
    Execute one fetch-evaluate-present cycle.

    Fetch failures are logged and skipped; the next cycle tries again.
    """
    try:
        report = engine.run_cycle(sort_field=sort_field)
    except PredictArbError as e:
        logger.error(f"Cycle failed: {e.message}", extra={"error": e.to_dict()})
        return None

    display_report(report)
    if report.alert:
        play_alert(_scheduler_config().get("alert_beeps", DEFAULT_ALERT_BEEPS))
    return report


@click.command()
@click.option("--once", is_flag=True, help="Evaluate the current snapshot and exit")
@click.option("--watch", is_flag=True, help="Keep polling on the configured interval")
@click.option("--status", is_flag=True, help="Show effective configuration")
@click.option(
    "--sort",
    "sort_field",
    type=click.Choice(RANKABLE_FIELDS),
    default=None,
    help="Ranking field (default from config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(once: bool, watch: bool, status: bool, sort_field: Optional[str], verbose: bool) -> None:
    """predictarb - PredictIt arbitrage and expected value scanner"""

    log_level = "DEBUG" if verbose else None
    setup_logging(log_level=log_level)

    if status:
        show_status()
        return

    if once or watch:
        try:
            engine = ArbEngine()
        except PredictArbError as e:
            console.print(f"[red]{e.message}[/red]")
            sys.exit(1)

        if once:
            try:
                report = run_cycle_once(engine, sort_field)
            finally:
                get_http_client().close()
            sys.exit(0 if report is not None else 1)

        run_watch(engine, sort_field)
        return

    ctx = click.get_current_context()
    click.echo(ctx.get_help())


def show_status() -> None:
    """Show effective configuration."""
    settings = get_settings()
    try:
        config = load_analyzer_config()
    except PredictArbError as e:
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)

    console.print("\n[bold]predictarb status[/bold]\n")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Environment", settings.predictarb_env)
    table.add_row("Timezone", settings.timezone)
    table.add_row("Log Level", settings.log_level)
    table.add_row("Snapshot URL", settings.predictit_api_url)
    table.add_row("Snapshot cache TTL", f"{settings.cache_ttl}s")
    console.print(table)
    console.print()

    table = Table(title="Analyzer")
    table.add_column("Rule", style="cyan")
    table.add_column("Value")

    table.add_row(
        "Fully invested markets",
        ", ".join(str(m) for m in sorted(config.fully_invested_market_ids)) or "-",
    )
    table.add_row("Annual return rate", f"{config.annual_return_rate:.0%}")
    table.add_row("Default sort field", config.default_sort_field)
    table.add_row("Alert threshold", f"{config.alert_threshold}")
    table.add_row("Priority threshold", f"{config.priority_threshold}")
    table.add_row("Fee factor", f"{config.fee_factor}")
    console.print(table)
    console.print()

    try:
        health = PredictItProvider().healthcheck()
    finally:
        get_http_client().close()
    style = HEALTH_STYLES[health.status]
    latency = f" ({health.latency_ms:.0f}ms)" if health.latency_ms is not None else ""
    console.print(
        f"PredictIt feed: [{style}]{health.status.value}[/{style}] "
        f"{escape(health.message)}{latency}"
    )

    scheduler_config = _scheduler_config()
    console.print(
        f"\nPolling every {scheduler_config.get('poll_interval_seconds', 60)}s "
        f"± {scheduler_config.get('poll_jitter_seconds', 10)}s"
    )


def run_watch(engine: ArbEngine, sort_field: Optional[str] = None) -> None:
    """Run evaluation cycles on the scheduler until interrupted."""
    console.print("[bold]Starting predictarb watcher...[/bold]")
    console.print("Press Ctrl+C to stop\n")

    scheduler = create_scheduler_service()
    scheduler.setup_from_config(lambda: run_cycle_once(engine, sort_field))
    scheduler.start()

    jobs = scheduler.get_jobs()
    if jobs:
        table = Table(title="Scheduled Jobs")
        table.add_column("Job", style="cyan")
        table.add_column("Next Run")
        for job in jobs:
            table.add_row(job["name"], job["next_run"] or "N/A")
        console.print(table)

    def shutdown(signum, frame):
        console.print("\n[yellow]Shutting down...[/yellow]")
        scheduler.stop()
        get_http_client().close()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        while True:
            signal.pause()
    except AttributeError:
        # Windows doesn't have signal.pause
        while True:
            time.sleep(1)


if __name__ == "__main__":
    main()
