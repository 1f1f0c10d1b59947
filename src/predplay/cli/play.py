"""Play subcommand: tick, run."""

from __future__ import annotations

import asyncio
import signal
import sys

import typer

from predplay.cli.common import open_engine
from predplay.engine.ticker import run_ticker

app = typer.Typer(help="Drive the game clock")


@app.command("tick")
def tick(ctx: typer.Context) -> None:
    """Run one maintenance pass (schedule upkeep, resolution, tournaments)."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        report = engine.tick()
        typer.echo(f"Events: {report.event_count}  Resolved: {len(report.resolution.resolved_event_ids)}")
        typer.echo(f"Points awarded: {report.resolution.points_awarded}  Tournaments settled: {len(report.settled_tournaments)}")
        typer.echo(f"Balance: {engine.ledger.balance()}")


@app.command("run")
def run(
    ctx: typer.Context,
    interval: float = typer.Option(None, "--interval", "-i", help="Tick interval in seconds (overrides config)"),
) -> None:
    """Tick continuously until interrupted."""
    settings = ctx.obj["settings"]
    interval_sec = interval if interval is not None else settings.tick_interval_sec
    stop_event = asyncio.Event()

    def shutdown() -> None:
        stop_event.set()

    with open_engine(settings) as engine:
        loop = asyncio.new_event_loop()
        if sys.platform != "win32":
            loop.add_signal_handler(signal.SIGINT, shutdown)
            loop.add_signal_handler(signal.SIGTERM, shutdown)
        try:
            typer.echo("Ticking (Ctrl+C to stop)...")
            ticks = loop.run_until_complete(run_ticker(engine, interval_sec, stop_event))
        except KeyboardInterrupt:
            ticks = None
        finally:
            loop.close()
        typer.echo(f"Stopped after {ticks if ticks is not None else '?'} ticks. Balance: {engine.ledger.balance()}")
