"""Events subcommand: list, predict."""

from __future__ import annotations

import typer

from predplay.cli.common import format_remaining, open_engine
from predplay.errors import PredictionRejected
from predplay.models import PredictionOutcome

app = typer.Typer(help="Event feed and predictions")


@app.command("list")
def list_events(ctx: typer.Context) -> None:
    """Show the active event pool with lock state and your predictions."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        engine.tick()
        now = engine.clock.now()
        mine = engine.predictions.by_event(engine.current_user_id())
        events = engine.schedule.events
        for e in events:
            status = "Locked" if e.is_locked(now) else format_remaining((e.start_time - now).total_seconds())
            p = mine.get(e.event_id)
            pick = p.outcome.title if p else "-"
            typer.echo(
                f"  {e.event_id[:8]}  {e.sport.value.capitalize():<10}  {e.home_team} vs {e.away_team:<18}  {status:>8}  pick: {pick}"
            )
        typer.echo(f"Total: {len(events)} events  Points: {engine.ledger.balance()}")


@app.command("predict")
def predict(
    ctx: typer.Context,
    event_id: str = typer.Argument(..., help="Event ID (or unique prefix)"),
    outcome: PredictionOutcome = typer.Argument(..., help="home_win, draw or away_win"),
) -> None:
    """Submit or replace your prediction for an event that has not started."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        engine.tick()
        matches = [e for e in engine.schedule.events if e.event_id.startswith(event_id)]
        if len(matches) > 1:
            typer.echo(f"Ambiguous event ID prefix: {event_id}")
            raise typer.Exit(1)
        target = matches[0].event_id if matches else event_id
        try:
            prediction = engine.predict(target, outcome)
        except PredictionRejected as e:
            typer.echo(str(e))
            raise typer.Exit(1)
        typer.echo(f"Predicted {prediction.outcome.title} for {prediction.event_id[:8]}")
