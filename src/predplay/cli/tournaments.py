"""Tournaments subcommand: list, join, reset."""

from __future__ import annotations

import typer

from predplay.cli.common import format_remaining, open_engine
from predplay.errors import UnknownTournament
from predplay.models import TournamentResult

app = typer.Typer(help="Timed tournaments")


@app.command("list")
def list_tournaments(ctx: typer.Context) -> None:
    """Show the tournament pool and your participation."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        engine.tick()
        user_id = engine.current_user_id()
        now = engine.clock.now()
        for t in engine.tournaments.tournaments:
            entry = engine.tournaments.entry(t.tournament_id, user_id)
            if entry is None:
                status = "open"
            elif entry.result is not None:
                status = "You won!" if entry.result is TournamentResult.WON else "You lost"
            else:
                status = f"ends in {format_remaining(engine.tournaments.time_remaining(t.tournament_id, user_id) or 0)}"
            typer.echo(f"  {t.tournament_id:<4} {t.title:<18} entry {t.entry_cost:>4}  reward {t.reward:>4}  {status}")
        reset_in = (engine.tournaments.next_reset_at - now).total_seconds()
        typer.echo(f"Points: {engine.ledger.balance()}  Reset in {format_remaining(reset_in)}")


@app.command("join")
def join(
    ctx: typer.Context,
    tournament_id: str = typer.Argument(..., help="Tournament ID (e.g. t1)"),
) -> None:
    """Pay the entry cost and join a tournament."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        engine.tick()
        try:
            joined = engine.join_tournament(tournament_id)
        except UnknownTournament as e:
            typer.echo(str(e))
            raise typer.Exit(1)
        if not joined:
            typer.echo(f"Could not join {tournament_id} (already joined or insufficient points).")
            raise typer.Exit(1)
        typer.echo(f"Joined {tournament_id}. Points: {engine.ledger.balance()}")


@app.command("reset")
def reset(ctx: typer.Context) -> None:
    """Clear all tournament participation now."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        engine.tournaments.reset_pool()
        typer.echo("Tournament pool reset.")
