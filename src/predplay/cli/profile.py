"""Profile subcommand: show, sign-in, sign-out."""

from __future__ import annotations

import typer

from predplay.cli.common import open_engine

app = typer.Typer(help="Local profile and statistics")


@app.command("show")
def show(ctx: typer.Context) -> None:
    """Show current user, points and prediction statistics."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        user = engine.auth.current_user
        stats = engine.user_stats()
        typer.echo(f"User: {user.display_name if user else 'guest'} ({engine.current_user_id()})")
        typer.echo(f"Points: {engine.ledger.balance()}")
        accuracy = f"{stats.accuracy * 100:.0f}%" if stats.wins + stats.losses else "-"
        typer.echo(f"Wins: {stats.wins}  Losses: {stats.losses}  Accuracy: {accuracy}")
        for name in ("day", "week", "month"):
            period = getattr(stats, name)
            typer.echo(f"  {name:<6} {period.correct}/{period.total}")


@app.command("sign-in")
def sign_in(
    ctx: typer.Context,
    display_name: str = typer.Argument(..., help="Display name"),
) -> None:
    """Create a local profile; predictions are keyed by its user ID."""
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        try:
            profile = engine.auth.sign_in(display_name, engine.ledger)
        except ValueError as e:
            typer.echo(str(e))
            raise typer.Exit(1)
        typer.echo(f"Signed in as {profile.display_name} ({profile.user_id})")


@app.command("sign-out")
def sign_out(ctx: typer.Context) -> None:
    settings = ctx.obj["settings"]
    with open_engine(settings) as engine:
        engine.auth.sign_out()
        typer.echo("Signed out.")
