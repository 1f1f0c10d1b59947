"""FastAPI backend for the game client (feed, predictions, points, tournaments, profile)."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from predplay.api.schemas import (
    ErrorResponse,
    EventItem,
    EventsResponse,
    HealthResponse,
    JoinResponse,
    LeaderboardResponse,
    PointsResponse,
    PredictionRequest,
    PredictionsResponse,
    ProfileResponse,
    SignInRequest,
    TournamentItem,
    TournamentsResponse,
)
from predplay.config import get_settings
from predplay.engine.game import GameEngine
from predplay.engine.leaderboard import Leaderboard
from predplay.engine.ticker import run_ticker
from predplay.errors import LockedEvent, UnknownEvent, UnknownTournament
from predplay.models import Prediction
from predplay.storage.db import get_connection, init_schema
from predplay.storage.kv import DuckDBKeyValueStore

log = structlog.get_logger(__name__)

# Set by run_api() so the lifespan picks the same config as the CLI.
_config_profile: str | None = None
_config_dir: Path | None = None


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _engine(request: Request) -> GameEngine:
    return request.app.state.engine


def create_app(
    engine: GameEngine | None = None,
    *,
    run_ticker_task: bool = True,
    leaderboard: Leaderboard | None = None,
) -> FastAPI:
    """Build the app. With no engine, the lifespan opens the configured DuckDB file."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings(_config_profile, _config_dir)
        conn = None
        if engine is None:
            conn = get_connection(settings.db_path)
            init_schema(conn)
            app.state.engine = GameEngine.from_settings(DuckDBKeyValueStore(conn), settings)
        else:
            app.state.engine = engine
        board = leaderboard or Leaderboard(app.state.engine.rng)
        board.load()
        app.state.leaderboard = board
        app.state.engine.schedule.fetch_active_events()

        ticker_task = None
        ticker_stop = None
        if run_ticker_task:
            ticker_stop = asyncio.Event()
            ticker_task = asyncio.create_task(
                run_ticker(
                    app.state.engine,
                    settings.tick_interval_sec,
                    ticker_stop,
                    leaderboard=board,
                    leaderboard_interval_sec=settings.leaderboard_interval_sec,
                )
            )

        yield

        if ticker_task is not None and ticker_stop is not None:
            ticker_stop.set()
            await ticker_task
        if conn is not None:
            conn.close()

    app = FastAPI(title="PredPlay API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(LockedEvent)
    async def _locked(request: Request, exc: LockedEvent) -> JSONResponse:
        return _error_json("event_locked", str(exc), status_code=409)

    @app.exception_handler(UnknownEvent)
    async def _unknown_event(request: Request, exc: UnknownEvent) -> JSONResponse:
        return _error_json("not_found", str(exc))

    @app.exception_handler(UnknownTournament)
    async def _unknown_tournament(request: Request, exc: UnknownTournament) -> JSONResponse:
        return _error_json("not_found", str(exc))

    # Handlers are async so they share the event loop thread with the ticker.

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/events", response_model=EventsResponse)
    async def events_feed(request: Request) -> EventsResponse:
        """Active pool with lock state and the current user's predictions."""
        eng = _engine(request)
        now = eng.clock.now()
        mine = eng.predictions.by_event(eng.current_user_id())
        items = []
        for e in eng.events():
            p = mine.get(e.event_id)
            items.append(
                EventItem(
                    event_id=e.event_id,
                    sport=e.sport,
                    home_team=e.home_team,
                    away_team=e.away_team,
                    start_time=e.start_time,
                    locked=e.is_locked(now),
                    seconds_to_start=max(0.0, (e.start_time - now).total_seconds()),
                    outcome=e.outcome,
                    my_prediction=p.outcome if p else None,
                    my_prediction_correct=p.is_correct if p else None,
                )
            )
        return EventsResponse(events=items, total=len(items))

    @app.post(
        "/events/{event_id}/prediction",
        response_model=Prediction,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    )
    async def submit_prediction(event_id: str, body: PredictionRequest, request: Request) -> Prediction:
        return _engine(request).predict(event_id, body.outcome)

    @app.get("/predictions", response_model=PredictionsResponse)
    async def predictions_list(request: Request) -> PredictionsResponse:
        eng = _engine(request)
        items = eng.predictions.list(eng.current_user_id())
        return PredictionsResponse(predictions=items, total=len(items))

    @app.get("/points", response_model=PointsResponse)
    async def points(request: Request) -> PointsResponse:
        eng = _engine(request)
        return PointsResponse(user_id=eng.current_user_id(), balance=eng.ledger.balance())

    @app.get("/tournaments", response_model=TournamentsResponse)
    async def tournaments_list(request: Request) -> TournamentsResponse:
        eng = _engine(request)
        user_id = eng.current_user_id()
        items = []
        for t in eng.tournaments.tournaments:
            entry = eng.tournaments.entry(t.tournament_id, user_id)
            items.append(
                TournamentItem(
                    **t.model_dump(),
                    joined=entry is not None,
                    ends_at=entry.ends_at if entry else None,
                    seconds_remaining=eng.tournaments.time_remaining(t.tournament_id, user_id),
                    result=entry.result if entry else None,
                )
            )
        return TournamentsResponse(tournaments=items, next_reset_at=eng.tournaments.next_reset_at)

    @app.post(
        "/tournaments/{tournament_id}/join",
        response_model=JoinResponse,
        responses={404: {"model": ErrorResponse}},
    )
    async def tournament_join(tournament_id: str, request: Request) -> JoinResponse:
        eng = _engine(request)
        already = eng.tournaments.is_joined(tournament_id, eng.current_user_id())
        joined = eng.join_tournament(tournament_id)
        code = None
        if not joined:
            code = "already_joined" if already else "insufficient_points"
        return JoinResponse(joined=joined, balance=eng.ledger.balance(), code=code)

    @app.get("/profile", response_model=ProfileResponse)
    async def profile(request: Request) -> ProfileResponse:
        eng = _engine(request)
        return ProfileResponse(
            user_id=eng.current_user_id(),
            profile=eng.auth.current_user,
            balance=eng.ledger.balance(),
            stats=eng.user_stats(),
        )

    @app.post("/profile/sign-in", response_model=ProfileResponse)
    async def sign_in(body: SignInRequest, request: Request) -> ProfileResponse:
        eng = _engine(request)
        try:
            eng.auth.sign_in(body.display_name, eng.ledger)
        except ValueError as e:
            return _error_json("invalid_display_name", str(e), status_code=422)
        return await profile(request)

    @app.post("/profile/sign-out", response_model=ProfileResponse)
    async def sign_out(request: Request) -> ProfileResponse:
        _engine(request).auth.sign_out()
        return await profile(request)

    @app.get("/leaderboard", response_model=LeaderboardResponse)
    async def leaderboard_list(request: Request) -> LeaderboardResponse:
        return LeaderboardResponse(entries=request.app.state.leaderboard.entries)

    return app


app = create_app()


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> None:
    global _config_profile, _config_dir
    _config_profile = profile
    _config_dir = config_dir
    import uvicorn

    uvicorn.run("predplay.api.main:app", host=host, port=port, reload=False)
