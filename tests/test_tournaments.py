"""Tournament engine: entry debit, countdown, single draw, daily reset."""

from datetime import timedelta

import pytest

from conftest import T0, ScriptedRandom
from predplay.engine.clock import next_local_midnight
from predplay.engine.ledger import PointsLedger
from predplay.engine.signals import EngineSignals
from predplay.engine.tournaments import (
    DEFAULT_TOURNAMENTS,
    TOURNAMENTS_KEY,
    TournamentEngine,
    parse_tournament_pool,
)
from predplay.errors import UnknownTournament
from predplay.models import TournamentResult


def _setup(store, clock, balance=0, draws=()):
    ledger = PointsLedger(store, EngineSignals())
    ledger.credit(balance)
    return TournamentEngine(store, clock, ledger, ScriptedRandom(draws)), ledger


def test_join_without_points_fails(store, clock):
    engine, ledger = _setup(store, clock, balance=0)
    assert engine.join("t1", "u1") is False
    assert ledger.balance() == 0
    assert engine.is_joined("t1", "u1") is False
    assert engine.time_remaining("t1", "u1") is None


def test_join_win_credits_reward(store, clock):
    engine, ledger = _setup(store, clock, balance=100, draws=[True])
    assert engine.join("t1", "u1") is True
    assert ledger.balance() == 80
    entry = engine.entry("t1", "u1")
    assert entry.ends_at == T0 + timedelta(seconds=180)
    assert entry.result is None
    assert engine.time_remaining("t1", "u1") == 180

    clock.advance(seconds=179)
    assert engine.settle() == []
    clock.advance(seconds=1)
    settled = engine.settle()
    assert [e.result for e in settled] == [TournamentResult.WON]
    assert ledger.balance() == 80 + 60
    assert engine.time_remaining("t1", "u1") == 0


def test_join_loss_keeps_balance(store, clock):
    engine, ledger = _setup(store, clock, balance=100, draws=[False])
    engine.join("t1", "u1")
    clock.advance(minutes=5)
    engine.settle()
    assert engine.entry("t1", "u1").result == TournamentResult.LOST
    assert ledger.balance() == 80


def test_result_drawn_once(store, clock):
    engine, ledger = _setup(store, clock, balance=100, draws=[True, True, True])
    engine.join("t1", "u1")
    clock.advance(minutes=4)
    engine.settle()
    assert engine.settle() == []
    clock.advance(minutes=10)
    assert engine.settle() == []
    assert ledger.balance() == 140


def test_double_join_rejected_without_debit(store, clock):
    engine, ledger = _setup(store, clock, balance=100)
    assert engine.join("t1", "u1") is True
    assert engine.join("t1", "u1") is False
    assert ledger.balance() == 80


def test_unknown_tournament(store, clock):
    engine, _ = _setup(store, clock, balance=100)
    with pytest.raises(UnknownTournament):
        engine.join("t9", "u1")


def test_reset_pool_clears_participation(store, clock):
    engine, ledger = _setup(store, clock, balance=200)
    engine.join("t1", "u1")
    engine.join("t2", "u1")
    engine.reset_pool()
    assert engine.entries() == []
    assert [t.tournament_id for t in engine.tournaments] == ["t1", "t2", "t3"]
    assert engine.join("t1", "u1") is True
    assert ledger.balance() == 200 - 20 - 50 - 20


def test_tick_settles_expired_entries_before_midnight_reset(store, clock):
    engine, ledger = _setup(store, clock, balance=100, draws=[True])
    midnight = next_local_midnight(T0)
    assert engine.next_reset_at == midnight
    # Joined at 23:58, ends 00:01; the first tick after the boundary is at 00:05
    clock.set(midnight - timedelta(minutes=2))
    assert engine.join("t1", "u1") is True
    clock.set(midnight + timedelta(minutes=5))
    settled = engine.tick()
    assert [(e.tournament_id, e.result) for e in settled] == [("t1", TournamentResult.WON)]
    assert ledger.balance() == 80 + 60
    assert engine.entries() == []
    assert engine.next_reset_at == midnight + timedelta(days=1)


def test_tick_reset_clears_running_entries(store, clock):
    engine, ledger = _setup(store, clock, balance=100)
    midnight = next_local_midnight(T0)
    clock.set(midnight - timedelta(seconds=30))
    engine.join("t1", "u1")
    clock.set(midnight)
    assert engine.tick() == []
    assert engine.entries() == []
    assert ledger.balance() == 80


def test_state_survives_restart(store, clock):
    engine, _ = _setup(store, clock, balance=100)
    engine.join("t2", "u1")
    assert store.get(TOURNAMENTS_KEY) is not None
    reloaded, ledger = _setup(store, clock)
    assert reloaded.is_joined("t2", "u1")
    assert reloaded.next_reset_at == engine.next_reset_at
    assert ledger.balance() == 50


def test_parse_tournament_pool():
    pool = parse_tournament_pool(
        [{"tournament_id": "x", "title": "Quick", "entry_cost": 5, "reward": 15, "duration_sec": 30}]
    )
    assert [t.tournament_id for t in pool] == ["x"]
    assert parse_tournament_pool([]) == DEFAULT_TOURNAMENTS
