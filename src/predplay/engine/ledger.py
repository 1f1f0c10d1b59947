"""Points ledger: a single non-negative integer balance."""

from __future__ import annotations

import structlog
from pydantic import TypeAdapter

from predplay.engine.signals import EngineSignals
from predplay.storage.kv import KeyValueStore
from predplay.storage.records import dump_record, read_record, write_records

log = structlog.get_logger(__name__)

POINTS_KEY = "points.balance"
_BALANCE = TypeAdapter(int)


class PointsLedger:
    """Credit/debit gate for the local balance. Debits never underflow."""

    def __init__(self, store: KeyValueStore, signals: EngineSignals) -> None:
        self.store = store
        self.signals = signals
        self._balance: int | None = None

    def _load(self) -> int:
        if self._balance is None:
            stored = read_record(self.store, POINTS_KEY, _BALANCE)
            if stored is None or stored < 0:
                stored = 0
            self._balance = stored
        return self._balance

    def _save(self) -> None:
        write_records(self.store, {POINTS_KEY: dump_record(_BALANCE, self._balance)})
        self.signals.predictions_changed.emit()

    def balance(self) -> int:
        return self._load()

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative, got {amount}")
        if amount == 0:
            return
        self._balance = self._load() + amount
        log.info("points_credited", amount=amount, balance=self._balance)
        self._save()

    def debit(self, amount: int) -> bool:
        """Take amount from the balance. False, with no change, if it would go negative."""
        if amount < 0:
            raise ValueError(f"debit amount must be non-negative, got {amount}")
        current = self._load()
        if amount > current:
            log.info("debit_rejected", amount=amount, balance=current)
            return False
        if amount == 0:
            return True
        self._balance = current - amount
        log.info("points_debited", amount=amount, balance=self._balance)
        self._save()
        return True
