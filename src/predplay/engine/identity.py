"""Identity: a current-user-id provider, not a security model."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Protocol

import structlog
from pydantic import TypeAdapter

from predplay.engine.signals import EngineSignals
from predplay.errors import PersistenceUnavailable
from predplay.models import UserProfile
from predplay.storage.kv import KeyValueStore
from predplay.storage.records import dump_record, read_record, write_records

if TYPE_CHECKING:
    from predplay.engine.ledger import PointsLedger

log = structlog.get_logger(__name__)

GUEST_USER_ID = "guest"
USER_KEY = "auth.user"
_PROFILE = TypeAdapter(UserProfile)


class IdentityProvider(Protocol):
    def current_user_id(self) -> str: ...


class StaticIdentity:
    def __init__(self, user_id: str = GUEST_USER_ID) -> None:
        self.user_id = user_id

    def current_user_id(self) -> str:
        return self.user_id


class LocalAuth:
    """Single local profile persisted under auth.user; falls back to guest."""

    def __init__(self, store: KeyValueStore, signals: EngineSignals) -> None:
        self.store = store
        self.signals = signals
        self._user: UserProfile | None = read_record(store, USER_KEY, _PROFILE)

    @property
    def current_user(self) -> UserProfile | None:
        return self._user

    def current_user_id(self) -> str:
        return self._user.user_id if self._user else GUEST_USER_ID

    def sign_in(self, display_name: str, ledger: PointsLedger) -> UserProfile:
        name = display_name.strip()
        if not name:
            raise ValueError("display name must not be empty")
        profile = UserProfile(user_id=str(uuid.uuid4()), display_name=name, total_points=ledger.balance())
        self._user = profile
        write_records(self.store, {USER_KEY: dump_record(_PROFILE, profile)})
        log.info("signed_in", user_id=profile.user_id, display_name=name)
        self.signals.predictions_changed.emit()
        return profile

    def sign_out(self) -> None:
        self._user = None
        try:
            self.store.delete(USER_KEY)
        except PersistenceUnavailable as e:
            log.warning("persistence_write_dropped", keys=[USER_KEY], error=str(e))
        log.info("signed_out")
