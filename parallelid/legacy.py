"""
ParallelMarkets ID: the boolean-trait predecessor registry.

Traits are written with a single set_trait(name, value) call and a
credential is valid for a fixed window after it was minted. Whether it
is still valid is recomputed on every read.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Optional

from . import config
from .events import EventBus, TraitUpdated
from .hashing import normalize_address
from .ledger import OwnershipLedger
from .logging_config import AuditLogger
from .registry import BaseRegistry, Clock
from .traits import TraitStore

DEFAULT_EXPIRY_WINDOW = int(timedelta(days=config.LEGACY_EXPIRY_DAYS).total_seconds())


@dataclass
class IdentityRecord:
    token_id: int
    uri: str
    minted_at: int
    traits: TraitStore = field(default_factory=TraitStore)


class ParallelMarketsIDRegistry(BaseRegistry):
    """Identity tokens carrying boolean traits and a mint-anchored expiry."""

    def __init__(
        self,
        authority: str,
        expiry_window: int = DEFAULT_EXPIRY_WINDOW,
        ledger: Optional[OwnershipLedger] = None,
        events: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
        audit: Optional[AuditLogger] = None
    ):
        super().__init__(authority, ledger=ledger, events=events, clock=clock, audit=audit)
        if expiry_window < 0:
            raise ValueError("Expiry window must not be negative")
        self.expiry_window = expiry_window

    def mint_identity(self, caller: str, to: str, uri: str, traits: Iterable[str]) -> int:
        """Issue a credential with the given traits set. Authority only."""
        with self._lock:
            self._require_authority(caller, "mint_identity")
            if not isinstance(uri, str):
                raise ValueError("uri must be a string")
            store = TraitStore(traits)
            to = normalize_address(to)
            token_id = self.ledger.mint_to(to)
            self._records[token_id] = IdentityRecord(
                token_id=token_id,
                uri=uri,
                minted_at=self.clock(),
                traits=store
            )
        self.audit.credential_issued(token_id, to, "admin", store.list())
        self._announce_issue(token_id, to)
        return token_id

    def set_trait(self, caller: str, token_id: int, name: str, value: bool) -> None:
        """Set or clear a trait. Authority only. Always emits TraitUpdated."""
        with self._lock:
            self._require_authority(caller, "set_trait")
            record = self._record(token_id)
            if value:
                changed = record.traits.add(name)
            else:
                changed = record.traits.remove(name)
        if changed:
            self.audit.trait_changed(token_id, name, bool(value))
        self.events.emit(TraitUpdated(token_id, name, bool(value)))

    def get_trait(self, token_id: int, name: str) -> bool:
        return self._record(token_id).traits.has(name)

    def unexpired(self, token_id: int, now: Optional[int] = None) -> bool:
        return self._now(now) - self._record(token_id).minted_at <= self.expiry_window

    def has_unexpired_trait(self, token_id: int, name: str, now: Optional[int] = None) -> bool:
        """A trait counts only while the credential itself is unexpired."""
        return self.get_trait(token_id, name) and self.unexpired(token_id, now)

    def expires_at(self, token_id: int) -> int:
        return self._record(token_id).minted_at + self.expiry_window
