"""
ParallelID notifications.

Operations return their own results; these events are a separate,
optional channel for listeners that want to follow state changes.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Base class for all notifications."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class TraitAdded(Event):
    token_id: int
    trait: str


@dataclass(frozen=True)
class TraitRemoved(Event):
    token_id: int
    trait: str


@dataclass(frozen=True)
class TraitUpdated(Event):
    """Boolean trait write on the predecessor registry."""
    token_id: int
    trait: str
    value: bool


@dataclass(frozen=True)
class SanctionsMatch(Event):
    token_id: int
    jurisdiction: int


@dataclass(frozen=True)
class Issued(Event):
    token_id: int
    owner: str


@dataclass(frozen=True)
class Renewed(Event):
    token_id: int
    last_issued_at: int


@dataclass(frozen=True)
class Transfer(Event):
    from_address: str
    to_address: str
    token_id: int


@dataclass(frozen=True)
class AuthorityTransferred(Event):
    previous_authority: str
    new_authority: str


Listener = Callable[[Event], None]


class EventBus:
    """Synchronous fan-out of events to subscribed listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def subscribe(self, listener: Listener) -> Listener:
        with self._lock:
            self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def emit(self, event: Event) -> None:
        """
        Deliver an event to every listener.

        A listener failure is logged and does not affect the operation
        that produced the event or the remaining listeners.
        """
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s", event.name)
