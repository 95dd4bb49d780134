"""
ParallelID Ownership Ledger

Assigns each credential id exactly one owner and supports enumeration,
transfer and burn. The registry only relies on the OwnershipLedger
interface; InMemoryOwnershipLedger is the process-local implementation.

The ledger does not publish events. The registry emits Transfer after
writing its own record.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List

from .errors import NotFoundError
from .hashing import normalize_address

ZERO_ADDRESS = "0x" + "00" * 20


class OwnershipLedger(ABC):
    """Abstract ownership registry for non-fungible credential ids."""

    @abstractmethod
    def mint_to(self, owner: str) -> int:
        """Allocate the next id and assign it to owner."""
        pass

    @abstractmethod
    def transfer(self, token_id: int, from_address: str, to_address: str) -> None:
        pass

    @abstractmethod
    def burn(self, token_id: int) -> None:
        pass

    @abstractmethod
    def owner_of(self, token_id: int) -> str:
        pass

    @abstractmethod
    def balance_of(self, owner: str) -> int:
        pass

    @abstractmethod
    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        pass

    @abstractmethod
    def total_supply(self) -> int:
        pass


class InMemoryOwnershipLedger(OwnershipLedger):
    """
    Process-local ledger.

    Ids start at 1 and are never reused, even after burn.
    """

    def __init__(self):
        self._owners: Dict[int, str] = {}
        self._owned: Dict[str, List[int]] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def mint_to(self, owner: str) -> int:
        owner = normalize_address(owner)
        if owner == ZERO_ADDRESS:
            raise ValueError("Cannot mint to the zero address")
        with self._lock:
            token_id = self._next_id
            self._next_id += 1
            self._owners[token_id] = owner
            self._owned.setdefault(owner, []).append(token_id)
        return token_id

    def transfer(self, token_id: int, from_address: str, to_address: str) -> None:
        from_address = normalize_address(from_address)
        to_address = normalize_address(to_address)
        if to_address == ZERO_ADDRESS:
            raise ValueError("Cannot transfer to the zero address")
        with self._lock:
            current = self.owner_of(token_id)
            if current != from_address:
                raise ValueError(f"Token {token_id} is not owned by {from_address}")
            self._release(from_address, token_id)
            self._owners[token_id] = to_address
            self._owned.setdefault(to_address, []).append(token_id)

    def burn(self, token_id: int) -> None:
        with self._lock:
            owner = self.owner_of(token_id)
            del self._owners[token_id]
            self._release(owner, token_id)

    def _release(self, owner: str, token_id: int) -> None:
        tokens = self._owned[owner]
        tokens.remove(token_id)
        if not tokens:
            del self._owned[owner]

    def owner_of(self, token_id: int) -> str:
        owner = self._owners.get(token_id)
        if owner is None:
            raise NotFoundError(f"Token {token_id} does not exist")
        return owner

    def balance_of(self, owner: str) -> int:
        return len(self._owned.get(normalize_address(owner), []))

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        tokens = self._owned.get(normalize_address(owner), [])
        if index < 0 or index >= len(tokens):
            raise NotFoundError(f"Owner index {index} out of bounds for {owner}")
        return tokens[index]

    def total_supply(self) -> int:
        return len(self._owners)
