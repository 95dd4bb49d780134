"""
ParallelID Credential Registry

The credential state machine: authority minting, signed self-minting,
trait administration, sanctions assertions, renewal and burning. Every
mutating method takes the acting account first, performs all of its
checks before its first write, and holds the registry lock for its
whole duration, so a call either fully applies or raises with nothing
changed.
"""

import copy
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from . import config
from .authorizer import SignedMintAuthorizer
from .credential import CredentialRecord, SubjectType, validate_citizenship
from .errors import NotFoundError, ParallelIDError, UnauthorizedError
from .events import (
    AuthorityTransferred,
    EventBus,
    Issued,
    Renewed,
    SanctionsMatch,
    TraitAdded,
    TraitRemoved,
    Transfer,
)
from .hashing import normalize_address
from .ledger import ZERO_ADDRESS, InMemoryOwnershipLedger, OwnershipLedger
from .logging_config import AuditLogger, audit_log
from .sanctions import SanctionsMonitor
from .signing import MintAuthorization, load_authority_key
from .traits import TraitStore, validate_trait_names
from .util import now_epoch

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


class BaseRegistry:
    """
    Authority, ownership and record bookkeeping shared by the credential
    registries.
    """

    def __init__(
        self,
        authority: str,
        ledger: Optional[OwnershipLedger] = None,
        events: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
        audit: Optional[AuditLogger] = None
    ):
        self._authority = normalize_address(authority)
        self.events = events if events is not None else EventBus()
        self.ledger = ledger if ledger is not None else InMemoryOwnershipLedger()
        self.clock = clock or now_epoch
        self.audit = audit or audit_log
        self._records: Dict[int, Any] = {}
        self._lock = threading.RLock()

    # --------------------------------------------------------
    # Authority
    # --------------------------------------------------------

    @property
    def authority(self) -> str:
        return self._authority

    def _reject(self, operation: str, error: ParallelIDError, caller: Optional[str] = None, **details):
        self.audit.operation_rejected(operation, error.code.value, caller=caller, **details)
        return error

    def _require_authority(self, caller: str, operation: str) -> str:
        caller = normalize_address(caller)
        if caller != self._authority:
            raise self._reject(operation, UnauthorizedError(f"{operation} requires the authority"), caller)
        return caller

    def transfer_authority(self, caller: str, new_authority: str) -> None:
        """Hand the authority role to another account."""
        with self._lock:
            self._require_authority(caller, "transfer_authority")
            new_authority = normalize_address(new_authority)
            previous = self._authority
            self._authority = new_authority
        self.audit.configuration_changed("authority", previous, new_authority, caller)
        self.events.emit(AuthorityTransferred(previous, new_authority))

    # --------------------------------------------------------
    # Records
    # --------------------------------------------------------

    def _now(self, now: Optional[int] = None) -> int:
        return self.clock() if now is None else now

    def _record(self, token_id: int):
        record = self._records.get(token_id)
        if record is None:
            raise NotFoundError(f"Credential {token_id} does not exist")
        return record

    def exists(self, token_id: int) -> bool:
        return token_id in self._records

    def token_uri(self, token_id: int) -> str:
        return self._record(token_id).uri

    def minted_at(self, token_id: int) -> int:
        return self._record(token_id).minted_at

    def traits(self, token_id: int) -> List[str]:
        return self._record(token_id).traits.list()

    # --------------------------------------------------------
    # Ownership
    # --------------------------------------------------------

    def owner_of(self, token_id: int) -> str:
        self._record(token_id)
        return self.ledger.owner_of(token_id)

    def balance_of(self, owner: str) -> int:
        return self.ledger.balance_of(owner)

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        return self.ledger.token_of_owner_by_index(owner, index)

    def tokens_of_owner(self, owner: str) -> List[int]:
        return [self.ledger.token_of_owner_by_index(owner, i) for i in range(self.ledger.balance_of(owner))]

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def _announce_issue(self, token_id: int, owner: str) -> None:
        self.events.emit(Transfer(ZERO_ADDRESS, owner, token_id))
        self.events.emit(Issued(token_id, owner))

    def transfer(self, caller: str, to: str, token_id: int) -> None:
        """Move a credential to another account. Only its owner may do this."""
        with self._lock:
            caller = normalize_address(caller)
            owner = self.owner_of(token_id)
            if caller != owner:
                raise self._reject("transfer", UnauthorizedError("Only the owner may transfer"), caller,
                                   token_id=token_id)
            to = normalize_address(to)
            self.ledger.transfer(token_id, owner, to)
        self.events.emit(Transfer(owner, to, token_id))

    def burn(self, caller: str, token_id: int) -> None:
        """Destroy a credential. Allowed for the authority or the current owner."""
        with self._lock:
            caller = normalize_address(caller)
            owner = self.owner_of(token_id)
            if caller != owner and caller != self._authority:
                raise self._reject("burn", UnauthorizedError("Only the owner or authority may burn"), caller,
                                   token_id=token_id)
            self.ledger.burn(token_id)
            del self._records[token_id]
        self.audit.credential_burned(token_id, caller)
        self.events.emit(Transfer(owner, ZERO_ADDRESS, token_id))


class ParallelIDRegistry(BaseRegistry):
    """
    Identity credentials with subject type, citizenship and sanctions
    monitoring.

    Usage:
        registry = ParallelIDRegistry(authority=authority_key.address)
        token_id = registry.mint(authority_key.address, holder, "https://...",
                                 ["kyc_clear"], SubjectType.INDIVIDUAL, 840)
        registry.is_sanctions_safe_in(token_id, 840)
    """

    def __init__(
        self,
        authority: str,
        registry_address: str = config.REGISTRY_ADDRESS,
        chain_id: int = config.CHAIN_ID,
        mint_cost: int = config.MINT_COST,
        ledger: Optional[OwnershipLedger] = None,
        events: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
        monitor: Optional[SanctionsMonitor] = None,
        audit: Optional[AuditLogger] = None
    ):
        super().__init__(authority, ledger=ledger, events=events, clock=clock, audit=audit)
        if mint_cost < 0:
            raise ValueError("Mint cost must not be negative")
        self.authorizer = SignedMintAuthorizer(registry_address, chain_id)
        self.monitor = monitor or SanctionsMonitor()
        self._mint_cost = mint_cost
        self._balance = 0

    @classmethod
    def from_config(cls, clock: Optional[Clock] = None) -> 'ParallelIDRegistry':
        """
        Build a registry from environment configuration.

        The authority is PARALLELID_AUTHORITY_ADDRESS, or else the address
        of the key stored at PARALLELID_AUTHORITY_KEY_PATH.
        """
        authority = config.AUTHORITY_ADDRESS
        if not authority:
            try:
                authority = load_authority_key(config.AUTHORITY_KEY_PATH).address
            except FileNotFoundError:
                raise RuntimeError(
                    "No authority configured: set PARALLELID_AUTHORITY_ADDRESS "
                    "or PARALLELID_AUTHORITY_KEY_PATH"
                )
        return cls(
            authority=authority,
            registry_address=config.REGISTRY_ADDRESS,
            chain_id=config.CHAIN_ID,
            mint_cost=config.MINT_COST,
            clock=clock
        )

    @property
    def registry_address(self) -> str:
        return self.authorizer.registry_address

    @property
    def chain_id(self) -> int:
        return self.authorizer.chain_id

    @property
    def next_sequence(self) -> int:
        return self.authorizer.next_sequence

    # --------------------------------------------------------
    # Issuance
    # --------------------------------------------------------

    def _issue(
        self,
        owner: str,
        uri: str,
        traits: Iterable[str],
        subject_type: SubjectType,
        citizenship: int
    ) -> int:
        if not isinstance(uri, str):
            raise ValueError("uri must be a string")
        subject_type = SubjectType.parse(subject_type)
        validate_citizenship(citizenship)
        store = TraitStore(traits)
        owner = normalize_address(owner)

        now = self.clock()
        token_id = self.ledger.mint_to(owner)
        self._records[token_id] = CredentialRecord(
            token_id=token_id,
            uri=uri,
            minted_at=now,
            last_issued_at=now,
            subject_type=subject_type,
            citizenship=citizenship,
            traits=store
        )
        return token_id

    def mint(
        self,
        caller: str,
        owner: str,
        uri: str,
        traits: Iterable[str],
        subject_type: SubjectType,
        citizenship: int
    ) -> int:
        """
        Issue a credential directly. Authority only.

        Returns:
            The new credential id
        """
        with self._lock:
            self._require_authority(caller, "mint")
            token_id = self._issue(owner, uri, traits, subject_type, citizenship)
            current = self._records[token_id].traits.list()
        owner = normalize_address(owner)
        self.audit.credential_issued(token_id, owner, "admin", current)
        self._announce_issue(token_id, owner)
        return token_id

    def self_mint(self, caller: str, authorization: MintAuthorization, value: int = 0) -> int:
        """
        Issue a credential from an authority-signed authorization.

        The credential goes to the recipient named in the authorization;
        caller is only the account submitting it and may be a third party.
        The attached value is collected and the sequence number advances
        only when the mint succeeds.

        Raises:
            InvalidSignatureError, SignatureExpiredError, InsufficientPaymentError
        """
        caller = normalize_address(caller)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"Invalid attached value {value!r}")
        with self._lock:
            sequence = self.authorizer.next_sequence
            try:
                self.authorizer.check(
                    authorization,
                    authority=self._authority,
                    now=self.clock(),
                    value=value,
                    mint_cost=self._mint_cost
                )
            except ParallelIDError as e:
                raise self._reject("self_mint", e, caller, sequence=sequence)

            token_id = self._issue(
                authorization.recipient,
                authorization.uri,
                authorization.traits,
                authorization.subject_type,
                authorization.citizenship
            )
            self._balance += value
            self.authorizer.consume()
            recipient = self.ledger.owner_of(token_id)
            traits = self._records[token_id].traits.list()

        self.audit.credential_issued(token_id, recipient, "self_mint", traits, sequence=sequence)
        self._announce_issue(token_id, recipient)
        return token_id

    def renew(
        self,
        caller: str,
        token_id: int,
        uri: str,
        traits: Iterable[str],
        citizenship: int
    ) -> None:
        """
        Reissue an existing credential. Authority only.

        Replaces uri, citizenship and the whole trait set and moves
        last_issued_at to now. minted_at, owner, subject type and any
        recorded sanctions match are left as they are.
        """
        with self._lock:
            self._require_authority(caller, "renew")
            record = self._record(token_id)
            if not isinstance(uri, str):
                raise ValueError("uri must be a string")
            validate_citizenship(citizenship)
            traits = validate_trait_names(traits)

            record.uri = uri
            record.citizenship = citizenship
            record.traits.replace_all(traits)
            record.last_issued_at = self.clock()
            renewed_at = record.last_issued_at
            current = record.traits.list()

        self.audit.credential_renewed(token_id, renewed_at, current)
        self.events.emit(Renewed(token_id, renewed_at))

    # --------------------------------------------------------
    # Traits
    # --------------------------------------------------------

    def has_trait(self, token_id: int, name: str) -> bool:
        return self._record(token_id).traits.has(name)

    def add_trait(self, caller: str, token_id: int, name: str) -> bool:
        """Assert a trait. Authority only. Returns True if the set changed."""
        with self._lock:
            self._require_authority(caller, "add_trait")
            added = self._record(token_id).traits.add(name)
        if added:
            self.audit.trait_changed(token_id, name, True)
            self.events.emit(TraitAdded(token_id, name))
        return added

    def remove_trait(self, caller: str, token_id: int, name: str) -> bool:
        """Retract a trait. Authority only. Absent traits are a no-op."""
        with self._lock:
            self._require_authority(caller, "remove_trait")
            removed = self._record(token_id).traits.remove(name)
        if removed:
            self.audit.trait_changed(token_id, name, False)
            self.events.emit(TraitRemoved(token_id, name))
        return removed

    # --------------------------------------------------------
    # Sanctions
    # --------------------------------------------------------

    def add_sanctions(self, caller: str, token_id: int, jurisdiction: int) -> None:
        """Record a sanctions match, replacing any earlier one. Authority only."""
        with self._lock:
            self._require_authority(caller, "add_sanctions")
            record = self._record(token_id)
            validate_citizenship(jurisdiction)
            record.sanctions_match = jurisdiction
        self.audit.sanctions_match(token_id, jurisdiction)
        self.events.emit(SanctionsMatch(token_id, jurisdiction))

    def sanctions_match(self, token_id: int) -> Optional[int]:
        return self._record(token_id).sanctions_match

    def is_sanctions_monitored(self, token_id: int, now: Optional[int] = None) -> bool:
        return self.monitor.is_monitored(self._record(token_id), self._now(now))

    def is_sanctions_safe(self, token_id: int, now: Optional[int] = None) -> bool:
        return self.monitor.is_safe(self._record(token_id), self._now(now))

    def is_sanctions_safe_in(self, token_id: int, jurisdiction: int, now: Optional[int] = None) -> bool:
        return self.monitor.is_safe_in(self._record(token_id), jurisdiction, self._now(now))

    # --------------------------------------------------------
    # Record reads
    # --------------------------------------------------------

    def record(self, token_id: int) -> CredentialRecord:
        """Detached copy of the stored record."""
        with self._lock:
            return copy.deepcopy(self._record(token_id))

    def last_issued_at(self, token_id: int) -> int:
        return self._record(token_id).last_issued_at

    def subject_type(self, token_id: int) -> SubjectType:
        return self._record(token_id).subject_type

    def citizenship(self, token_id: int) -> int:
        return self._record(token_id).citizenship

    # --------------------------------------------------------
    # Fees
    # --------------------------------------------------------

    @property
    def mint_cost(self) -> int:
        return self._mint_cost

    @property
    def balance(self) -> int:
        """Value collected from self-mints and not yet withdrawn."""
        return self._balance

    def set_mint_cost(self, caller: str, amount: int) -> None:
        with self._lock:
            self._require_authority(caller, "set_mint_cost")
            if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
                raise ValueError(f"Invalid mint cost {amount!r}")
            previous = self._mint_cost
            self._mint_cost = amount
        self.audit.configuration_changed("mint_cost", previous, amount, normalize_address(caller))

    def withdraw(self, caller: str) -> int:
        """Pay out the collected balance to the authority. Returns the amount."""
        with self._lock:
            caller = self._require_authority(caller, "withdraw")
            amount = self._balance
            self._balance = 0
        self.audit.funds_withdrawn(amount, caller)
        return amount
