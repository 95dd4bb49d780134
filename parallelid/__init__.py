"""
ParallelID Identity Credentials

Version: 1.0.0

Issues, maintains and revokes non-fungible identity credentials. Each
credential binds an owner to a set of verified traits (e.g. "kyc_clear",
"accreditation", "aml"), a subject classification, a citizenship code
and issuance timestamps from which validity and sanctions safety are
derived at read time.

Credentials are created either by the controlling authority directly or
by the holder presenting an authorization the authority signed
off-system. Each authorization is bound to the registry's pending
sequence number and so can be used at most once.

Usage:
    from parallelid import (
        AuthorityKey,
        ParallelIDRegistry,
        SubjectType,
        sign_mint_authorization,
    )

    authority = AuthorityKey.generate()
    registry = ParallelIDRegistry(authority=authority.address)

    authorization = sign_mint_authorization(
        authority,
        recipient=holder,
        uri="https://example.com/token.json",
        traits=["kyc_clear"],
        subject_type=SubjectType.INDIVIDUAL,
        citizenship=840,
        not_after=now + 3600,
        sequence=registry.next_sequence,
        registry_address=registry.registry_address,
        chain_id=registry.chain_id
    )

    token_id = registry.self_mint(holder, authorization, value=registry.mint_cost)
    registry.is_sanctions_safe_in(token_id, 840)
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Errors
from .errors import (
    ErrorCode,
    ParallelIDError,
    UnauthorizedError,
    NotFoundError,
    InvalidSignatureError,
    SignatureExpiredError,
    InsufficientPaymentError,
)

# Traits
from .ordered_set import OrderedStringSet
from .traits import TraitStore, validate_trait_name, TRAIT_SEPARATOR

# Records and monitoring
from .credential import CredentialRecord, SubjectType
from .sanctions import SanctionsMonitor, ONE_YEAR, MONITORING_WINDOW

# Hashing
from .hashing import (
    traits_hash,
    mint_digest,
    normalize_address,
    address_from_verify_key,
)

# Signing
from .signing import (
    AuthorityKey,
    MintSignature,
    MintAuthorization,
    sign_mint_authorization,
    recover_signer,
    load_authority_key,
    save_authority_key,
)

# Events
from .events import (
    Event,
    EventBus,
    TraitAdded,
    TraitRemoved,
    TraitUpdated,
    SanctionsMatch,
    Issued,
    Renewed,
    Transfer,
    AuthorityTransferred,
)

# Ledger
from .ledger import OwnershipLedger, InMemoryOwnershipLedger, ZERO_ADDRESS

# Registries
from .authorizer import SignedMintAuthorizer
from .registry import ParallelIDRegistry
from .legacy import ParallelMarketsIDRegistry

from .util import ManualClock


__all__ = [
    # Version
    "__version__",

    # Errors
    "ErrorCode",
    "ParallelIDError",
    "UnauthorizedError",
    "NotFoundError",
    "InvalidSignatureError",
    "SignatureExpiredError",
    "InsufficientPaymentError",

    # Traits
    "OrderedStringSet",
    "TraitStore",
    "validate_trait_name",
    "TRAIT_SEPARATOR",

    # Records
    "CredentialRecord",
    "SubjectType",
    "SanctionsMonitor",
    "ONE_YEAR",
    "MONITORING_WINDOW",

    # Hashing
    "traits_hash",
    "mint_digest",
    "normalize_address",
    "address_from_verify_key",

    # Signing
    "AuthorityKey",
    "MintSignature",
    "MintAuthorization",
    "sign_mint_authorization",
    "recover_signer",
    "load_authority_key",
    "save_authority_key",

    # Events
    "Event",
    "EventBus",
    "TraitAdded",
    "TraitRemoved",
    "TraitUpdated",
    "SanctionsMatch",
    "Issued",
    "Renewed",
    "Transfer",
    "AuthorityTransferred",

    # Ledger
    "OwnershipLedger",
    "InMemoryOwnershipLedger",
    "ZERO_ADDRESS",

    # Registries
    "SignedMintAuthorizer",
    "ParallelIDRegistry",
    "ParallelMarketsIDRegistry",

    "ManualClock",
]
