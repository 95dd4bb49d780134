"""
ParallelID Self-Mint Authorization

Lets a holder mint their own credential with an authorization the
authority signed off-system. Replay protection is a single counter: the
digest is always rebuilt with the current pending sequence number, so
once a mint advances it every earlier authorization stops verifying.

Checks run in a fixed order and each one fails before any state change:
    1. signature recovers to the authority    -> InvalidSignatureError
    2. now <= not_after                       -> SignatureExpiredError
    3. value >= mint cost                     -> InsufficientPaymentError
"""

import logging

from .errors import InsufficientPaymentError, InvalidSignatureError, SignatureExpiredError
from .hashing import normalize_address
from .signing import MintAuthorization, recover_signer

logger = logging.getLogger(__name__)


class SignedMintAuthorizer:
    """
    Validates self-mint authorizations and owns the replay ledger.

    The caller must hold a lock spanning check() and consume() when the
    authorizer is shared between threads; ParallelIDRegistry does.
    """

    def __init__(self, registry_address: str, chain_id: int, next_sequence: int = 1):
        if next_sequence < 1:
            raise ValueError("Sequence numbers start at 1")
        self.registry_address = normalize_address(registry_address)
        self.chain_id = chain_id
        self._next_sequence = next_sequence

    @property
    def next_sequence(self) -> int:
        """Sequence number the next accepted authorization must be signed with."""
        return self._next_sequence

    def digest_for(self, authorization: MintAuthorization) -> bytes:
        return authorization.digest(
            registry_address=self.registry_address,
            sequence=self._next_sequence,
            chain_id=self.chain_id
        )

    def check(
        self,
        authorization: MintAuthorization,
        authority: str,
        now: int,
        value: int,
        mint_cost: int
    ) -> None:
        """
        Validate an authorization without consuming it.

        Raises:
            InvalidSignatureError: wrong signer, tampered or unencodable field, or stale sequence
            SignatureExpiredError: now is past not_after
            InsufficientPaymentError: value below mint_cost
        """
        try:
            digest = self.digest_for(authorization)
        except ValueError as e:
            raise InvalidSignatureError(f"Authorization fields do not encode: {e}")
        signer = recover_signer(digest, authorization.signature)
        if signer is None or signer != normalize_address(authority):
            logger.debug("Self-mint signature rejected at sequence %d", self._next_sequence)
            raise InvalidSignatureError(
                f"Signature does not recover to the authority at sequence {self._next_sequence}"
            )

        if now > authorization.not_after:
            raise SignatureExpiredError(
                f"Authorization expired at {authorization.not_after}, now {now}"
            )

        if value < mint_cost:
            raise InsufficientPaymentError(f"Mint cost is {mint_cost}, got {value}")

    def consume(self) -> int:
        """Advance the replay ledger after a successful mint. Returns the consumed sequence."""
        consumed = self._next_sequence
        self._next_sequence += 1
        return consumed
