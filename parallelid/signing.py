"""
ParallelID Authority Signing

Uses Ed25519 (RFC 8032) via PyNaCl. A signature travels with the
signer's public key; recovering the signer means verifying the
signature with that key and deriving its address, which the registry
then compares with the configured authority.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .credential import SubjectType
from .hashing import address_from_verify_key, mint_digest, normalize_address
from .traits import validate_trait_names
from .util import b64d, b64e

ALGORITHM = "Ed25519"


@dataclass(frozen=True)
class MintSignature:
    """Detached Ed25519 signature plus the public key that produced it."""
    public_key: bytes
    sig: bytes
    algorithm: str = ALGORITHM

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "public_key": b64e(self.public_key),
            "sig": b64e(self.sig),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MintSignature':
        missing = [f for f in ("public_key", "sig") if f not in data]
        if missing:
            raise ValueError(f"Missing signature fields: {missing}")
        try:
            public_key = b64d(data["public_key"])
            sig = b64d(data["sig"])
        except (ValueError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid base64 in signature: {e}")
        return cls(public_key=public_key, sig=sig, algorithm=data.get("algorithm", ALGORITHM))


@dataclass
class AuthorityKey:
    """Ed25519 key pair held by the credential authority."""
    signing_key: bytes
    verify_key: bytes
    key_id: str = "authority"

    @classmethod
    def generate(cls, key_id: str = "authority") -> 'AuthorityKey':
        signing_key = SigningKey.generate()
        return cls(
            signing_key=bytes(signing_key),
            verify_key=bytes(signing_key.verify_key),
            key_id=key_id
        )

    @classmethod
    def from_signing_key(cls, signing_key: bytes, key_id: str = "authority") -> 'AuthorityKey':
        sk = SigningKey(signing_key)
        return cls(signing_key=bytes(sk), verify_key=bytes(sk.verify_key), key_id=key_id)

    @property
    def address(self) -> str:
        return address_from_verify_key(self.verify_key)

    def sign(self, digest: bytes) -> MintSignature:
        signed = SigningKey(self.signing_key).sign(digest)
        return MintSignature(public_key=self.verify_key, sig=signed.signature)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kid": self.key_id,
            "address": self.address,
            "private_key_b64": b64e(self.signing_key),
            "public_key_b64": b64e(self.verify_key),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuthorityKey':
        return cls.from_signing_key(b64d(data["private_key_b64"]), key_id=data.get("kid", "authority"))


def save_authority_key(key: AuthorityKey, path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(key.to_dict(), f, indent=2)


def load_authority_key(path: str) -> AuthorityKey:
    with open(path, "r", encoding="utf-8") as f:
        return AuthorityKey.from_dict(json.load(f))


def recover_signer(digest: bytes, signature: MintSignature) -> Optional[str]:
    """
    Return the address that signed digest, or None if the signature
    does not verify.
    """
    if signature.algorithm != ALGORITHM:
        return None
    try:
        VerifyKey(signature.public_key).verify(digest, signature.sig)
        return address_from_verify_key(signature.public_key)
    except (BadSignatureError, ValueError, TypeError):
        return None


@dataclass(frozen=True)
class MintAuthorization:
    """
    An authority's permission for `recipient` to mint one credential.

    The sequence number, registry address and chain id are bound into
    the signed digest but not carried here: the registry supplies its
    own values when it checks the signature.
    """
    recipient: str
    uri: str
    traits: Tuple[str, ...]
    subject_type: SubjectType
    citizenship: int
    not_after: int
    signature: MintSignature

    def digest(self, registry_address: str, sequence: int, chain_id: int) -> bytes:
        return mint_digest(
            recipient=self.recipient,
            uri=self.uri,
            traits=self.traits,
            subject_type=self.subject_type,
            citizenship=self.citizenship,
            not_after=self.not_after,
            registry_address=registry_address,
            sequence=sequence,
            chain_id=chain_id
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "uri": self.uri,
            "traits": list(self.traits),
            "subject_type": self.subject_type.name.lower(),
            "citizenship": self.citizenship,
            "not_after": self.not_after,
            "signature": self.signature.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MintAuthorization':
        required = ["recipient", "uri", "traits", "subject_type", "citizenship", "not_after", "signature"]
        missing = [f for f in required if f not in data]
        if missing:
            raise ValueError(f"Missing required fields: {missing}")
        return cls(
            recipient=normalize_address(data["recipient"]),
            uri=data["uri"],
            traits=tuple(validate_trait_names(data["traits"])),
            subject_type=SubjectType.parse(data["subject_type"]),
            citizenship=data["citizenship"],
            not_after=data["not_after"],
            signature=MintSignature.from_dict(data["signature"])
        )


def sign_mint_authorization(
    key: AuthorityKey,
    recipient: str,
    uri: str,
    traits: Iterable[str],
    subject_type: SubjectType,
    citizenship: int,
    not_after: int,
    *,
    sequence: int,
    registry_address: str,
    chain_id: int
) -> MintAuthorization:
    """
    Produce a signed self-mint authorization.

    Args:
        key: The authority's key pair
        recipient: Address that will own the credential
        sequence: The registry's pending sequence number at signing time
        registry_address: Address of the registry that will accept it
        chain_id: Domain identifier of that registry

    Returns:
        MintAuthorization ready to hand to the recipient
    """
    subject_type = SubjectType.parse(subject_type)
    traits = tuple(traits)
    digest = mint_digest(
        recipient=recipient,
        uri=uri,
        traits=traits,
        subject_type=subject_type,
        citizenship=citizenship,
        not_after=not_after,
        registry_address=registry_address,
        sequence=sequence,
        chain_id=chain_id
    )
    return MintAuthorization(
        recipient=normalize_address(recipient),
        uri=uri,
        traits=traits,
        subject_type=subject_type,
        citizenship=citizenship,
        not_after=not_after,
        signature=key.sign(digest)
    )
