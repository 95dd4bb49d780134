"""
ParallelID Hashing and Canonical Message Construction

All hashes use SHA-256. The self-mint digest is a fixed byte layout so
that independent signers and verifiers produce identical digests:

    recipient         20 bytes (raw address)
    uri               UTF-8, variable length
    traits hash       32 bytes
    subject type       1 byte
    citizenship        2 bytes big-endian
    not_after         32 bytes big-endian
    registry address  20 bytes (raw address)
    sequence          32 bytes big-endian
    chain id          32 bytes big-endian

The uri is the only variable-length field, so the concatenation is
unambiguous.
"""

import hashlib
import re
from typing import Iterable, Union

from .traits import TRAIT_SEPARATOR, validate_trait_names

ADDRESS_PATTERN = re.compile(r'^0x[0-9a-fA-F]{40}$')
ADDRESS_BYTES = 20
WORD_BYTES = 32
MAX_CITIZENSHIP = 0xFFFF


def sha256_digest(data: Union[bytes, str]) -> bytes:
    """Compute raw SHA-256 digest."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).digest()


def normalize_address(address: str) -> str:
    """Validate a 0x-prefixed 20-byte hex address and lower-case it."""
    if not isinstance(address, str) or not ADDRESS_PATTERN.match(address):
        raise ValueError(f"Invalid address {address!r}: expected 0x followed by 40 hex digits")
    return address.lower()


def address_bytes(address: str) -> bytes:
    return bytes.fromhex(normalize_address(address)[2:])


def address_from_verify_key(verify_key: bytes) -> str:
    """
    Derive the account address of an Ed25519 public key.

    The address is the last 20 bytes of SHA-256(public key).
    """
    if len(verify_key) != 32:
        raise ValueError("Ed25519 public key must be 32 bytes")
    return "0x" + sha256_digest(verify_key)[-ADDRESS_BYTES:].hex()


def pack_uint(value: int, size: int) -> bytes:
    """Big-endian unsigned integer of exactly `size` bytes."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected integer, got {type(value).__name__}")
    if value < 0 or value >= 1 << (8 * size):
        raise ValueError(f"Value {value} does not fit in {size} bytes")
    return value.to_bytes(size, "big")


def traits_hash(names: Iterable[str]) -> bytes:
    """
    Order-sensitive digest of a trait list.

    Each name is followed by the separator, so ["a", "b"] hashes
    "a,b," and the empty list hashes the empty string.
    """
    names = validate_trait_names(names)
    joined = "".join(name + TRAIT_SEPARATOR for name in names)
    return sha256_digest(joined)


def mint_digest(
    recipient: str,
    uri: str,
    traits: Iterable[str],
    subject_type: int,
    citizenship: int,
    not_after: int,
    registry_address: str,
    sequence: int,
    chain_id: int
) -> bytes:
    """Build the 32-byte digest an authority signs to permit one self-mint."""
    if not isinstance(uri, str):
        raise ValueError("uri must be a string")
    message = b"".join([
        address_bytes(recipient),
        uri.encode('utf-8'),
        traits_hash(traits),
        pack_uint(int(subject_type), 1),
        pack_uint(citizenship, 2),
        pack_uint(not_after, WORD_BYTES),
        address_bytes(registry_address),
        pack_uint(sequence, WORD_BYTES),
        pack_uint(chain_id, WORD_BYTES),
    ])
    return sha256_digest(message)
