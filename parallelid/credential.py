"""
ParallelID Credential Record

The entity behind one identity token: issuance timestamps, subject
classification, citizenship, sanctions state and its trait store.
Ownership is held by the ledger, not here.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional

from .hashing import MAX_CITIZENSHIP
from .traits import TraitStore


class SubjectType(IntEnum):
    """Who the credential describes. Encoded as one byte when signed."""
    INDIVIDUAL = 0
    BUSINESS = 1

    @classmethod
    def parse(cls, value: Any) -> 'SubjectType':
        """Accept a SubjectType, its integer value, or its name in any case."""
        if isinstance(value, SubjectType):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown subject type {value!r}")
        if isinstance(value, bool):
            raise ValueError(f"Unknown subject type {value!r}")
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise ValueError(f"Unknown subject type {value!r}")


def validate_citizenship(code: int) -> int:
    """Jurisdiction codes are ISO 3166-1 numeric, stored in two bytes."""
    if isinstance(code, bool) or not isinstance(code, int):
        raise ValueError(f"Citizenship must be an integer code, got {code!r}")
    if code < 0 or code > MAX_CITIZENSHIP:
        raise ValueError(f"Citizenship code {code} out of range 0..{MAX_CITIZENSHIP}")
    return code


@dataclass
class CredentialRecord:
    token_id: int
    uri: str
    minted_at: int
    last_issued_at: int
    subject_type: SubjectType
    citizenship: int
    traits: TraitStore = field(default_factory=TraitStore)
    sanctions_match: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "token_id": self.token_id,
            "uri": self.uri,
            "minted_at": self.minted_at,
            "last_issued_at": self.last_issued_at,
            "subject_type": self.subject_type.name.lower(),
            "citizenship": self.citizenship,
            "traits": self.traits.list(),
            "sanctions_match": self.sanctions_match,
        }
