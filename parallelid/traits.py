"""
ParallelID Trait Store

Per-credential record of which named boolean traits are currently
asserted (e.g. "kyc_clear", "accreditation", "aml"), enumerable in the
order they were first added.
"""

from typing import Iterable, List

from .ordered_set import OrderedStringSet

# Separator used when hashing trait lists; never valid inside a name.
TRAIT_SEPARATOR = ","


def validate_trait_name(name: str) -> str:
    """Return name unchanged, or raise ValueError if it cannot be a trait."""
    if not isinstance(name, str):
        raise ValueError(f"Trait name must be a string, got {type(name).__name__}")
    if not name:
        raise ValueError("Trait name must not be empty")
    if TRAIT_SEPARATOR in name:
        raise ValueError(f"Trait name {name!r} must not contain {TRAIT_SEPARATOR!r}")
    return name


def validate_trait_names(names: Iterable[str]) -> List[str]:
    """Validate every name; return them as a list in the given order."""
    if isinstance(names, str):
        raise ValueError("Trait names must be a sequence of strings, not a string")
    return [validate_trait_name(name) for name in names]


class TraitStore:
    """
    Trait membership plus enumeration order for one credential.

    has(name) is True exactly when name appears once in list().
    """

    def __init__(self, names: Iterable[str] = ()):
        self._set = OrderedStringSet()
        for name in validate_trait_names(names):
            self._set.add(name)

    def has(self, name: str) -> bool:
        return self._set.contains(name)

    def add(self, name: str) -> bool:
        """Assert a trait. Returns True if it was not already present."""
        validate_trait_name(name)
        if self._set.contains(name):
            return False
        self._set.add(name)
        return True

    def remove(self, name: str) -> bool:
        """Retract a trait. Returns True if it was present."""
        return self._set.remove(name)

    def list(self) -> List[str]:
        return self._set.values()

    def replace_all(self, names: Iterable[str]) -> List[str]:
        """
        Replace the whole trait set.

        All names are validated before the store is touched; duplicates
        collapse to their first occurrence.

        Returns:
            The resulting trait list.
        """
        validated = validate_trait_names(names)
        self._set.clear()
        for name in validated:
            self._set.add(name)
        return self._set.values()

    def __len__(self) -> int:
        return len(self._set)

    def __contains__(self, name: object) -> bool:
        return name in self._set

    def __repr__(self) -> str:
        return f"TraitStore({self.list()!r})"
