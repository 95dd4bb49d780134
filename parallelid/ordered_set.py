"""
Ordered, deduplicated string storage.

A dict gives constant-time membership and position lookup; a list keeps
first-insertion order for enumeration. The two are kept in lockstep.
"""

from typing import Dict, Iterator, List, Tuple


class OrderedStringSet:
    """Set of strings that remembers the order values were first added."""

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._values: List[str] = []

    def add(self, value: str) -> int:
        """
        Add a value if absent.

        Returns:
            Position of the value; an existing value keeps its position.
        """
        position = self._index.get(value)
        if position is not None:
            return position
        self._index[value] = len(self._values)
        self._values.append(value)
        return self._index[value]

    def remove(self, value: str) -> bool:
        """Remove a value, preserving the order of the rest. Returns False if absent."""
        position = self._index.pop(value, None)
        if position is None:
            return False
        del self._values[position]
        for i in range(position, len(self._values)):
            self._index[self._values[i]] = i
        return True

    def contains(self, value: str) -> bool:
        return value in self._index

    def index_of(self, value: str) -> Tuple[bool, int]:
        """Return (found, position); (False, 0) when absent."""
        position = self._index.get(value)
        if position is None:
            return False, 0
        return True, position

    def at(self, position: int) -> str:
        if position < 0 or position >= len(self._values):
            raise IndexError(f"Position {position} out of range")
        return self._values[position]

    def values(self) -> List[str]:
        return list(self._values)

    def clear(self) -> None:
        self._index.clear()
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))
