# =============================================================================
# core/member_set.py - Case-insensitive member identifier set
# =============================================================================

from typing import Dict, Iterable, Iterator, List, Optional


class MemberSet:
    """
    Insertion-ordered set of principal names compared case-insensitively.

    Entries are keyed by their lowercase form. The casing stored is the one
    first added; later case variants are treated as already present.
    """

    def __init__(self, identifiers: Optional[Iterable[str]] = None):
        self._members: Dict[str, str] = {}
        if identifiers:
            self.update(identifiers)

    @staticmethod
    def _key(identifier: str) -> str:
        return identifier.lower()

    def add(self, identifier: str) -> bool:
        """Add an identifier; returns False if a case variant was already present"""
        if not identifier:
            return False

        key = self._key(identifier)
        if key in self._members:
            return False

        self._members[key] = identifier
        return True

    def update(self, identifiers: Iterable[str]) -> int:
        """Add many identifiers, returning how many were new"""
        return sum(1 for identifier in identifiers if self.add(identifier))

    def get(self, identifier: str) -> Optional[str]:
        """Return the stored casing for an identifier, if present"""
        if not identifier:
            return None
        return self._members.get(self._key(identifier))

    def sorted(self) -> List[str]:
        """Members in ordinal, case-insensitive ascending order"""
        return sorted(self._members.values(), key=str.upper)

    def __contains__(self, identifier) -> bool:
        if not isinstance(identifier, str):
            return False
        return self._key(identifier) in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members.values())

    def __len__(self) -> int:
        return len(self._members)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MemberSet):
            return NotImplemented
        return set(self._members) == set(other._members)

    def __repr__(self) -> str:
        return f"MemberSet({list(self._members.values())!r})"
