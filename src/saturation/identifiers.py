"""
saturation/identifiers.py - Name interning

Maps predicate names and constants to small integer handles so that
engine-internal atoms hash and compare without touching strings.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import UnknownIdentifier

_owner_tokens = itertools.count(1)


@dataclass(frozen=True)
class Identifier:
    """Opaque handle for an interned name.

    `owner` is unique per interner, so handles from different
    interners never compare equal.
    """
    owner: int
    index: int

    def __repr__(self) -> str:
        return f"#{self.owner}:{self.index}"


class IdentifierInterner:
    """Bidirectional name <-> Identifier table.

    Example:
        interner = IdentifierInterner()
        bird = interner.intern("bird")
        assert interner.intern("bird") == bird
        assert interner.resolve(bird) == "bird"
    """

    def __init__(self):
        self._owner = next(_owner_tokens)
        self._ids: Dict[str, Identifier] = {}
        self._names: List[str] = []

    def intern(self, name: str) -> Identifier:
        """Return the identifier for `name`, allocating one on first sight."""
        ident = self._ids.get(name)
        if ident is None:
            ident = Identifier(self._owner, len(self._names))
            self._ids[name] = ident
            self._names.append(name)
        return ident

    def lookup(self, name: str) -> Optional[Identifier]:
        """Identifier for `name` if already interned, without allocating."""
        return self._ids.get(name)

    def resolve(self, ident: Identifier) -> str:
        """Name behind `ident`.

        Raises:
            UnknownIdentifier: if `ident` was not issued by this interner
        """
        if (
            not isinstance(ident, Identifier)
            or ident.owner != self._owner
            or not 0 <= ident.index < len(self._names)
        ):
            raise UnknownIdentifier(f"{ident!r} was not issued by this interner")
        return self._names[ident.index]

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._names)
