"""
saturation/derivation.py - Derivation trees

A derivation tree shows how a fact was obtained: each node is a fact, its
children are the facts the rule consumed, and leaves are seed axioms.
Trees are rebuilt on demand from the engine's justification map.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .errors import CyclicJustification
from .identifiers import IdentifierInterner
from .terms import Atom, InnerAtom, InnerRule, Rule, resolve_atom, resolve_rule


@dataclass(frozen=True)
class Justification:
    """Why a fact is in the fact set.

    Seed axioms have no premises and no rule. `generation` is the round in
    which the fact was inserted (0 for seeds); every premise has a strictly
    smaller generation.
    """
    premises: tuple[InnerAtom, ...] = ()
    rule: Optional[InnerRule] = None
    generation: int = 0

    @property
    def is_seed(self) -> bool:
        return not self.premises


@dataclass
class DerivationTree:
    """Proof of `atom`.

    `rule` is the rule applied to the children, or None for a seed axiom.
    """
    atom: Atom
    children: List[DerivationTree] = field(default_factory=list)
    rule: Optional[Rule] = None

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    @property
    def depth(self) -> int:
        """Longest path from this node to a leaf (0 for a leaf)."""
        if self.is_leaf:
            return 0
        return 1 + max(child.depth for child in self.children)

    @property
    def size(self) -> int:
        return 1 + sum(child.size for child in self.children)

    def walk(self) -> Iterator[DerivationTree]:
        """Nodes in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> List[Atom]:
        return [node.atom for node in self.walk() if node.is_leaf]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "atom": repr(self.atom),
            "rule": repr(self.rule) if self.rule else None,
            "children": [child.to_dict() for child in self.children],
        }


def build_derivation_tree(
    root: InnerAtom,
    justifications: Mapping[InnerAtom, Justification],
    interner: IdentifierInterner,
) -> Optional[DerivationTree]:
    """Rebuild the proof of `root` from the justification map.

    Returns None when `root` has no justification (it was never derived).

    Raises:
        CyclicJustification: a premise leads back to an atom on the
            current path, which means the map is corrupt
    """
    if root not in justifications:
        return None

    rules: Dict[InnerRule, Rule] = {}
    in_flight: set[InnerAtom] = set()

    def expand(atom: InnerAtom) -> DerivationTree:
        if atom in in_flight:
            raise CyclicJustification(resolve_atom(atom, interner))
        justification = justifications.get(atom)
        if justification is None:
            # Every premise entered the fact set with its own entry
            raise KeyError(f"No justification for premise {resolve_atom(atom, interner)!r}")

        node = DerivationTree(resolve_atom(atom, interner))
        if justification.is_seed:
            return node

        in_flight.add(atom)
        node.children = [expand(premise) for premise in justification.premises]
        in_flight.discard(atom)

        rule = justification.rule
        if rule is not None:
            if rule not in rules:
                rules[rule] = resolve_rule(rule, interner)
            node.rule = rules[rule]
        return node

    return expand(root)
