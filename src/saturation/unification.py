"""
saturation/unification.py - Unification over interned atoms

Substitutions are union-find arenas over a rule's variable slots. Each
rule application starts a fresh Substitution, so variables of one attempt
never leak into another.

Key operations:
- unify(a, b, theta): make two atoms identical by extending theta
- resolve(term, theta): current binding of a term
- assign(rule, facts): apply a rule positionally to a fact tuple

Terms are flat (no compound arguments), so no occurs-check is needed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .errors import (
    ConstantClash,
    PredicateMismatch,
    PremiseMismatch,
    UnboundConclusion,
    UnifyFailure,
)
from .identifiers import Identifier
from .terms import InnerAtom, InnerRule, InnerTerm, Slot
from .union_find import UnionFind


class Substitution:
    """Variable bindings for one rule application.

    Slot i of the rule is element i of the arena; a class is bound once
    any of its members meets a constant.
    """

    def __init__(self, variable_count: int):
        self._classes: UnionFind[Identifier] = UnionFind(variable_count)

    @classmethod
    def for_rule(cls, rule: InnerRule) -> 'Substitution':
        return cls(rule.variable_count)

    def __len__(self) -> int:
        return len(self._classes)

    def binding(self, slot: Slot) -> Optional[Identifier]:
        return self._classes.value(slot.index)

    def representative(self, slot: Slot) -> Slot:
        return Slot(self._classes.find(slot.index))

    def bind(self, slot: Slot, value: Identifier) -> None:
        self._classes.bind(slot.index, value)

    def merge(self, a: Slot, b: Slot) -> None:
        self._classes.union(a.index, b.index)


def resolve(term: InnerTerm, theta: Substitution) -> InnerTerm:
    """Follow `term` to its binding.

    Constants resolve to themselves. A slot resolves to its class's
    constant, or to the class representative slot while unbound.
    """
    if isinstance(term, Slot):
        value = theta.binding(term)
        if value is not None:
            return value
        return theta.representative(term)
    return term


def _unify_terms(t1: InnerTerm, t2: InnerTerm, theta: Substitution) -> None:
    t1 = resolve(t1, theta)
    t2 = resolve(t2, theta)

    if t1 == t2:
        return

    if isinstance(t1, Slot) and isinstance(t2, Slot):
        theta.merge(t1, t2)
    elif isinstance(t1, Slot):
        theta.bind(t1, t2)
    elif isinstance(t2, Slot):
        theta.bind(t2, t1)
    else:
        raise ConstantClash(f"{t1!r} does not unify with {t2!r}")


def unify(a: InnerAtom, b: InnerAtom, theta: Substitution) -> Substitution:
    """Unify two atoms, extending `theta` in place.

    Arguments are unified left to right against the same substitution.

    Returns:
        theta, for chaining

    Raises:
        PredicateMismatch: predicates or arities differ
        ConstantClash: two different constants meet
    """
    if a.predicate != b.predicate or a.arity != b.arity:
        raise PredicateMismatch(f"{a.predicate!r}/{a.arity} vs {b.predicate!r}/{b.arity}")

    for arg1, arg2 in zip(a.args, b.args):
        _unify_terms(arg1, arg2, theta)

    return theta


def substitute(atom: InnerAtom, theta: Substitution) -> InnerAtom:
    """Apply theta to every argument of `atom`."""
    return InnerAtom(atom.predicate, tuple(resolve(arg, theta) for arg in atom.args))


@dataclass(frozen=True)
class AssignedRule:
    """A successful rule application: ground conclusion and the facts used."""
    conclusion: InnerAtom
    premises: tuple[InnerAtom, ...]
    rule: InnerRule


def assign(rule: InnerRule, facts: Sequence[InnerAtom]) -> AssignedRule:
    """Match the rule's premises positionally against `facts`.

    One substitution is threaded through all premises, so a variable shared
    between premises must bind consistently.

    Raises:
        ValueError: if len(facts) differs from the premise count
        PremiseMismatch: a premise does not unify with its fact
        UnboundConclusion: the conclusion is not fully ground afterwards
    """
    if len(facts) != len(rule.premises):
        raise ValueError(f"Rule has {len(rule.premises)} premises, got {len(facts)} facts")

    theta = Substitution.for_rule(rule)
    for position, (premise, fact) in enumerate(zip(rule.premises, facts)):
        try:
            unify(premise, fact, theta)
        except UnifyFailure as e:
            raise PremiseMismatch(f"premise {position}: {e}") from e

    conclusion = substitute(rule.conclusion, theta)
    if not conclusion.is_ground():
        raise UnboundConclusion(f"conclusion {conclusion!r} left unbound")

    return AssignedRule(conclusion, tuple(facts), rule)
