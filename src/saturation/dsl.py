"""
saturation/dsl.py - Fluent rule-book builder

Builds rule records in Python instead of a rule file.

Example:
    from saturation.dsl import RuleBook, X, Y, Z

    book = RuleBook()
    book.fact("parent", "ann", "bob")
    book.fact("parent", "bob", "cid")

    book.rule("grandparent", X, Z) \
        .when("parent", X, Y) \
        .and_("parent", Y, Z) \
        .done()

    tree = book.engine().query(Atom("grandparent", "ann", "cid"))
"""
from __future__ import annotations
from typing import Dict, List, Optional

from .config import SaturationSettings
from .engine import SaturationEngine
from .terms import Atom, Predicate, Rule, TermLike, Variable


# Common variables for rule definitions
X = Variable("X")
Y = Variable("Y")
Z = Variable("Z")
A = Variable("A")
B = Variable("B")
C = Variable("C")


class RuleBuilder:
    """Fluent builder for one rule."""

    def __init__(self, book: 'RuleBook', conclusion: str, *args: TermLike | str):
        self.book = book
        self.conclusion = Atom(conclusion, *args)
        self.premises: List[Atom] = []

    def when(self, predicate: str, *args: TermLike | str) -> 'RuleBuilder':
        """Add first premise."""
        self.premises.append(Atom(predicate, *args))
        return self

    def and_(self, predicate: str, *args: TermLike | str) -> 'RuleBuilder':
        """Add another premise."""
        self.premises.append(Atom(predicate, *args))
        return self

    def done(self) -> Rule:
        """Finalize and add the rule to the book."""
        if not self.premises:
            raise ValueError(f"Rule for {self.conclusion!r} needs at least one premise; use fact()")
        rule = Rule(self.premises, self.conclusion)
        self.book.records.append(rule)
        return rule


class RuleBook:
    """Ordered collection of rule records with a fluent API."""

    def __init__(self, records: Optional[List[Rule]] = None):
        self.records: List[Rule] = list(records or [])
        self._predicates: Dict[str, Predicate] = {}

    def predicate(self, name: str, arity: int) -> Predicate:
        """Declare a predicate; calls on it check arity."""
        pred = Predicate(name, arity)
        self._predicates[name] = pred
        return pred

    def fact(self, predicate: str, *args: str) -> Rule:
        """Add an axiom."""
        pred = self._predicates.get(predicate)
        atom = pred(*args) if pred else Atom(predicate, *args)
        rule = Rule([], atom)
        self.records.append(rule)
        return rule

    def rule(self, conclusion: str, *args: TermLike | str) -> RuleBuilder:
        """Start a rule with the given conclusion."""
        return RuleBuilder(self, conclusion, *args)

    def engine(self, settings: Optional[SaturationSettings] = None) -> SaturationEngine:
        """Engine loaded with every record so far."""
        return SaturationEngine(self.records, settings=settings)

    def __len__(self) -> int:
        return len(self.records)
