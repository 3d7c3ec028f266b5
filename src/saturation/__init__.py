"""
saturation - Forward-chaining rule saturation

Derives new facts from ground axioms and Horn rules until a queried fact
appears or nothing new can be derived, then returns the derivation tree.

This package implements:
- Name interning for compact, hashable atoms
- Union-find unification over flat atoms
- Naive fixpoint saturation with a first-derivation justification map
- Derivation tree reconstruction

Example:
    from saturation import Atom, Rule, SaturationEngine, Variable

    X = Variable("X")
    engine = SaturationEngine([
        Rule([], Atom("bird", "tweety")),
        Rule([Atom("bird", X)], Atom("flies", X)),
    ])

    tree = engine.query(Atom("flies", "tweety"))
    print(tree.leaves())   # [bird(tweety)]
"""

from .config import SaturationSettings, configure_logging, get_settings
from .derivation import DerivationTree, Justification, build_derivation_tree
from .dsl import RuleBook
from .engine import SaturationEngine
from .errors import (
    AssignFailure,
    ConstantClash,
    CyclicJustification,
    DerivedBottom,
    LoadError,
    ParseRejected,
    PredicateMismatch,
    PremiseMismatch,
    ResourceExhausted,
    SaturationError,
    SaturationFailure,
    Saturated,
    UnboundConclusion,
    UnifyFailure,
    UnknownIdentifier,
)
from .identifiers import Identifier, IdentifierInterner
from .loader import dump_records, load_records, parse_records
from .terms import Atom, Axiom, Constant, Predicate, Rule, Variable
from .unification import Substitution, assign, resolve, unify

__all__ = [
    # Terms
    "Atom",
    "Axiom",
    "Constant",
    "Predicate",
    "Rule",
    "Variable",
    # Interning
    "Identifier",
    "IdentifierInterner",
    # Unification
    "Substitution",
    "assign",
    "resolve",
    "unify",
    # Engine
    "SaturationEngine",
    "DerivationTree",
    "Justification",
    "build_derivation_tree",
    # Loading
    "dump_records",
    "load_records",
    "parse_records",
    "RuleBook",
    # Settings
    "SaturationSettings",
    "configure_logging",
    "get_settings",
    # Errors
    "SaturationError",
    "LoadError",
    "ParseRejected",
    "UnknownIdentifier",
    "UnifyFailure",
    "PredicateMismatch",
    "ConstantClash",
    "AssignFailure",
    "PremiseMismatch",
    "UnboundConclusion",
    "SaturationFailure",
    "Saturated",
    "DerivedBottom",
    "ResourceExhausted",
    "CyclicJustification",
]
