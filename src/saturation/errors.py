"""
saturation/errors.py - Failure taxonomy for the saturation engine

Three families of failures:
- Load-time: the rule source could not be read or parsed
- Candidate-local: one rule application did not match (never escapes a round)
- Query outcomes: the target is not entailed, the rule set is contradictory,
  or a configured ceiling was hit
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .derivation import DerivationTree


class SaturationError(Exception):
    """Base exception for everything raised by this package."""


# =============================================================================
# LOADING
# =============================================================================


class LoadError(SaturationError):
    """Rule source unreadable, or its records are unusable."""


class ParseRejected(LoadError):
    """The external parser could not produce records from the source."""


class UnknownIdentifier(SaturationError, KeyError):
    """An identifier did not originate from this interner."""

    def __str__(self) -> str:
        return Exception.__str__(self)


# =============================================================================
# CANDIDATE-LOCAL FAILURES
# =============================================================================


class UnifyFailure(SaturationError):
    """Two atoms cannot be made structurally identical."""


class PredicateMismatch(UnifyFailure):
    """Predicates or arities differ."""


class ConstantClash(UnifyFailure):
    """Two distinct constants met at the same argument position."""


class AssignFailure(SaturationError):
    """A rule could not be applied to a candidate fact tuple."""


class PremiseMismatch(AssignFailure):
    """Some premise failed to unify with its positional fact."""


class UnboundConclusion(AssignFailure):
    """The instantiated conclusion still contains a variable."""


# =============================================================================
# QUERY OUTCOMES
# =============================================================================


class SaturationFailure(SaturationError):
    """A query ended without producing the target."""


class Saturated(SaturationFailure):
    """A round derived nothing new; the target is not entailed."""


class DerivedBottom(SaturationFailure):
    """The contradiction predicate was derived; the rule set is inconsistent."""

    def __init__(self, atom: Any, tree: DerivationTree | None = None):
        super().__init__(f"derived contradiction {atom}")
        self.atom = atom
        self.tree = tree


class ResourceExhausted(SaturationFailure):
    """A round or fact-count ceiling was reached before a fixpoint or the target."""

    def __init__(self, ceiling: str, limit: int, rounds: int):
        super().__init__(f"{ceiling} ceiling of {limit} reached after {rounds} rounds")
        self.ceiling = ceiling
        self.limit = limit
        self.rounds = rounds


class CyclicJustification(SaturationError):
    """The justification map loops back on an atom still being expanded."""

    def __init__(self, atom: Any):
        super().__init__(f"justification cycle through {atom}")
        self.atom = atom
