"""
Pytest fixtures for saturation tests.

Provides settings isolated from the environment and a few small rule sets.
"""

import pytest

from saturation import Atom, Rule, SaturationSettings, Variable

X = Variable("X")
Y = Variable("Y")
Z = Variable("Z")


# =============================================================================
# SETTINGS
# =============================================================================

@pytest.fixture
def settings() -> SaturationSettings:
    """Default settings, ignoring any SATURATION_* environment."""
    return SaturationSettings(
        _env_file=None,
        max_rounds=1000,
        max_facts=100_000,
        bottom_predicate="bottom",
        exhaustive_matching=False,
    )


# =============================================================================
# RULE SETS
# =============================================================================

@pytest.fixture
def bird_records() -> list:
    """bird(tweety). bird(X) => flies(X)."""
    return [
        Rule([], Atom("bird", "tweety")),
        Rule([Atom("bird", X)], Atom("flies", X)),
    ]


@pytest.fixture
def family_records() -> list:
    """Two parent facts and the grandparent rule."""
    return [
        Rule([], Atom("parent", "ann", "bob")),
        Rule([], Atom("parent", "bob", "cid")),
        Rule([Atom("parent", X, Y), Atom("parent", Y, Z)], Atom("grandparent", X, Z)),
    ]


@pytest.fixture
def chain_records() -> list:
    """edge(a,b), edge(b,c), edge(c,d) with a two-step path closure."""
    return [
        Rule([], Atom("edge", "a", "b")),
        Rule([], Atom("edge", "b", "c")),
        Rule([], Atom("edge", "c", "d")),
        Rule([Atom("edge", X, Y)], Atom("path", X, Y)),
        Rule([Atom("path", X, Y), Atom("edge", Y, Z)], Atom("path", X, Z)),
    ]
