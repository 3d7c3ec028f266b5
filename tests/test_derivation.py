"""
tests/test_derivation.py - Derivation tree reconstruction
"""

import pytest

from saturation import (
    Atom,
    CyclicJustification,
    DerivationTree,
    Justification,
    Rule,
    SaturationEngine,
    Variable,
    build_derivation_tree,
)
from saturation.identifiers import IdentifierInterner
from saturation.terms import intern_atom, intern_rule

X = Variable("X")


@pytest.fixture
def interner():
    return IdentifierInterner()


@pytest.fixture
def atoms(interner):
    return {name: intern_atom(Atom(name, "k"), interner) for name in ("a", "b", "c")}


class TestBuild:

    def test_unknown_root(self, interner, atoms):
        assert build_derivation_tree(atoms["a"], {}, interner) is None

    def test_seed_is_leaf(self, interner, atoms):
        tree = build_derivation_tree(atoms["a"], {atoms["a"]: Justification()}, interner)
        assert tree == DerivationTree(Atom("a", "k"))
        assert tree.is_leaf

    def test_chain(self, interner, atoms):
        rule = intern_rule(Rule([Atom("a", X)], Atom("b", X)), interner)
        justifications = {
            atoms["a"]: Justification(),
            atoms["b"]: Justification((atoms["a"],), rule, 1),
        }
        tree = build_derivation_tree(atoms["b"], justifications, interner)
        assert tree.atom == Atom("b", "k")
        assert tree.rule == Rule([Atom("a", X)], Atom("b", X))
        assert tree.children == [DerivationTree(Atom("a", "k"))]

    def test_shared_premise_is_not_a_cycle(self, interner, atoms):
        justifications = {
            atoms["a"]: Justification(),
            atoms["b"]: Justification((atoms["a"],), None, 1),
            atoms["c"]: Justification((atoms["a"], atoms["b"]), None, 2),
        }
        tree = build_derivation_tree(atoms["c"], justifications, interner)
        assert tree.leaves() == [Atom("a", "k"), Atom("a", "k")]
        assert tree.size == 4

    def test_cycle_detected(self, interner, atoms):
        justifications = {
            atoms["a"]: Justification((atoms["b"],), None, 1),
            atoms["b"]: Justification((atoms["a"],), None, 1),
        }
        with pytest.raises(CyclicJustification) as exc_info:
            build_derivation_tree(atoms["a"], justifications, interner)
        assert exc_info.value.atom == Atom("a", "k")

    def test_self_justification_detected(self, interner, atoms):
        justifications = {atoms["a"]: Justification((atoms["a"],), None, 1)}
        with pytest.raises(CyclicJustification):
            build_derivation_tree(atoms["a"], justifications, interner)

    def test_missing_premise_entry(self, interner, atoms):
        justifications = {atoms["b"]: Justification((atoms["a"],), None, 1)}
        with pytest.raises(KeyError):
            build_derivation_tree(atoms["b"], justifications, interner)


class TestTreeShape:

    @pytest.fixture
    def tree(self, family_records, settings):
        engine = SaturationEngine(family_records, settings=settings)
        return engine.query(Atom("grandparent", "ann", "cid"))

    def test_depth_and_size(self, tree):
        assert tree.depth == 1
        assert tree.size == 3

    def test_walk_is_preorder(self, tree):
        assert [node.atom for node in tree.walk()] == [
            Atom("grandparent", "ann", "cid"),
            Atom("parent", "ann", "bob"),
            Atom("parent", "bob", "cid"),
        ]

    def test_to_dict(self, tree):
        data = tree.to_dict()
        assert data["atom"] == "grandparent(ann, cid)"
        assert data["rule"] == "parent(?X, ?Y), parent(?Y, ?Z) => grandparent(?X, ?Z)."
        assert data["children"][0] == {"atom": "parent(ann, bob)", "rule": None, "children": []}
