"""
saturation/engine.py - Forward-chaining saturation

Starts from seed axioms and applies every rule to every selection of known
facts, round after round, until the queried fact appears or a round adds
nothing (fixpoint).

    p, p => q  |=  q

Each round reads a snapshot of the fact set and only then commits what it
found, so a fact is always justified by facts from earlier rounds. The
justification map records the first derivation of every fact and is what
derivation trees are rebuilt from.

Evaluation is naive (non-incremental): a k-premise rule is tried against
every k-subset of the whole fact set in every round.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any

from .config import SaturationSettings, get_settings
from .derivation import DerivationTree, Justification, build_derivation_tree
from .errors import (
    AssignFailure,
    DerivedBottom,
    LoadError,
    ParseRejected,
    ResourceExhausted,
    Saturated,
)
from .identifiers import IdentifierInterner
from .loader import PathLike, dump_records, parse_records, read_source, records_to_dict
from .terms import (
    Atom,
    InnerAtom,
    InnerRule,
    Rule,
    intern_atom,
    intern_rule,
    resolve_atom,
    resolve_rule,
)
from .unification import AssignedRule, assign

logger = logging.getLogger(__name__)

RecordParser = Callable[[str], Iterable[Rule]]


class SaturationEngine:
    """Fact set, rule set and justification map for one rule source.

    Example:
        engine = SaturationEngine([
            Rule([], Atom("bird", "tweety")),
            Rule([Atom("bird", X)], Atom("flies", X)),
        ])
        tree = engine.query(Atom("flies", "tweety"))
        tree.leaves()   # [bird(tweety)]
    """

    def __init__(
        self,
        records: Iterable[Rule] = (),
        settings: SaturationSettings | None = None,
    ):
        self.settings = settings or get_settings()
        self._interner = IdentifierInterner()

        # Fact -> generation it was inserted in; insertion-ordered
        self._facts: dict[InnerAtom, int] = {}
        self._justifications: dict[InnerAtom, Justification] = {}
        # Insertion-ordered set of generative rules
        self._rules: dict[InnerRule, None] = {}

        self._generation = 0
        self._contradiction: InnerAtom | None = None
        self._bottom = (
            self._interner.intern(self.settings.bottom_predicate)
            if self.settings.bottom_predicate
            else None
        )

        self._stats = {
            "rounds": 0,
            "candidates_tried": 0,
            "candidates_rejected": 0,
            "facts_derived": 0,
            "queries": 0,
        }

        for record in records:
            self.add_record(record)

        logger.info(f"Loaded {len(self._rules)} rules and {len(self._facts)} axioms")

    @classmethod
    def from_source(
        cls,
        source: PathLike,
        parser: RecordParser | None = None,
        settings: SaturationSettings | None = None,
    ) -> SaturationEngine:
        """Build an engine from a rule file path or rule text.

        Args:
            source: a Path, a string naming an existing file, or the text itself
            parser: turns text into records (default: JSON/YAML record documents)
            settings: engine settings (default: environment)

        Raises:
            LoadError: the source could not be read
            ParseRejected: the parser failed on the text
        """
        text = read_source(source)
        parser = parser or parse_records
        try:
            records = list(parser(text))
        except LoadError:
            raise
        except Exception as e:
            raise ParseRejected(f"Parser rejected rule source: {e}") from e
        return cls(records, settings=settings)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def add_record(self, record: Rule) -> bool:
        """Add one parsed record; axioms go to the fact set, rules to the rule set.

        Returns:
            False if the axiom or rule was already present

        Raises:
            LoadError: an axiom with variables
        """
        if record.is_axiom:
            if not record.conclusion.is_ground():
                raise LoadError(f"Axiom must be ground, got {record.conclusion!r}")
            return self.add_axiom(record.conclusion)

        rule = intern_rule(record, self._interner)
        if rule in self._rules:
            return False
        self._rules[rule] = None
        return True

    def add_axiom(self, atom: Atom) -> bool:
        """Seed a ground fact with an empty justification.

        Returns:
            False if the fact was already known
        """
        inserted = self._insert(intern_atom(atom, self._interner), Justification())
        if inserted and self._contradiction is not None:
            logger.warning(f"Seed axiom {atom!r} is a contradiction")
        return inserted

    def _insert(self, atom: InnerAtom, justification: Justification) -> bool:
        # Sole writer of the fact set and the justification map
        if atom in self._facts:
            return False
        self._facts[atom] = justification.generation
        self._justifications[atom] = justification
        if self._contradiction is None and self._is_bottom(atom):
            self._contradiction = atom
        return True

    def _is_bottom(self, atom: InnerAtom) -> bool:
        return self._bottom is not None and atom.predicate == self._bottom

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def query(self, target: Atom) -> DerivationTree:
        """Saturate until `target` is known and return its derivation.

        Raises:
            Saturated: a round derived nothing and target is still unknown
            DerivedBottom: the rule set is contradictory
            ResourceExhausted: a configured ceiling was reached
            ValueError: target is not ground
        """
        self._stats["queries"] += 1
        self._check_consistent()
        inner = intern_atom(target, self._interner)

        rounds = 0
        while inner not in self._facts:
            self._check_ceilings(rounds)
            try:
                inserted = self.saturate_round()
            except DerivedBottom:
                logger.warning(f"Query {target!r} aborted: rule set is contradictory")
                raise
            rounds += 1
            if inserted == 0:
                logger.info(f"Query {target!r} not entailed ({len(self._facts)} facts at fixpoint)")
                raise Saturated(f"{target!r} is not entailed by the rule set")

        logger.info(f"Query {target!r} proved after {rounds} rounds")
        return self._tree(inner)

    def saturate(self) -> int:
        """Run rounds until a fixpoint.

        Returns:
            number of productive rounds

        Raises:
            DerivedBottom: the rule set is contradictory
            ResourceExhausted: a configured ceiling was reached
        """
        rounds = 0
        while True:
            self._check_ceilings(rounds)
            if self.saturate_round() == 0:
                break
            rounds += 1
        logger.info(f"Fixpoint reached after {rounds} productive rounds, {len(self._facts)} facts")
        return rounds

    def saturate_round(self) -> int:
        """One fixpoint step over a snapshot of the fact set.

        Every candidate is computed before any is committed; when several
        candidates share a conclusion the first one found justifies it.

        Returns:
            number of facts inserted (0 means fixpoint)

        Raises:
            DerivedBottom: the engine was already, or has just become, inconsistent
        """
        self._check_consistent()
        generation = self._generation + 1
        snapshot = list(self._facts)

        candidates: list[AssignedRule] = []
        tried = rejected = 0
        for rule in self._rules:
            for facts in self._candidate_tuples(snapshot, len(rule.premises)):
                tried += 1
                try:
                    candidates.append(assign(rule, facts))
                except AssignFailure:
                    rejected += 1

        inserted = 0
        for candidate in candidates:
            justification = Justification(candidate.premises, candidate.rule, generation)
            if self._insert(candidate.conclusion, justification):
                inserted += 1
                if self._contradiction is not None:
                    break

        if inserted:
            self._generation = generation
        self._stats["rounds"] += 1
        self._stats["candidates_tried"] += tried
        self._stats["candidates_rejected"] += rejected
        self._stats["facts_derived"] += inserted
        logger.debug(
            f"Round {generation}: {tried} candidates, {rejected} discarded, "
            f"{inserted} new facts ({len(self._facts)} total)"
        )

        self._check_consistent()
        return inserted

    def _candidate_tuples(
        self, snapshot: Sequence[InnerAtom], k: int
    ) -> Iterator[tuple[InnerAtom, ...]]:
        if self.settings.exhaustive_matching:
            return itertools.product(snapshot, repeat=k)
        return itertools.combinations(snapshot, k)

    def _check_ceilings(self, rounds: int) -> None:
        max_rounds = self.settings.max_rounds
        if max_rounds is not None and rounds >= max_rounds:
            logger.warning(f"Round ceiling {max_rounds} reached")
            raise ResourceExhausted("round", max_rounds, rounds)
        max_facts = self.settings.max_facts
        if max_facts is not None and len(self._facts) >= max_facts:
            logger.warning(f"Fact ceiling {max_facts} reached with {len(self._facts)} facts")
            raise ResourceExhausted("fact", max_facts, rounds)

    def _check_consistent(self) -> None:
        if self._contradiction is not None:
            atom = resolve_atom(self._contradiction, self._interner)
            raise DerivedBottom(atom, self._tree(self._contradiction))

    def _tree(self, inner: InnerAtom) -> DerivationTree | None:
        return build_derivation_tree(inner, self._justifications, self._interner)

    def _lookup(self, atom: Atom) -> InnerAtom | None:
        """Internal form of a ground atom whose names are all known, else None."""
        if not atom.is_ground():
            return None
        predicate = self._interner.lookup(atom.predicate)
        args = [self._interner.lookup(arg.name) for arg in atom.args]
        if predicate is None or any(arg is None for arg in args):
            return None
        return InnerAtom(predicate, tuple(args))

    def contains(self, atom: Atom) -> bool:
        """True if `atom` is currently in the fact set (no saturation)."""
        inner = self._lookup(atom)
        return inner is not None and inner in self._facts

    __contains__ = contains

    def derivation_tree(self, atom: Atom) -> DerivationTree | None:
        """Derivation of a known fact, or None if it is not in the fact set."""
        inner = self._lookup(atom)
        if inner is None:
            return None
        return self._tree(inner)

    def generation_of(self, atom: Atom) -> int | None:
        """Round in which `atom` entered the fact set (0 for seeds)."""
        inner = self._lookup(atom)
        if inner is None:
            return None
        return self._facts.get(inner)

    # -------------------------------------------------------------------------
    # Surface views
    # -------------------------------------------------------------------------

    @property
    def rules(self) -> list[Rule]:
        return [resolve_rule(rule, self._interner) for rule in self._rules]

    @property
    def facts(self) -> list[Atom]:
        return [resolve_atom(atom, self._interner) for atom in self._facts]

    @property
    def axioms(self) -> list[Atom]:
        """Seed facts only."""
        return [
            resolve_atom(atom, self._interner)
            for atom, justification in self._justifications.items()
            if justification.is_seed
        ]

    def justifications(self) -> dict[Atom, list[Atom]]:
        """Every fact with the premises of its recorded derivation."""
        return {
            resolve_atom(atom, self._interner): [
                resolve_atom(p, self._interner) for p in justification.premises
            ]
            for atom, justification in self._justifications.items()
        }

    @property
    def is_inconsistent(self) -> bool:
        return self._contradiction is not None

    @property
    def contradiction(self) -> Atom | None:
        if self._contradiction is None:
            return None
        return resolve_atom(self._contradiction, self._interner)

    @property
    def fact_count(self) -> int:
        return len(self._facts)

    @property
    def rule_count(self) -> int:
        return len(self._rules)

    @property
    def stats(self) -> dict[str, int]:
        return dict(self._stats)

    def records(self) -> list[Rule]:
        """Current state as records: one axiom per known fact, then the rules."""
        return [Rule([], fact) for fact in self.facts] + self.rules

    def to_dict(self) -> dict[str, Any]:
        return records_to_dict(self.records())

    def dump(self, path: str | Path) -> None:
        """Save the current state as a record document."""
        dump_records(self.records(), path)
