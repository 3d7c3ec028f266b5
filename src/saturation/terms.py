"""
saturation/terms.py - Atom and Rule model

Two representations of the same structures:

Surface form (public boundary, human-readable names):
- Constant: a named individual (e.g. tweety)
- Variable: a placeholder scoped to one rule record (e.g. X)
- Atom: predicate applied to constants/variables (e.g. bird(tweety))
- Rule: premises => conclusion; no premises means an axiom

Internal form (engine state, interned identifiers):
- Slot: a variable position local to one InnerRule
- InnerAtom: predicate identifier over identifiers/slots
- InnerRule: premises and conclusion over one slot numbering

Terms are flat: arguments are constants or variables, never nested atoms.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

from .identifiers import Identifier, IdentifierInterner


# =============================================================================
# SURFACE FORM
# =============================================================================


@dataclass(frozen=True)
class Variable:
    """Logical variable, scoped to the rule record it appears in.

    By convention variable names start with uppercase (X, Parent).
    """
    name: str

    def is_ground(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"?{self.name}"


@dataclass(frozen=True)
class Constant:
    """Named individual."""
    name: str

    def is_ground(self) -> bool:
        return True

    def __repr__(self) -> str:
        return self.name


TermLike = Union[Variable, Constant]


@dataclass(frozen=True)
class Atom:
    """Predicate applied to an ordered tuple of arguments.

    Example:
        Atom("parent", "ann", Variable("X"))   # parent(ann, ?X)
    """
    predicate: str
    args: tuple[TermLike, ...] = field(default_factory=tuple)

    def __init__(self, predicate: str, *args: TermLike | str):
        # Plain strings are constants
        processed = []
        for arg in args:
            if isinstance(arg, (Variable, Constant)):
                processed.append(arg)
            elif isinstance(arg, str):
                processed.append(Constant(arg))
            else:
                raise TypeError(f"Unsupported argument {arg!r} for {predicate}")

        object.__setattr__(self, 'predicate', predicate)
        object.__setattr__(self, 'args', tuple(processed))

    @property
    def arity(self) -> int:
        return len(self.args)

    def is_ground(self) -> bool:
        return all(arg.is_ground() for arg in self.args)

    def variables(self) -> set[str]:
        return {arg.name for arg in self.args if isinstance(arg, Variable)}

    def __repr__(self) -> str:
        if not self.args:
            return self.predicate
        args_str = ", ".join(repr(arg) for arg in self.args)
        return f"{self.predicate}({args_str})"


@dataclass(frozen=True)
class Rule:
    """One parsed record: premises imply conclusion.

    A rule without premises is an axiom (its conclusion is a seed fact).

    Example:
        # parent(X, Y), parent(Y, Z) => grandparent(X, Z)
        Rule(
            [Atom("parent", X, Y), Atom("parent", Y, Z)],
            Atom("grandparent", X, Z),
        )
    """
    premises: tuple[Atom, ...]
    conclusion: Atom

    def __init__(self, premises: Iterable[Atom], conclusion: Atom):
        object.__setattr__(self, 'premises', tuple(premises))
        object.__setattr__(self, 'conclusion', conclusion)

    @property
    def is_axiom(self) -> bool:
        return len(self.premises) == 0

    def variables(self) -> set[str]:
        result = self.conclusion.variables()
        for premise in self.premises:
            result.update(premise.variables())
        return result

    def __repr__(self) -> str:
        if self.is_axiom:
            return f"{self.conclusion!r}."
        body = ", ".join(repr(p) for p in self.premises)
        return f"{body} => {self.conclusion!r}."


@dataclass
class Predicate:
    """Named relation with arity.

    Example:
        parent = Predicate("parent", 2)
        parent("ann", "bob")   # Atom("parent", "ann", "bob")
    """
    name: str
    arity: int

    def __call__(self, *args: TermLike | str) -> Atom:
        if len(args) != self.arity:
            raise ValueError(f"Predicate {self.name}/{self.arity} expects {self.arity} args, got {len(args)}")
        return Atom(self.name, *args)

    def __repr__(self) -> str:
        return f"{self.name}/{self.arity}"


def Axiom(predicate: str, *args: str) -> Rule:
    """Create an axiom record."""
    return Rule([], Atom(predicate, *args))


# =============================================================================
# INTERNAL FORM
# =============================================================================


@dataclass(frozen=True)
class Slot:
    """Variable position inside one InnerRule."""
    index: int

    def __repr__(self) -> str:
        return f"_{self.index}"


InnerTerm = Union[Identifier, Slot]


@dataclass(frozen=True)
class InnerAtom:
    predicate: Identifier
    args: tuple[InnerTerm, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.args)

    def is_ground(self) -> bool:
        return not any(isinstance(arg, Slot) for arg in self.args)


@dataclass(frozen=True)
class InnerRule:
    """Interned rule. Slots are numbered by first occurrence, premises first."""
    premises: tuple[InnerAtom, ...]
    conclusion: InnerAtom
    variable_count: int
    variable_names: tuple[str, ...] = field(default=(), compare=False)


def intern_atom(atom: Atom, interner: IdentifierInterner) -> InnerAtom:
    """Intern a ground atom.

    Raises:
        ValueError: if the atom contains a variable
    """
    if not atom.is_ground():
        raise ValueError(f"Expected a ground atom, got {atom!r}")
    return InnerAtom(
        interner.intern(atom.predicate),
        tuple(interner.intern(arg.name) for arg in atom.args),
    )


def _intern_scoped(atom: Atom, interner: IdentifierInterner, scope: dict[str, Slot]) -> InnerAtom:
    args: list[InnerTerm] = []
    for arg in atom.args:
        if isinstance(arg, Variable):
            slot = scope.get(arg.name)
            if slot is None:
                slot = Slot(len(scope))
                scope[arg.name] = slot
            args.append(slot)
        else:
            args.append(interner.intern(arg.name))
    return InnerAtom(interner.intern(atom.predicate), tuple(args))


def intern_rule(rule: Rule, interner: IdentifierInterner) -> InnerRule:
    """Intern a rule record, numbering its variables."""
    scope: dict[str, Slot] = {}
    premises = tuple(_intern_scoped(p, interner, scope) for p in rule.premises)
    conclusion = _intern_scoped(rule.conclusion, interner, scope)
    return InnerRule(premises, conclusion, len(scope), tuple(scope))


def resolve_atom(
    inner: InnerAtom,
    interner: IdentifierInterner,
    variable_names: Optional[Sequence[str]] = None,
) -> Atom:
    """Map an internal atom back to surface form.

    Slots become Variables named from `variable_names`; without names
    the atom must be ground.

    Raises:
        UnknownIdentifier: if an identifier came from another interner
        ValueError: for a slot with no name available
    """
    args: list[TermLike] = []
    for arg in inner.args:
        if isinstance(arg, Slot):
            if variable_names is None:
                raise ValueError(f"Cannot resolve unscoped variable slot {arg!r}")
            if arg.index < len(variable_names):
                args.append(Variable(variable_names[arg.index]))
            else:
                args.append(Variable(f"V{arg.index}"))
        else:
            args.append(Constant(interner.resolve(arg)))
    return Atom(interner.resolve(inner.predicate), *args)


def resolve_rule(inner: InnerRule, interner: IdentifierInterner) -> Rule:
    """Map an internal rule back to surface form."""
    return Rule(
        [resolve_atom(p, interner, inner.variable_names) for p in inner.premises],
        resolve_atom(inner.conclusion, interner, inner.variable_names),
    )
