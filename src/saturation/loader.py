"""
saturation/loader.py - Rule records from structured documents

The engine consumes parsed records; this module is the default parser. It
reads JSON or YAML documents (YAML being a superset of JSON):

    rules:
      - fact: {predicate: bird, args: [tweety]}
      - premises:
          - {predicate: bird, args: [X]}
        conclusion: {predicate: flies, args: [X]}

Argument forms:
- {type: var, name: X} / {type: const, value: tweety}
- bare strings: variables when capitalised or starting with "_", else constants
- numbers and booleans: constants
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import yaml

from .errors import LoadError, ParseRejected
from .terms import Atom, Constant, Rule, TermLike, Variable

PathLike = Union[str, Path]
RECORD_SUFFIXES = (".yaml", ".yml", ".json")


def parse_records(text: str) -> List[Rule]:
    """Parse a JSON/YAML document into rule records.

    Raises:
        ParseRejected: invalid YAML or unexpected structure
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseRejected(f"Invalid rule document: {e}") from e
    return records_from_dict(data)


def records_from_dict(data: Any) -> List[Rule]:
    """Build records from an already-decoded document."""
    if data is None:
        return []
    if isinstance(data, dict):
        if "rules" not in data:
            raise ParseRejected("Rule document must have a 'rules' list")
        data = data["rules"] or []
    if not isinstance(data, list):
        raise ParseRejected(f"Expected a list of records, got {type(data).__name__}")

    return [_dict_to_rule(entry, i) for i, entry in enumerate(data)]


def records_to_dict(rules: Iterable[Rule]) -> Dict[str, Any]:
    """Export records in the explicit argument form."""
    out = []
    for rule in rules:
        if rule.is_axiom:
            out.append({"fact": _atom_to_dict(rule.conclusion)})
        else:
            out.append({
                "premises": [_atom_to_dict(p) for p in rule.premises],
                "conclusion": _atom_to_dict(rule.conclusion),
            })
    return {"rules": out}


def load_records(path: PathLike) -> List[Rule]:
    """Load records from a JSON/YAML file.

    Raises:
        LoadError: file unreadable
        ParseRejected: content malformed
    """
    return parse_records(read_text(path))


def dump_records(rules: Iterable[Rule], path: PathLike) -> None:
    """Save records; JSON for .json files, YAML otherwise."""
    data = records_to_dict(rules)
    with open(path, 'w', encoding="utf-8") as f:
        if str(path).endswith(".json"):
            json.dump(data, f, indent=2, ensure_ascii=False)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def read_text(path: PathLike) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise LoadError(f"Cannot read rule source {path}: {e}") from e


def read_source(source: PathLike) -> str:
    """Text behind a path, or the source itself when it is not a file.

    Path objects are always read; single-line strings are read when they
    name an existing file or end in a record-file suffix.
    """
    if isinstance(source, Path):
        return read_text(source)
    if "\n" not in source and (
        os.path.isfile(source) or source.strip().lower().endswith(RECORD_SUFFIXES)
    ):
        return read_text(source)
    return source


# -----------------------------------------------------------------------------
# Conversion helpers
# -----------------------------------------------------------------------------


def _dict_to_rule(entry: Any, position: int) -> Rule:
    if not isinstance(entry, dict):
        raise ParseRejected(f"Record {position}: expected a mapping, got {entry!r}")

    if "fact" in entry:
        return Rule([], _dict_to_atom(entry["fact"], position))

    if "conclusion" not in entry:
        raise ParseRejected(f"Record {position}: missing 'conclusion'")
    premises = entry.get("premises") or []
    if not isinstance(premises, list):
        raise ParseRejected(f"Record {position}: 'premises' must be a list")
    return Rule(
        [_dict_to_atom(p, position) for p in premises],
        _dict_to_atom(entry["conclusion"], position),
    )


def _dict_to_atom(data: Any, position: int) -> Atom:
    if not isinstance(data, dict) or not isinstance(data.get("predicate"), str):
        raise ParseRejected(f"Record {position}: atom needs a 'predicate' string, got {data!r}")
    args = data.get("args") or []
    if not isinstance(args, list):
        raise ParseRejected(f"Record {position}: 'args' must be a list")
    return Atom(data["predicate"], *(_dict_to_term(arg, position) for arg in args))


def _dict_to_term(data: Any, position: int) -> TermLike:
    if isinstance(data, dict):
        t = data.get("type")
        if t == "var" and isinstance(data.get("name"), str):
            return Variable(data["name"])
        elif t == "const" and "value" in data:
            return Constant(_scalar(data["value"]))
        raise ParseRejected(f"Record {position}: unknown term {data!r}")
    if isinstance(data, str):
        if data[:1].isupper() or data.startswith("_"):
            return Variable(data)
        return Constant(data)
    if isinstance(data, (bool, int, float)):
        return Constant(_scalar(data))
    raise ParseRejected(f"Record {position}: unsupported term {data!r}")


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _atom_to_dict(atom: Atom) -> Dict[str, Any]:
    return {
        "predicate": atom.predicate,
        "args": [_term_to_dict(arg) for arg in atom.args],
    }


def _term_to_dict(term: TermLike) -> Dict[str, str]:
    if isinstance(term, Variable):
        return {"type": "var", "name": term.name}
    return {"type": "const", "value": term.name}
