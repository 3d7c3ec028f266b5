"""
tests/test_loader.py - Rule record documents
"""

import json

import pytest

from saturation import (
    Atom,
    Constant,
    LoadError,
    ParseRejected,
    Rule,
    Variable,
    dump_records,
    load_records,
    parse_records,
)
from saturation.loader import read_source, records_from_dict, records_to_dict

X = Variable("X")


# =============================================================================
# PARSING
# =============================================================================


class TestParse:

    def test_yaml_document(self):
        text = """
rules:
  - fact: {predicate: bird, args: [tweety]}
  - premises:
      - {predicate: bird, args: [X]}
    conclusion: {predicate: flies, args: [X]}
"""
        assert parse_records(text) == [
            Rule([], Atom("bird", "tweety")),
            Rule([Atom("bird", X)], Atom("flies", X)),
        ]

    def test_json_document(self):
        text = json.dumps([
            {"premises": [], "conclusion": {"predicate": "rain", "args": []}},
        ])
        assert parse_records(text) == [Rule([], Atom("rain"))]

    def test_explicit_term_forms(self):
        records = records_from_dict({"rules": [{
            "premises": [{"predicate": "likes", "args": [
                {"type": "var", "name": "who"},
                {"type": "const", "value": "Pizza"},
            ]}],
            "conclusion": {"predicate": "hungry", "args": [{"type": "var", "name": "who"}]},
        }]})
        assert records[0].premises[0].args == (Variable("who"), Constant("Pizza"))

    def test_bare_string_convention(self):
        records = records_from_dict([
            {"fact": {"predicate": "p", "args": ["lower", "Upper", "_anon"]}},
        ])
        assert records[0].conclusion.args == (Constant("lower"), Variable("Upper"), Variable("_anon"))

    def test_scalars_become_constants(self):
        records = records_from_dict([{"fact": {"predicate": "age", "args": [42, 1.5, True]}}])
        assert records[0].conclusion == Atom("age", "42", "1.5", "true")

    def test_empty_document(self):
        assert parse_records("") == []
        assert parse_records("rules: []") == []


class TestRejected:

    @pytest.mark.parametrize("text", [
        "rules: [",
        "just a string",
        "other: []",
        "rules: [1, 2]",
        "rules: [{premises: []}]",
        "rules: [{conclusion: {args: [a]}}]",
        "rules: [{conclusion: {predicate: p, args: a}}]",
        "rules: [{conclusion: {predicate: p, args: [{type: weird}]}}]",
        "rules: [{premises: {predicate: p}, conclusion: {predicate: q}}]",
    ])
    def test_malformed(self, text):
        with pytest.raises(ParseRejected):
            parse_records(text)

    def test_parse_rejected_is_load_error(self):
        assert issubclass(ParseRejected, LoadError)


# =============================================================================
# FILES
# =============================================================================


class TestFiles:

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError):
            load_records(tmp_path / "missing.yaml")

    @pytest.mark.parametrize("name", ["rules.yaml", "rules.json"])
    def test_dump_then_load(self, tmp_path, family_records, name):
        path = tmp_path / name
        dump_records(family_records, path)
        assert load_records(path) == family_records

    def test_json_dump_is_json(self, tmp_path, bird_records):
        path = tmp_path / "rules.json"
        dump_records(bird_records, path)
        data = json.loads(path.read_text())
        assert data == records_to_dict(bird_records)

    def test_missing_file_named_by_string(self, tmp_path):
        with pytest.raises(LoadError) as exc_info:
            read_source(str(tmp_path / "family.yaml"))
        assert not isinstance(exc_info.value, ParseRejected)

    @pytest.mark.parametrize("name", ["rules.yaml", "rules.json"])
    def test_non_ascii_names_round_trip(self, tmp_path, name):
        records = [Rule([], Atom("ville", "Zürich")), Rule([], Atom("oiseau", "pingüino"))]
        path = tmp_path / name
        dump_records(records, path)
        assert "Zürich" in path.read_bytes().decode("utf-8")
        assert load_records(path) == records

    def test_read_source(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: []")
        assert read_source(path) == "rules: []"
        assert read_source(str(path)) == "rules: []"
        assert read_source("rules: []") == "rules: []"
