"""Unit tests for the WHERE compiler."""

from __future__ import annotations

import re

import pytest

from withsql.compile.clause_builders import WhereBuilder
from withsql.compile.context import CompilationContext, KeyPath, StatementContext
from withsql.compile.postgres import PostgresCompiler
from withsql.config import BuilderConfig
from withsql.errors import CompilationError
from withsql.schema.values import UNSET

CTX = CompilationContext(compiler=PostgresCompiler(), config=BuilderConfig())


def _where(spec) -> tuple[str, list]:
    statement = StatementContext()
    clause = WhereBuilder(CTX, statement).build_clause(spec)
    return clause, statement.values


def test_scalar_equality_is_snake_cased():
    assert _where({"createdBy": "abc"}) == ("WHERE created_by = $1", ["abc"])


def test_or_with_in_list():
    clause, values = _where({"or": {"name": {"in": "1,2,3"}}})
    assert clause == "WHERE (name::TEXT = ANY(STRING_TO_ARRAY($1, ',')::TEXT[]))"
    assert values == ["1,2,3"]


def test_in_accepts_a_list():
    clause, values = _where({"id": {"in": ["a", "b"]}})
    assert clause == "WHERE id::TEXT = ANY(STRING_TO_ARRAY($1, ',')::TEXT[])"
    assert values == ["a,b"]


def test_string_spec_is_used_verbatim():
    assert _where("created_by = 'x'") == ("WHERE created_by = 'x'", [])


def test_empty_spec_emits_nothing():
    assert _where({}) == ("", [])
    assert _where(None) == ("", [])
    assert _where("") == ("", [])


def test_unset_entries_are_dropped_and_none_binds_null():
    clause, values = _where({"a": 1, "b": UNSET, "c": None})
    assert clause == "WHERE a = $1 AND c = $2"
    assert values == [1, None]


def test_operators_under_one_column_are_flattened_into_the_or():
    clause, values = _where(
        {"or": {"name": {"in": "1,2", "isNull": True}, "createdBy": "u"}}
    )
    assert clause == (
        "WHERE (name::TEXT = ANY(STRING_TO_ARRAY($1, ',')::TEXT[])"
        " OR name IS NULL OR created_by = $2)"
    )
    assert values == ["1,2", "u"]


def test_nested_and_inside_or():
    clause, values = _where({"or": {"and": {"a": 1, "b": 2}, "c": 3}})
    assert clause == "WHERE ((a = $1 AND b = $2) OR c = $3)"
    assert values == [1, 2, 3]


def test_is_null_takes_no_parameter():
    assert _where({"deletedAt": {"isNull": True}}) == ("WHERE deleted_at IS NULL", [])


def test_is_null_false_negates():
    assert _where({"deletedAt": {"isNull": False}}) == ("WHERE deleted_at IS NOT NULL", [])


def test_ilike_binds_raw_search_term():
    clause, values = _where({"title": {"ilike": "foo"}})
    assert clause == "WHERE title ILIKE '%' || $1::text || '%'"
    assert values == ["foo"]


def test_raw_string_subquery():
    clause, values = _where({"name": {"raw": "SELECT name FROM words LIMIT 1"}})
    assert clause == "WHERE name = (SELECT name FROM words LIMIT 1)"
    assert values == []


def test_raw_query_values_are_appended_in_order():
    clause, values = _where(
        {
            "createdBy": "u",
            "name": {
                "raw": {
                    "query": "SELECT w.name FROM words w WHERE w.id = $2",
                    "values": ["id1"],
                }
            },
        }
    )
    assert clause == (
        "WHERE created_by = $1 AND name = (SELECT w.name FROM words w WHERE w.id = $2)"
    )
    assert values == ["u", "id1"]


def test_qualified_column_keeps_its_table():
    assert _where({"word.createdBy": "u"}) == ("WHERE word.created_by = $1", ["u"])


def test_list_value_binds_as_one_array_parameter():
    assert _where({"tags": ["a", "b"]}) == ("WHERE tags = $1", [["a", "b"]])


def test_empty_or_emits_nothing():
    assert _where({"or": {"a": UNSET}}) == ("", [])


def test_placeholder_count_matches_values():
    spec = {
        "or": {"name": {"in": "1,2", "ilike": "x"}, "createdBy": "u"},
        "status": "open",
        "deletedAt": {"isNull": True},
    }
    clause, values = _where(spec)
    indexes = [int(n) for n in re.findall(r"\$(\d+)", clause)]
    assert len(indexes) == len(values) == 4
    assert max(indexes) == len(values)


def test_compiling_twice_is_idempotent():
    spec = {"or": {"name": {"in": "1,2,3"}, "createdBy": "u"}, "id": 7}
    assert _where(spec) == _where(spec)


def test_operator_without_column_raises():
    with pytest.raises(CompilationError) as exc_info:
        _where({"in": "1,2"})
    assert exc_info.value.clause == "WHERE"
    assert exc_info.value.path == ["in"]


def test_operator_directly_under_keyword_raises():
    with pytest.raises(CompilationError):
        _where({"or": {"ilike": "x"}})


def test_boolean_keyword_needs_mapping():
    with pytest.raises(CompilationError):
        _where({"and": "a = 1"})


def test_invalid_raw_shapes_raise():
    with pytest.raises(CompilationError):
        _where({"name": {"raw": 5}})
    with pytest.raises(CompilationError):
        _where({"name": {"raw": {"values": [1]}}})


def test_ilike_rejects_collections():
    with pytest.raises(CompilationError):
        _where({"title": {"ilike": ["a"]}})


def test_unsupported_spec_type_raises():
    with pytest.raises(CompilationError):
        _where(["a", "b"])


def test_key_path_is_restored_after_errors():
    path = KeyPath()
    builder = WhereBuilder(CTX, StatementContext())
    with pytest.raises(CompilationError):
        builder.build({"or": {"name": {"raw": 5}}}, path)
    assert len(path) == 0


def test_key_path_column_and_parent():
    path = KeyPath()
    with path.descend("or"), path.descend("name"), path.descend("in"):
        assert path.column == "in"
        assert path.parent == "name"
        assert path.as_list() == ["or", "name", "in"]
    assert path.column is None
    assert path.parent is None


@pytest.mark.parametrize("flag", [True, None, 1])
def test_is_null_only_negates_for_false(flag):
    assert _where({"deletedAt": {"isNull": flag}}) == ("WHERE deleted_at IS NULL", [])
