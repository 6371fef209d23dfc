"""Tests for RowFactory and DBError."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest
from pydantic import BaseModel

from withsql import DBError, DBErrorCode, ParseError, RowFactory


class Word(BaseModel):
    id: str
    name: str
    createdBy: str
    createdDate: Optional[datetime] = None


ROW = {"id": "1", "name": "hello", "created_by": "u", "created_date": "2024-01-02T03:04:05"}


def test_single_row_maps_to_model():
    word = RowFactory(ROW).to(Word)
    assert word.createdBy == "u"
    assert word.createdDate == datetime(2024, 1, 2, 3, 4, 5)


def test_list_uses_first_row():
    rows = [ROW, {**ROW, "id": "2"}]
    assert RowFactory(rows).to(Word).id == "1"


def test_to_list_maps_every_row():
    rows = [ROW, {**ROW, "id": "2"}]
    assert [w.id for w in RowFactory(rows).to_list(Word)] == ["1", "2"]


@pytest.mark.parametrize("data", [None, []])
def test_missing_row_raises_not_found(data):
    with pytest.raises(DBError) as exc_info:
        RowFactory(data).to(Word)
    assert exc_info.value.code is DBErrorCode.NOT_FOUND
    assert exc_info.value.to_error_response() == {
        "error": "404",
        "message": "Entity could not be found",
    }


def test_to_list_of_nothing_is_empty():
    assert RowFactory(None).to_list(Word) == []


def test_to_camel_key_converts_nested_keys():
    data = {"word_id": 1, "tag_list": [{"tag_name": "a"}]}
    assert RowFactory(data).to_camel_key() == {"wordId": 1, "tagList": [{"tagName": "a"}]}


def test_row_that_does_not_match_is_a_parse_error():
    with pytest.raises(ParseError):
        RowFactory({"id": "1"}).to(Word)


def test_db_error_of_mapping():
    error = DBError.of({"message": "gone", "code": "404"})
    assert str(error) == "gone"
    assert error.code is DBErrorCode.NOT_FOUND


def test_db_error_of_string_without_code():
    error = DBError.of("boom")
    assert error.to_error_response() == {"error": None, "message": "boom"}
