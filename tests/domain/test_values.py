"""Tests for value types and text conversion."""

from __future__ import annotations

import pytest

from roperty.domain.errors import TypeMismatch
from roperty.domain.values import (
    ValueType,
    as_value_type,
    coerce,
    from_storage,
    infer_value_type,
    to_storage,
)


class TestAsValueType:
    def test_from_name(self) -> None:
        assert as_value_type("Integer") is ValueType.INTEGER

    def test_from_python_type(self) -> None:
        assert as_value_type(bool) is ValueType.BOOLEAN
        assert as_value_type(dict) is ValueType.JSON

    def test_none_passes_through(self) -> None:
        assert as_value_type(None) is None

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown value type"):
            as_value_type("decimal")

    def test_unsupported_python_type(self) -> None:
        with pytest.raises(ValueError, match="Unsupported"):
            as_value_type(bytes)


class TestInfer:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("x", ValueType.STRING),
            (1, ValueType.INTEGER),
            (True, ValueType.BOOLEAN),
            (1.5, ValueType.FLOAT),
            (["a"], ValueType.LIST),
            ({"a": 1}, ValueType.JSON),
        ],
    )
    def test_infer(self, value: object, expected: ValueType) -> None:
        assert infer_value_type(value) is expected


class TestStorage:
    def test_bool_is_lowercase(self) -> None:
        assert to_storage(True, ValueType.BOOLEAN) == "true"

    def test_list_as_json(self) -> None:
        assert to_storage(("a", "b"), ValueType.LIST) == '["a", "b"]'

    def test_none_stays_none(self) -> None:
        assert to_storage(None, ValueType.INTEGER) is None
        assert from_storage(None, ValueType.INTEGER) is None

    def test_parse_numbers(self) -> None:
        assert from_storage("42", ValueType.INTEGER) == 42
        assert from_storage("2.5", ValueType.FLOAT) == 2.5

    @pytest.mark.parametrize("word", ["yes", "TRUE", "1", "on"])
    def test_parse_true_words(self, word: str) -> None:
        assert from_storage(word, ValueType.BOOLEAN) is True

    def test_parse_legacy_comma_list(self) -> None:
        assert from_storage("a, b,c", ValueType.LIST) == ["a", "b", "c"]

    def test_parse_json_list(self) -> None:
        assert from_storage('["a", 1]', ValueType.LIST) == ["a", 1]

    def test_broken_json_list(self) -> None:
        with pytest.raises(TypeMismatch):
            from_storage('[1', ValueType.LIST)

    def test_bad_integer(self) -> None:
        with pytest.raises(TypeMismatch) as exc_info:
            from_storage("ten", ValueType.INTEGER)
        assert exc_info.value.expected == "integer"


class TestCoerce:
    def test_matching_type_passes_through(self) -> None:
        assert coerce(5, ValueType.INTEGER) == 5

    def test_string_parsed(self) -> None:
        assert coerce("5", ValueType.INTEGER) == 5
        assert coerce("off", ValueType.BOOLEAN) is False

    def test_int_widens_to_float(self) -> None:
        assert coerce(2, ValueType.FLOAT) == 2.0

    def test_bool_is_not_an_integer(self) -> None:
        with pytest.raises(TypeMismatch):
            coerce(True, ValueType.INTEGER)

    def test_number_is_not_a_string(self) -> None:
        with pytest.raises(TypeMismatch):
            coerce(5, ValueType.STRING)

    def test_none_passes_through(self) -> None:
        assert coerce(None, ValueType.LIST) is None

    def test_mismatch_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            coerce("abc", ValueType.FLOAT)
