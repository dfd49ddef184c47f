"""Tests for sheetcrud.utils module."""

import pytest

from sheetcrud.utils import (
    MAX_COLUMNS,
    column_index_to_letter,
    letter_to_column_index,
    loose_equals,
    remove_none,
)


class TestColumnConversion:
    """Tests for column index to letter conversion."""

    def test_single_letters(self) -> None:
        assert column_index_to_letter(0) == "A"
        assert column_index_to_letter(1) == "B"
        assert column_index_to_letter(25) == "Z"

    def test_double_letters(self) -> None:
        assert column_index_to_letter(26) == "AA"
        assert column_index_to_letter(27) == "AB"
        assert column_index_to_letter(51) == "AZ"
        assert column_index_to_letter(52) == "BA"
        assert column_index_to_letter(701) == "ZZ"

    def test_triple_letters(self) -> None:
        assert column_index_to_letter(702) == "AAA"
        assert column_index_to_letter(MAX_COLUMNS - 1) == "ZZZ"

    def test_letter_to_index(self) -> None:
        assert letter_to_column_index("A") == 0
        assert letter_to_column_index("B") == 1
        assert letter_to_column_index("Z") == 25
        assert letter_to_column_index("AA") == 26
        assert letter_to_column_index("AB") == 27
        assert letter_to_column_index("ZZ") == 701
        assert letter_to_column_index("AAA") == 702
        assert letter_to_column_index("ZZZ") == MAX_COLUMNS - 1

    def test_lowercase_letters(self) -> None:
        assert letter_to_column_index("c") == 2

    def test_roundtrip(self) -> None:
        for i in range(MAX_COLUMNS):
            letter = column_index_to_letter(i)
            assert letter_to_column_index(letter) == i

    def test_index_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            column_index_to_letter(-1)
        with pytest.raises(ValueError):
            column_index_to_letter(MAX_COLUMNS)

    def test_invalid_letters(self) -> None:
        with pytest.raises(ValueError):
            letter_to_column_index("")
        with pytest.raises(ValueError):
            letter_to_column_index("A1")


class TestLooseEquals:
    """Tests for cell value comparison."""

    def test_numeric_string_matches_number(self) -> None:
        assert loose_equals("1", 1)
        assert loose_equals(1, "1")
        assert loose_equals("1.0", 1)
        assert loose_equals(" 2 ", 2.0)
        assert loose_equals("1e3", 1000)

    def test_strings(self) -> None:
        assert loose_equals("France", "France")
        assert not loose_equals("France", "france")
        assert not loose_equals("1", "one")

    def test_numbers_compare_by_value(self) -> None:
        assert loose_equals("01", "1")
        assert not loose_equals("1", 2)

    def test_none_is_empty_cell(self) -> None:
        assert loose_equals("", None)
        assert not loose_equals("0", None)

    def test_bool_is_not_numeric(self) -> None:
        assert not loose_equals("1", True)
        assert loose_equals("True", True)


class TestRemoveNone:
    """Tests for null sanitation before writes."""

    def test_scalar(self) -> None:
        assert remove_none(None) == ""
        assert remove_none(5) == 5

    def test_nested(self) -> None:
        assert remove_none([["a", None], [None, 2]]) == [["a", ""], ["", 2]]

    def test_mapping(self) -> None:
        assert remove_none({"a": None, "b": [None]}) == {"a": "", "b": [""]}
