"""Tests for gridcalc address helpers."""

from __future__ import annotations

import pytest

from gridcalc import Address, address_label, column_index, column_label, parse_address
from gridcalc._address import coerce_address


class TestColumnLabel:
    def test_single_letters(self) -> None:
        assert column_label(0) == "A"
        assert column_label(25) == "Z"

    def test_double_letters(self) -> None:
        assert column_label(26) == "AA"
        assert column_label(27) == "AB"
        assert column_label(701) == "ZZ"

    def test_triple_letters(self) -> None:
        assert column_label(702) == "AAA"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_label(-1)

    def test_column_index_inverse(self) -> None:
        for i in range(0, 2000):
            assert column_index(column_label(i)) == i

    @pytest.mark.parametrize("letters", ["", "a", "A1", "Ä"])
    def test_column_index_rejects(self, letters: str) -> None:
        with pytest.raises(ValueError):
            column_index(letters)


class TestParseAddress:
    def test_simple(self) -> None:
        assert parse_address("A1") == Address(column=0, row=0)
        assert parse_address("C7") == Address(column=2, row=6)
        assert parse_address("AB12") == Address(column=27, row=11)

    def test_leading_zero_row(self) -> None:
        assert parse_address("A01") == Address(column=0, row=0)

    @pytest.mark.parametrize("label", ["", "A", "1", "A0", "a1", "A1B", " A1", "$A$1", "A\u0661", "B\uff12"])
    def test_malformed(self, label: str) -> None:
        with pytest.raises(ValueError):
            parse_address(label)

    def test_roundtrip(self) -> None:
        for col in (0, 1, 25, 26, 51, 52, 701, 702, 18277):
            for row in (0, 1, 9, 99, 1048575):
                assert parse_address(column_label(col) + str(row + 1)) == Address(column=col, row=row)

    def test_label_roundtrip(self) -> None:
        for label in ("A1", "Z99", "AA100", "XFD1048576"):
            assert parse_address(label).label == label


class TestAddress:
    def test_equality_and_hash(self) -> None:
        a = Address(column=3, row=4)
        b = Address(column=3, row=4)
        assert a == b
        assert hash(a) == hash(b)
        assert a != Address(column=4, row=3)

    def test_negative_components_rejected(self) -> None:
        with pytest.raises(ValueError):
            Address(column=-1, row=0)
        with pytest.raises(ValueError):
            Address(column=0, row=-1)

    def test_row_major_ordering(self) -> None:
        cells = [parse_address(x) for x in ("B2", "A2", "C1", "A1")]
        assert [c.label for c in sorted(cells)] == ["A1", "C1", "A2", "B2"]

    def test_str_is_label(self) -> None:
        assert str(Address(column=1, row=2)) == "B3"
        assert address_label(1, 2) == "B3"

    def test_coerce(self) -> None:
        addr = Address(column=0, row=0)
        assert coerce_address(addr) is addr
        assert coerce_address(" A1 ") == addr
        with pytest.raises(TypeError):
            coerce_address(1)  # type: ignore[arg-type]
