import pytest

from tableref.dto.address import Address, CellRange
from tableref.errors import ParseError
from tableref.selector import find_selectors, is_range_selector, parse_basic, parse_range


def test_parse_basic_reads_row_first() -> None:
    address = parse_basic("#2-5")
    assert address == Address(x=5, y=2)
    assert address.to_selector() == "#2-5"


def test_parse_range_keeps_endpoints_as_written() -> None:
    cell_range = parse_range("#3-1:0-2")
    assert cell_range.start == Address(x=1, y=3)
    assert cell_range.end == Address(x=2, y=0)
    assert cell_range.to_selector() == "#3-1:0-2"


def test_is_range_selector() -> None:
    assert is_range_selector("=SUM(#0-0:1-1)")
    assert not is_range_selector("=SUM(#0-0, #1-1)")


def test_malformed_selectors_raise_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_basic("#a-b")
    with pytest.raises(ValueError):
        parse_range("#0-0")


def test_find_selectors_prefers_ranges() -> None:
    found = find_selectors("=SUM(#0-0:0-2) + #1-1")
    assert [text for text, _ in found] == ["#0-0:0-2", "#1-1"]
    assert isinstance(found[0][1], CellRange)
    assert found[1][1] == Address(x=1, y=1)


def test_find_selectors_does_not_check_existence() -> None:
    assert find_selectors("#999-999")[0][1] == Address(x=999, y=999)
    assert find_selectors("no selectors here") == []
