import pytest

from auto_rewarder.constants import PRECISION
from auto_rewarder.formatters import (
    as_int,
    format_age,
    format_ratio,
    format_timestamp,
    format_units,
    parse_units,
    vault_key,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0),
        (True, 1),
        (False, 0),
        (5, 5),
        ("5", 5),
        ("  5  ", 5),
        ("0x10", 16),
        ("-500", -500),
    ],
)
def test_as_int(value, expected):
    assert as_int(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1000", 1000 * PRECISION),
        ("0.231", 231 * 10**15),
        (" 1.5 ", 15 * 10**17),
        (2, 2 * PRECISION),
        ("0.0000000000000000019", 1),
    ],
)
def test_parse_units(value, expected):
    assert parse_units(value) == expected


@pytest.mark.parametrize("value", ["abc", "", "NaN", "inf"])
def test_parse_units_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_units(value)


def test_format_units_and_ratio():
    assert format_units(77 * PRECISION) == "77"
    assert format_units(15 * 10**17) == "1.5"
    assert format_units(0) == "0"
    assert format_ratio(231 * 10**15) == "23.10%"


def test_format_age():
    assert format_age(59) == "0m"
    assert format_age(3 * 3600 + 120) == "3h 2m"
    assert format_age(86400 + 3600) == "1d 1h 0m"


def test_format_timestamp():
    assert format_timestamp(0) == "1970-01-01 00:00:00 UTC"
    assert format_timestamp(None) == "n/a"


def test_vault_key():
    assert vault_key(" 0xAbC ") == "0xabc"
    with pytest.raises(ValueError):
        vault_key("  ")
