import pytest

from skull_king_score.inputs import clamp_number, parse_leading_int, to_int


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3),
        (" 3 plis", 3),
        ("3.7", 3),
        ("-5", -5),
        ("+2", 2),
        (4, 4),
        (2.9, 2),
        ("", None),
        ("abc", None),
        (None, None),
    ],
)
def test_parse_leading_int(raw, expected):
    assert parse_leading_int(raw) == expected


def test_clamp_number_limits_and_junk():
    # Round 3: bids and tricks live in [0, 3]
    assert clamp_number("15", 0, 3) == 3
    assert clamp_number("-5", 0, 3) == 0
    assert clamp_number("2", 0, 3) == 2
    assert clamp_number("deux", 0, 3) == 0
    assert clamp_number("", 0, 3) == 0


def test_clamp_number_junk_falls_back_to_minimum():
    assert clamp_number("x", 5, 14) == 5


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("20", 20),
        ("-30", -30),
        (" 15 ", 15),
        ("12.5", 12),
        (7, 7),
        (-2.5, -2),
        ("", 0),
        ("bonus", 0),
        ("nan", 0),
        ("inf", 0),
        (None, 0),
        ("0x10", 0),
    ],
)
def test_to_int(raw, expected):
    assert to_int(raw) == expected


def test_oversized_numbers_saturate_instead_of_failing():
    huge = "9" * 5000
    assert parse_leading_int(huge) > 0
    assert parse_leading_int("-" + huge) < 0
    assert clamp_number(huge, 0, 3) == 3
    assert clamp_number("-" + huge, 0, 3) == 0
    assert to_int(huge) == 0
