import pytest

from drawdown.money import clamp_non_neg, div_rate, format_gbp, mul_rate, round_pence, to_pence


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3), (2.4999, 2), (-2.5, -2), (-2.6, -3), (0.0, 0)],
)
def test_round_pence_rounds_halves_up(value, expected):
    assert round_pence(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (12570, 1_257_000),
        (0.1, 10),
        ("£1,250.50", 125_050),
        ("  300 ", 30_000),
        ("-5", -500),
        ("abc", 0),
        ("", 0),
        ("1.2.3", 0),
        (None, 0),
    ],
)
def test_to_pence_parses_numbers_and_text(value, expected):
    assert to_pence(value) == expected


def test_format_gbp_uses_thousands_separators():
    assert format_gbp(123_456) == "£1,234.56"
    assert format_gbp(0) == "£0.00"
    assert format_gbp(-500) == "-£5.00"
    assert format_gbp(3_233_647) == "£32,336.47"


def test_rate_helpers_round_immediately():
    assert mul_rate(1_000_000, 0.25) == 250_000
    assert mul_rate(5, 0.25) == 1
    assert div_rate(1_257_000, 0.75) == 1_676_000
    assert clamp_non_neg(-1) == 0
    assert clamp_non_neg(7) == 7
