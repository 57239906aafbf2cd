"""Tests for lot rules, step rounding and quantity rendering."""

from decimal import Decimal

import pytest

from portfolio_bot.exchange.types import LotRule, format_quantity, round_to_step


class TestRoundToStep:
    """Tests for the round_to_step helper function."""

    def test_round_down_to_hundredths(self) -> None:
        assert round_to_step(Decimal("1.2345"), Decimal("0.01")) == Decimal("1.23")

    def test_round_down_to_ones(self) -> None:
        assert round_to_step(Decimal("3.75"), Decimal("1")) == Decimal("3")

    def test_exact_step_unchanged(self) -> None:
        assert round_to_step(Decimal("3.75"), Decimal("0.01")) == Decimal("3.75")

    def test_non_power_of_ten_step(self) -> None:
        assert round_to_step(Decimal("1.9"), Decimal("0.25")) == Decimal("1.75")

    def test_large_step(self) -> None:
        assert round_to_step(Decimal("17"), Decimal("5")) == Decimal("15")

    def test_value_less_than_step(self) -> None:
        assert round_to_step(Decimal("0.005"), Decimal("0.01")) == Decimal("0")

    def test_zero_value(self) -> None:
        assert round_to_step(Decimal("0"), Decimal("0.01")) == Decimal("0")


class TestFormatQuantity:
    @pytest.mark.parametrize(
        ("quantity", "expected"),
        [
            (Decimal("3.75"), "3.75"),
            (Decimal("3.00"), "3"),
            (Decimal("1E+1"), "10"),
            (Decimal("0.00000100"), "0.000001"),
            (Decimal("0.00"), "0"),
        ],
    )
    def test_plain_notation(self, quantity: Decimal, expected: str) -> None:
        assert format_quantity(quantity) == expected


class TestLotRule:
    def test_fields(self) -> None:
        rule = LotRule(pair="AVAXUSDT", step_size=Decimal("0.01"), min_qty=Decimal("0.1"))
        assert rule.pair == "AVAXUSDT"
        assert rule.step_size == Decimal("0.01")
        assert rule.min_qty == Decimal("0.1")
