"""Tests for portfolio report rendering."""

from decimal import Decimal

from factories import make_holding

from portfolio_bot.models import snapshot_from_holdings
from portfolio_bot.portfolio.report import format_usd, render_report


class TestFormatUsd:
    def test_two_decimals(self) -> None:
        assert format_usd(Decimal("800")) == "$800.00"

    def test_rounds_half_up(self) -> None:
        assert format_usd(Decimal("0.125")) == "$0.13"
        assert format_usd(Decimal("0.124")) == "$0.12"


class TestRenderReport:
    def test_lines_and_total(self) -> None:
        snapshot = snapshot_from_holdings(
            [
                make_holding("AVAX", "10", "80"),
                make_holding("BTC", "0.01", "60000.456"),
            ]
        )
        assert render_report(snapshot) == [
            "AVAX: 10 x $80.00 = $800.00",
            "BTC: 0.01 x $60000.46 = $600.00",
            "Total: $1400.00",
        ]

    def test_empty_snapshot_has_only_total(self) -> None:
        assert render_report(snapshot_from_holdings([])) == ["Total: $0.00"]

    def test_zero_balance_in_plain_notation(self) -> None:
        snapshot = snapshot_from_holdings([make_holding("AVAX", "0.00000000", "80")])
        assert render_report(snapshot)[0] == "AVAX: 0 x $80.00 = $0.00"

    def test_dust_balance_in_plain_notation(self) -> None:
        snapshot = snapshot_from_holdings([make_holding("AVAX", "0.00000012", "80")])
        assert render_report(snapshot)[0] == "AVAX: 0.00000012 x $80.00 = $0.00"
