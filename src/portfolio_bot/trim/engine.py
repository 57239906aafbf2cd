"""Auto-trim engine: sell each asset's excess above the base value.

Per holding, in snapshot order:
  1. EVALUATE: excess = value - base_value; skip when excess <= 0 (sell-only)
  2. SIZE: fetch the pair's lot rule, round excess / price DOWN to the step
  3. GUARD: skip when the rounded quantity is zero or below min_qty
  4. EXECUTE: submit a market sell through the executor
  5. REPORT: a report-log line for every outcome, a notification for
     every order attempt and every lot-rule failure

Trimming is independent per asset. A failed lot-rule fetch or order for one
pair is recorded and the loop moves on; nothing here aborts the run.
Orders are submitted strictly one at a time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from portfolio_bot.exchange.client import ExchangeClient
from portfolio_bot.exchange.types import format_quantity
from portfolio_bot.execution.executor import Executor
from portfolio_bot.logging import get_logger
from portfolio_bot.models import (
    Holding,
    OrderRequest,
    OrderSide,
    OrderType,
    PortfolioSnapshot,
    holding_value,
)
from portfolio_bot.notifications.base import Notifier, best_effort
from portfolio_bot.notifications.formatting import format_trim_message
from portfolio_bot.portfolio.report import format_usd
from portfolio_bot.reporting.report_log import ReportLog
from portfolio_bot.trim.sizing import plan_trim

logger = get_logger(__name__)

_ZERO = Decimal("0")


class TrimStatus(str, Enum):
    """Terminal state of one holding in a trim pass."""

    UNDER_BASE = "under_base"
    BELOW_STEP = "below_step"
    BELOW_MIN_QTY = "below_min_qty"
    SOLD = "sold"
    SIMULATED = "simulated"
    LOT_RULE_FAILED = "lot_rule_failed"
    ORDER_FAILED = "order_failed"


@dataclass
class TrimOutcome:
    """What happened to one holding."""

    asset: str
    pair: str
    status: TrimStatus
    excess_value: Decimal = _ZERO
    raw_quantity: Decimal = _ZERO
    sell_quantity: Decimal = _ZERO
    order_id: str | None = None
    error: str | None = None


@dataclass
class TrimReport:
    """Outcomes of one pass, in snapshot order."""

    outcomes: list[TrimOutcome] = field(default_factory=list)

    @property
    def orders(self) -> list[TrimOutcome]:
        """Outcomes that produced an order (real or simulated)."""
        return [
            o for o in self.outcomes if o.status in (TrimStatus.SOLD, TrimStatus.SIMULATED)
        ]

    @property
    def failures(self) -> list[TrimOutcome]:
        return [
            o
            for o in self.outcomes
            if o.status in (TrimStatus.LOT_RULE_FAILED, TrimStatus.ORDER_FAILED)
        ]


class AutoTrimEngine:
    """Flattens every holding back to a fixed base value by selling the excess.

    Args:
        exchange_client: Source of lot rules.
        executor: Live or paper order executor.
        notifier: Operator channel for order outcomes (best-effort).
        report_log: Persistent text report.
        base_value: Target value per asset in the quote currency.
        redact: Scrubs secrets from error text before it is logged or sent.
    """

    def __init__(
        self,
        exchange_client: ExchangeClient,
        executor: Executor,
        notifier: Notifier,
        report_log: ReportLog,
        base_value: Decimal,
        redact: Callable[[str], str] | None = None,
    ) -> None:
        if base_value < 0:
            raise ValueError(f"base_value must not be negative, got {base_value}")
        self._exchange_client = exchange_client
        self._executor = executor
        self._notifier = notifier
        self._report_log = report_log
        self._base_value = base_value
        self._redact = redact or (lambda text: text)

    async def trim(self, snapshot: PortfolioSnapshot) -> TrimReport:
        """Run one trim pass over the snapshot. Never raises for a single asset."""
        report = TrimReport()
        for holding in snapshot.holdings:
            outcome = await self._trim_holding(holding)
            report.outcomes.append(outcome)

        logger.info(
            "trim_pass_complete",
            holdings=len(report.outcomes),
            orders=len(report.orders),
            failures=len(report.failures),
        )
        return report

    async def _trim_holding(self, holding: Holding) -> TrimOutcome:
        value = holding_value(holding)
        if value <= self._base_value:
            logger.info(
                "trim_skipped_under_base",
                asset=holding.asset,
                value=str(value),
                base_value=str(self._base_value),
            )
            self._report_log.log(
                f"{holding.asset}: {format_usd(value)} is at or under base "
                f"{format_usd(self._base_value)}, nothing to trim"
            )
            return TrimOutcome(
                asset=holding.asset,
                pair=holding.pair,
                status=TrimStatus.UNDER_BASE,
                excess_value=value - self._base_value,
            )

        try:
            lot_rule = await self._exchange_client.fetch_lot_rule(holding.pair)
        except Exception as exc:
            error = self._redact(str(exc))
            logger.warning(
                "trim_lot_rule_failed",
                pair=holding.pair,
                error_type=type(exc).__name__,
                error=error,
            )
            self._report_log.log(f"❌ Could not load lot rules for {holding.pair}: {error}")
            await best_effort(
                self._notifier.send(
                    format_trim_message(
                        "❌ Trim skipped: no lot rules",
                        {"Pair": holding.pair, "Error": f"{type(exc).__name__}: {error}"},
                    )
                ),
                what="trim_lot_rule_failed",
                redact=self._redact,
            )
            return TrimOutcome(
                asset=holding.asset,
                pair=holding.pair,
                status=TrimStatus.LOT_RULE_FAILED,
                excess_value=value - self._base_value,
                error=error,
            )

        plan = plan_trim(holding, self._base_value, lot_rule)
        outcome = TrimOutcome(
            asset=holding.asset,
            pair=holding.pair,
            status=TrimStatus.BELOW_STEP,
            excess_value=plan.excess_value,
            raw_quantity=plan.raw_quantity,
            sell_quantity=plan.sell_quantity,
        )

        if plan.sell_quantity <= 0:
            logger.info(
                "trim_skipped_below_step",
                pair=holding.pair,
                raw_quantity=str(plan.raw_quantity),
                step_size=str(lot_rule.step_size),
            )
            self._report_log.log(
                f"{holding.asset}: excess {format_usd(plan.excess_value)} is less than one lot "
                f"step ({format_quantity(lot_rule.step_size)}), nothing to sell"
            )
            return outcome

        if plan.sell_quantity < lot_rule.min_qty:
            logger.info(
                "trim_skipped_below_min_qty",
                pair=holding.pair,
                sell_quantity=str(plan.sell_quantity),
                min_qty=str(lot_rule.min_qty),
            )
            self._report_log.log(
                f"{holding.asset}: {format_quantity(plan.sell_quantity)} is under the "
                f"minimum order size {format_quantity(lot_rule.min_qty)}, nothing to sell"
            )
            outcome.status = TrimStatus.BELOW_MIN_QTY
            return outcome

        quantity = format_quantity(plan.sell_quantity)
        logger.info(
            "trim_sell_sized",
            pair=holding.pair,
            raw_quantity=str(plan.raw_quantity),
            sell_quantity=quantity,
            step_size=str(lot_rule.step_size),
        )
        self._report_log.log(
            f"Selling {quantity} {holding.pair} (raw {plan.raw_quantity:.8f}, step "
            f"{format_quantity(lot_rule.step_size)}) to keep balance at {format_usd(self._base_value)}"
        )

        request = OrderRequest(
            pair=holding.pair,
            side=OrderSide.SELL,
            order_type=OrderType.MARKET,
            quantity=plan.sell_quantity,
        )
        try:
            result = await self._executor.place_order(request)
        except Exception as exc:
            error = self._redact(str(exc))
            logger.error(
                "trim_order_failed",
                pair=holding.pair,
                quantity=quantity,
                error_type=type(exc).__name__,
                error=error,
            )
            self._report_log.log(f"❌ Failed to place order for {holding.pair}: {error}")
            await best_effort(
                self._notifier.send(
                    format_trim_message(
                        "❌ Trim order failed",
                        {
                            "Pair": holding.pair,
                            "Quantity": quantity,
                            "Error": f"{type(exc).__name__}: {error}",
                        },
                    )
                ),
                what="trim_order_failed",
                redact=self._redact,
            )
            outcome.status = TrimStatus.ORDER_FAILED
            outcome.error = error
            return outcome

        outcome.status = TrimStatus.SIMULATED if result.is_simulated else TrimStatus.SOLD
        outcome.order_id = result.order_id
        label = "Simulated" if result.is_simulated else "Order placed"
        self._report_log.log(f"✅ {label} for {holding.pair}: {quantity} (id {result.order_id})")
        await best_effort(
            self._notifier.send(
                format_trim_message(
                    f"✅ Trim {'simulated' if result.is_simulated else 'order placed'}",
                    {
                        "Pair": holding.pair,
                        "Quantity": quantity,
                        "Excess": format_usd(plan.excess_value),
                        "Order id": result.order_id,
                    },
                )
            ),
            what="trim_order_placed",
            redact=self._redact,
        )
        return outcome
