# economics/services/formulas.py

"""
======================================================
PATH: economics/services/formulas.py
======================================================
MILL ECONOMICS FORMULAS

Pure functions over plain numbers. No ORM, no I/O.

Rules:
- Inputs go through to_decimal(): None / NaN / Infinity / junk -> 0
- Division by zero returns the fallback (0 unless stated)
- Every result is rounded half-up to 2 places where it is computed
- Nothing here raises on bad numbers; a report with zeros beats a 500
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from core.decimals import ZERO, money, to_decimal

DEFAULT_RECOVERY_RATE = Decimal("0.67")
DEFAULT_OWNER_SALARY_PCT = Decimal("0.25")

MONTHS_PER_YEAR = Decimal("12")


def safe_divide(numerator, denominator, fallback=ZERO) -> Decimal:
    """
    numerator / denominator without rounding, or `fallback` when the
    denominator is zero.
    """
    den = to_decimal(denominator)
    if not den:
        return fallback
    return to_decimal(numerator) / den


def paddy_requirement(target_rice_kg, recovery_rate=DEFAULT_RECOVERY_RATE) -> Decimal:
    """Paddy (kg) that has to be milled to get `target_rice_kg` of rice."""
    target = to_decimal(target_rice_kg)
    if not target:
        return ZERO
    rate = to_decimal(recovery_rate) or DEFAULT_RECOVERY_RATE
    return money(safe_divide(target, rate))


def cogs_per_kg(total_paddy_cost, total_rice_output_kg) -> Decimal:
    return money(safe_divide(total_paddy_cost, total_rice_output_kg))


def revenue_per_kg(total_revenue, total_rice_sold_kg) -> Decimal:
    return money(safe_divide(total_revenue, total_rice_sold_kg))


def gross_profit(total_revenue, total_paddy_cost) -> Decimal:
    return money(to_decimal(total_revenue) - to_decimal(total_paddy_cost))


def gross_profit_per_kg(revenue_kg, cogs_kg) -> Decimal:
    return money(to_decimal(revenue_kg) - to_decimal(cogs_kg))


def net_profit_before_owner(gross, total_opex) -> Decimal:
    return money(to_decimal(gross) - to_decimal(total_opex))


def owner_salary(net_before_owner, owner_pct=DEFAULT_OWNER_SALARY_PCT) -> Decimal:
    """Owner's share. Nothing is drawn from a loss."""
    net = to_decimal(net_before_owner)
    if net <= 0:
        return ZERO
    return money(net * to_decimal(owner_pct))


def final_net_profit(net_before_owner, owner_share) -> Decimal:
    return money(to_decimal(net_before_owner) - to_decimal(owner_share))


def break_even_kg(fixed_costs, profit_per_kg) -> Decimal | None:
    """
    Kilograms to sell before fixed costs are covered.
    None when each kg earns nothing: there is no break-even point.
    """
    profit = to_decimal(profit_per_kg)
    if not profit:
        return None
    return money(safe_divide(fixed_costs, profit))


def recommended_price(cogs_kg, desired_margin_per_kg) -> Decimal:
    return money(to_decimal(cogs_kg) + to_decimal(desired_margin_per_kg))


@dataclass(frozen=True)
class Depreciation:
    annual: Decimal = ZERO
    monthly: Decimal = ZERO

    def __add__(self, other: "Depreciation") -> "Depreciation":
        return Depreciation(self.annual + other.annual, self.monthly + other.monthly)

    def rounded(self) -> "Depreciation":
        return Depreciation(money(self.annual), money(self.monthly))


def straight_line_depreciation(purchase_cost, scrap_pct, useful_life_years) -> Depreciation:
    """
    annual = cost * (1 - scrap_pct) / life, monthly = annual / 12.

    Machines with no cost or no useful life contribute nothing. The
    per-machine figures stay unrounded so fleet totals round once.
    """
    cost = to_decimal(purchase_cost)
    life = to_decimal(useful_life_years)
    if not cost or not life:
        return Depreciation()

    depreciable = cost - cost * to_decimal(scrap_pct)
    annual = depreciable / life
    return Depreciation(annual=annual, monthly=annual / MONTHS_PER_YEAR)


def fleet_depreciation(purchase_costs, scrap_pct, useful_life_years) -> Depreciation:
    total = Depreciation()
    for cost in purchase_costs:
        total = total + straight_line_depreciation(cost, scrap_pct, useful_life_years)
    return total.rounded()
