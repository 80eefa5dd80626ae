"""
Asset valuation strategies: compounding investments, appreciating real
assets and static holdings.
"""

from __future__ import annotations

from finforecast.core.interfaces import IValuationStrategy
from finforecast.core.utils import monthly_rate


class ValuationInvestment(IValuationStrategy):
    """
    Investment account (kind: 'investment').

    Grows at the monthly-equivalent rate ``(1 + r)^(1/12) - 1`` of its annual
    return, then receives its allocated savings (or gives up its share of a
    withdrawal). A withdrawal never takes the balance below zero; a balance that
    starts negative is carried as is.
    """

    def step(self, balance: float, annual_rate: float, flow: float = 0.0) -> float:
        grown = balance * (1.0 + monthly_rate(annual_rate))
        return grown + max(flow, -max(grown, 0.0))


class ValuationAppreciating(IValuationStrategy):
    """
    Real asset (kind: 'appreciating').

    Property and vehicles change value at the monthly-equivalent of their annual
    appreciation (negative for depreciation). They take no cash flows.
    """

    def step(self, balance: float, annual_rate: float, flow: float = 0.0) -> float:
        return balance * (1.0 + monthly_rate(annual_rate))


class ValuationStatic(IValuationStrategy):
    """Asset held at face value (kind: 'static'), e.g. chequing accounts."""

    def step(self, balance: float, annual_rate: float, flow: float = 0.0) -> float:
        return balance + flow
