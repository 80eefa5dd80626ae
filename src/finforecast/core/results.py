"""
Results and output structures for FinForecast.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

import numpy as np
import pandas as pd

from .utils import month_range


@dataclass(frozen=True)
class DataPoint:
    """Single value of a scalar series (net worth, assets, liabilities)."""

    month: int
    date: date
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"month": self.month, "date": self.date.isoformat(), "value": self.value}


@dataclass(frozen=True)
class CashFlowPoint:
    """
    Monthly cash flow.

    ``income`` is net of tax; ``expenses`` includes base and recurring expenses,
    one-time expenses and debt service (interest plus principal actually paid).

    Attributes:
        month: Month index (0 = snapshot)
        date: Calendar month of the point
        income: Net income (gross minus tax)
        expenses: Total cash outflow
        net: ``income - expenses``
        gross_income: Salary plus one-time income, before tax
        tax: Income tax for the month
        debt_service: Scheduled plus extra debt payments
        interest: Interest part of ``debt_service``
        savings: Amount moved into (positive) or out of (negative) savings
    """

    month: int
    date: date
    income: float
    expenses: float
    net: float
    gross_income: float = 0.0
    tax: float = 0.0
    debt_service: float = 0.0
    interest: float = 0.0
    savings: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "income": self.income,
            "expenses": self.expenses,
            "net": self.net,
            "gross_income": self.gross_income,
            "tax": self.tax,
            "debt_service": self.debt_service,
            "interest": self.interest,
            "savings": self.savings,
        }


@dataclass(frozen=True)
class DebtPayoffPoint:
    """Outstanding debt for one month, total and per account."""

    month: int
    date: date
    debts: dict[str, float]
    total_debt: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "debts": dict(self.debts),
            "total_debt": self.total_debt,
        }


@dataclass(frozen=True)
class AssetBreakdownPoint:
    """Asset balances for one month, summed per account type."""

    month: int
    date: date
    assets: dict[str, float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "assets": dict(self.assets),
        }


@dataclass(frozen=True)
class SimulationWarning:
    """
    A soft anomaly absorbed during a run.

    Attributes:
        code: Stable identifier (e.g. 'event_target_missing')
        message: Human-readable description
        month: Month index where it was first seen (None = before the loop)
        subject: Id of the event/account/expense involved
    """

    code: str
    message: str
    month: int | None = None
    subject: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "month": self.month,
            "subject": self.subject,
        }


@dataclass
class ProjectionResult:
    """
    Month-by-month projection output.

    Every series has one entry per month, month 0 being the unmodified snapshot,
    so each has ``time_horizon_years * 12 + 1`` entries.
    """

    net_worth: list[DataPoint] = field(default_factory=list)
    assets: list[DataPoint] = field(default_factory=list)
    liabilities: list[DataPoint] = field(default_factory=list)
    cash_flow: list[CashFlowPoint] = field(default_factory=list)
    debt_payoff: list[DebtPayoffPoint] = field(default_factory=list)
    asset_breakdown: list[AssetBreakdownPoint] = field(default_factory=list)
    warnings: list[SimulationWarning] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.net_worth)

    @property
    def t_index(self) -> np.ndarray:
        """Monthly ``datetime64[M]`` index of the series."""
        if not self.net_worth:
            return np.array([], dtype="datetime64[M]")
        return month_range(self.net_worth[0].date, len(self.net_worth))

    def _period_index(self) -> pd.PeriodIndex:
        return pd.PeriodIndex(
            [pd.Period(p.date, freq="M") for p in self.net_worth], freq="M", name="month"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON wire format."""
        return {
            "net_worth": [p.to_dict() for p in self.net_worth],
            "assets": [p.to_dict() for p in self.assets],
            "liabilities": [p.to_dict() for p in self.liabilities],
            "cash_flow": [p.to_dict() for p in self.cash_flow],
            "debt_payoff": [p.to_dict() for p in self.debt_payoff],
            "asset_breakdown": [p.to_dict() for p in self.asset_breakdown],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    def to_frame(self) -> pd.DataFrame:
        """
        Flatten the scalar series into a DataFrame.

        Returns:
            DataFrame indexed by monthly ``PeriodIndex`` with columns
            ``net_worth``, ``assets``, ``liabilities``, ``total_debt``, ``income``,
            ``expenses``, ``net_cash_flow``, ``gross_income``, ``tax``,
            ``debt_service``, ``interest`` and ``savings``.
        """
        index = self._period_index()
        return pd.DataFrame(
            {
                "net_worth": [p.value for p in self.net_worth],
                "assets": [p.value for p in self.assets],
                "liabilities": [p.value for p in self.liabilities],
                "total_debt": [p.total_debt for p in self.debt_payoff],
                "income": [p.income for p in self.cash_flow],
                "expenses": [p.expenses for p in self.cash_flow],
                "net_cash_flow": [p.net for p in self.cash_flow],
                "gross_income": [p.gross_income for p in self.cash_flow],
                "tax": [p.tax for p in self.cash_flow],
                "debt_service": [p.debt_service for p in self.cash_flow],
                "interest": [p.interest for p in self.cash_flow],
                "savings": [p.savings for p in self.cash_flow],
            },
            index=index,
        )

    def breakdown_frame(self, kind: str = "assets") -> pd.DataFrame:
        """
        Per-key breakdown as a wide DataFrame.

        Args:
            kind: 'assets' (per account type) or 'debts' (per debt account)

        Returns:
            DataFrame with one column per key, missing keys filled with 0
        """
        if kind == "assets":
            rows = [p.assets for p in self.asset_breakdown]
        elif kind == "debts":
            rows = [p.debts for p in self.debt_payoff]
        else:
            raise ValueError(f"kind must be 'assets' or 'debts', got {kind!r}")
        index = self._period_index()
        return pd.DataFrame(rows, index=index).fillna(0.0)

    def validate(self, tol: float = 1.0) -> None:
        """
        Check the accounting identities of every month.

        Raises:
            AssertionError: If net worth != assets - liabilities, or a debt map
                does not sum to its total, by more than ``tol``
        """
        lengths = {
            len(self.net_worth),
            len(self.assets),
            len(self.liabilities),
            len(self.cash_flow),
            len(self.debt_payoff),
            len(self.asset_breakdown),
        }
        assert len(lengths) == 1, f"Series lengths differ: {sorted(lengths)}"

        nw = np.array([p.value for p in self.net_worth])
        identity = nw - (
            np.array([p.value for p in self.assets])
            - np.array([p.value for p in self.liabilities])
        )
        if len(identity):
            err = float(np.abs(identity).max())
            assert err <= tol, f"Net worth identity violated: max error = {err}"

        for point in self.debt_payoff:
            err = abs(sum(point.debts.values()) - point.total_debt)
            assert err <= tol, (
                f"Debt breakdown does not sum to total in month {point.month}: "
                f"error = {err}"
            )
            assert all(v >= 0 for v in point.debts.values()), (
                f"Negative debt balance in month {point.month}"
            )
