"""
Tests for KPI utilities.
"""

import numpy as np
import pandas as pd
import pytest
from finforecast.core.simulator import simulate
from finforecast.kpi import (
    debt_free_month,
    dsti,
    inflation_adjusted,
    interest_paid_cum,
    max_drawdown,
    savings_rate,
    summary,
)


class TestDebtFreeMonth:
    def test_loan_paid_off(self, make_config, loan_snapshot):
        """The 36-month loan is cleared in month 36."""
        result = simulate(make_config(time_horizon_years=4), loan_snapshot)
        assert debt_free_month(result) == 36

    def test_never_debt_free(self, make_config, mortgage_snapshot):
        result = simulate(make_config(annual_salary=120000), mortgage_snapshot)
        assert debt_free_month(result) is None

    def test_accepts_frame(self):
        df = pd.DataFrame({"total_debt": [100.0, 50.0, 0.001, 0.0]})
        assert debt_free_month(df) == 2


class TestMaxDrawdown:
    """Peak-to-trough drawdown."""

    def test_series(self):
        assert max_drawdown(pd.Series([100, 120, 90, 130])) == pytest.approx(-0.25)

    def test_monotonic_series(self):
        assert max_drawdown(pd.Series([1, 2, 3])) == 0

    def test_negative_peak_ignored(self):
        assert max_drawdown(pd.Series([-10, -5, -20])) == 0

    def test_empty(self):
        assert max_drawdown(pd.Series([], dtype=float)) == 0

    def test_frame(self):
        df = pd.DataFrame({"a": [100, 50], "b": [10, 10], "label": ["x", "y"]})
        out = max_drawdown(df)
        assert out["a"] == pytest.approx(-0.5)
        assert out["b"] == 0
        assert np.isnan(out["label"])


class TestRatios:
    def test_savings_rate(self):
        df = pd.DataFrame({"savings": [0.0, 20.0, 50.0], "income": [0.0, 100.0, 100.0]})
        rate = savings_rate(df)
        assert np.isnan(rate.iloc[0])
        assert list(rate.iloc[1:]) == pytest.approx([0.2, 0.5])

    def test_dsti(self):
        df = pd.DataFrame({"debt_service": [100.0, 100.0], "income": [1000.0, 0.0]})
        ratio = dsti(df)
        assert ratio.iloc[0] == pytest.approx(0.1)
        assert np.isnan(ratio.iloc[1])

    def test_interest_excludes_baseline(self):
        """Month 0 is a baseline row and is not counted."""
        df = pd.DataFrame({"interest": [5.0, 10.0, 10.0]})
        assert list(interest_paid_cum(df)) == [0.0, 10.0, 20.0]

    def test_interest_missing_column(self):
        df = pd.DataFrame({"income": [1.0, 2.0]})
        assert list(interest_paid_cum(df)) == [0.0, 0.0]


class TestInflation:
    def test_deflates_to_month_zero_money(self):
        real = inflation_adjusted(pd.Series([100.0] * 13, name="net_worth"), 0.02)
        assert real.name == "net_worth_real"
        assert real.iloc[0] == 100
        assert real.iloc[12] == pytest.approx(100 / 1.02)

    def test_zero_inflation(self):
        series = pd.Series([1.0, 2.0, 3.0])
        assert list(inflation_adjusted(series, 0.0)) == [1.0, 2.0, 3.0]


class TestSummary:
    def test_summary_keys(self, make_config, savings_snapshot):
        result = simulate(make_config(), savings_snapshot)
        out = summary(result, inflation_rate=0.02)
        assert out["initial_net_worth"] == pytest.approx(35000)
        assert out["final_net_worth"] > out["final_net_worth_real"]
        assert out["debt_free_month"] == 0
        assert out["avg_savings_rate"] > 0
        assert out["warnings"] == len(result.warnings)
