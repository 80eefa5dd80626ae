"""
Tests for ProjectionResult views and invariant checks.
"""

from dataclasses import replace

import pandas as pd
import pytest
from finforecast.core.results import DataPoint
from finforecast.core.simulator import simulate


@pytest.fixture
def result(make_config, loan_snapshot):
    return simulate(make_config(), loan_snapshot)


class TestFrames:
    """DataFrame views of a result."""

    def test_to_frame(self, result):
        df = result.to_frame()
        assert len(df) == 13
        assert isinstance(df.index, pd.PeriodIndex)
        assert str(df.index[0]) == "2026-01"
        expected = {"net_worth", "total_debt", "net_cash_flow", "savings"}
        assert expected <= set(df.columns)
        assert df["net_worth"].iloc[-1] == pytest.approx(result.net_worth[-1].value)

    def test_breakdown_frames(self, result):
        assets = result.breakdown_frame("assets")
        debts = result.breakdown_frame("debts")
        assert "loan" in debts.columns
        assert debts["loan"].iloc[0] == pytest.approx(10000)
        assert len(assets) == 13

    def test_breakdown_kind_checked(self, result):
        with pytest.raises(ValueError):
            result.breakdown_frame("liabilities")

    def test_to_dict_wire_keys(self, result):
        data = result.to_dict()
        assert set(data) == {
            "net_worth",
            "assets",
            "liabilities",
            "cash_flow",
            "debt_payoff",
            "asset_breakdown",
            "warnings",
        }
        assert data["net_worth"][0]["date"] == "2026-01-01"
        assert data["debt_payoff"][0]["debts"] == {"loan": 10000}

    def test_t_index(self, result):
        assert str(result.t_index[1]) == "2026-02"


class TestValidate:
    """Accounting identity checks."""

    def test_valid_result(self, result):
        result.validate()

    def test_broken_identity_detected(self, result):
        """Tampering with net worth trips the identity check."""
        bad = result.net_worth[3]
        result.net_worth[3] = DataPoint(bad.month, bad.date, bad.value + 500)
        with pytest.raises(AssertionError, match="identity"):
            result.validate()

    def test_debt_sum_mismatch_detected(self, result):
        point = result.debt_payoff[2]
        result.debt_payoff[2] = replace(point, total_debt=point.total_debt + 10)
        with pytest.raises(AssertionError, match="month 2"):
            result.validate()

    def test_length_mismatch_detected(self, result):
        result.cash_flow.pop()
        with pytest.raises(AssertionError, match="lengths"):
            result.validate()
