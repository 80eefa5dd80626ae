"""
Tests for asset valuation strategies.
"""

import pytest
from finforecast.strategies import (
    ValuationAppreciating,
    ValuationInvestment,
    ValuationStatic,
)


class TestValuation:
    """Monthly growth of asset balances."""

    def test_investment_compounds_to_annual_rate(self):
        balance = 10000.0
        for _ in range(12):
            balance = ValuationInvestment().step(balance, 0.07)
        assert balance == pytest.approx(10700)

    def test_investment_receives_flow(self):
        assert ValuationInvestment().step(1000, 0.0, 250) == pytest.approx(1250)

    def test_investment_floored_at_zero(self):
        assert ValuationInvestment().step(100, 0.0, -500) == 0

    def test_negative_investment_balance_carried(self):
        assert ValuationInvestment().step(-1000, 0.0) == -1000
        assert ValuationInvestment().step(-1000, 0.0, -200) == -1000
        assert ValuationInvestment().step(-1000, 0.0, 300) == -700

    def test_appreciating_not_clamped(self):
        assert ValuationAppreciating().step(-500, 0.0) == -500

    def test_depreciation(self):
        balance = 30000.0
        for _ in range(12):
            balance = ValuationAppreciating().step(balance, -0.15)
        assert balance == pytest.approx(25500)

    def test_appreciating_ignores_flow(self):
        assert ValuationAppreciating().step(1000, 0.0, 500) == 1000

    def test_static(self):
        assert ValuationStatic().step(1000, 0.5) == 1000
        assert ValuationStatic().step(1000, 0.5, -200) == 800
