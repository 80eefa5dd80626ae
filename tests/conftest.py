"""
Shared fixtures: a default scenario and snapshot builders.
"""

from datetime import date

import pytest
from finforecast.core.accounts import FinancialSnapshot
from finforecast.core.config import Config

START = date(2026, 1, 1)

FEDERAL = [
    {"up_to_income": 50000, "rate": 0.15},
    {"up_to_income": 100000, "rate": 0.20},
    {"up_to_income": 0, "rate": 0.26},
]
REGIONAL = [
    {"up_to_income": 45000, "rate": 0.0505},
    {"up_to_income": 90000, "rate": 0.0915},
    {"up_to_income": 0, "rate": 0.1116},
]


def default_config_dict() -> dict:
    """Baseline scenario used across the suite."""
    return {
        "time_horizon_years": 1,
        "inflation_rate": 0.02,
        "annual_salary": 75000,
        "annual_salary_growth": 0.03,
        "monthly_expenses": 3000,
        "annual_expense_growth": 0.02,
        "monthly_savings_rate": 0.20,
        "federal_tax_brackets": FEDERAL,
        "regional_tax_brackets": REGIONAL,
        "investment_returns": {"tfsa": 0.07, "rrsp": 0.07, "brokerage": 0.06},
        "asset_appreciation": {"real_estate": 0.03, "vehicle": -0.15},
        "savings_allocation": {"tfsa": 0.6, "rrsp": 0.4},
        "extra_debt_payments": {},
        "events": [],
        "start_date": START.isoformat(),
    }


@pytest.fixture
def make_config():
    """Build a Config from the default scenario plus overrides."""

    def _make(**overrides) -> Config:
        data = default_config_dict()
        data.update(overrides)
        return Config.from_dict(data)

    return _make


@pytest.fixture
def mortgage_snapshot() -> FinancialSnapshot:
    """$400k mortgage at 3%, 300 months, $1,896/month."""
    return FinancialSnapshot.from_dict(
        {
            "accounts": [
                {
                    "id": "mortgage",
                    "type": "mortgage",
                    "is_asset": False,
                    "balance": -400000,
                }
            ],
            "debts": [
                {
                    "account_id": "mortgage",
                    "kind": "mortgage",
                    "original_principal": 400000,
                    "annual_rate": 0.03,
                    "amortization_months": 300,
                    "term_months": 60,
                    "payment_amount": 1896,
                    "payment_frequency": "monthly",
                    "start_date": START.isoformat(),
                }
            ],
        }
    )


@pytest.fixture
def loan_snapshot() -> FinancialSnapshot:
    """$10k loan at 5%, $299.71/month."""
    return FinancialSnapshot.from_dict(
        {
            "accounts": [
                {"id": "loan", "type": "loan", "is_asset": False, "balance": 10000}
            ],
            "debts": [
                {
                    "account_id": "loan",
                    "kind": "loan",
                    "original_principal": 10000,
                    "annual_rate": 0.05,
                    "term_months": 36,
                    "payment_amount": 299.71,
                    "payment_frequency": "monthly",
                    "start_date": START.isoformat(),
                }
            ],
        }
    )


@pytest.fixture
def savings_snapshot() -> FinancialSnapshot:
    """A plain savings account and a TFSA."""
    return FinancialSnapshot.from_dict(
        {
            "accounts": [
                {
                    "id": "savings",
                    "type": "savings",
                    "is_asset": True,
                    "balance": 10000,
                },
                {"id": "tfsa", "type": "tfsa", "is_asset": True, "balance": 25000},
            ]
        }
    )


@pytest.fixture
def scenario_dict() -> dict:
    """Fresh copy of the baseline scenario mapping."""
    return default_config_dict()
