"""
Tests for the event strategies in isolation.
"""

from datetime import date

import pytest
from finforecast.core.errors import EventTargetError
from finforecast.core.events import Event, EventParameters
from finforecast.core.kinds import EventType, ExpenseChangeType
from finforecast.core.state import EventContext, ProjectionState
from finforecast.strategies import (
    EventExpenseLevelChange,
    EventExtraDebtPayment,
    EventOneTimeExpense,
    EventOneTimeIncome,
    EventSalaryChange,
    EventSavingsRateChange,
)

STATE = ProjectionState(
    annual_salary=60000,
    annual_salary_growth=0.03,
    monthly_expenses=2000,
    annual_expense_growth=0.0,
    monthly_savings_rate=0.1,
)


def _event(type_: EventType, **params) -> Event:
    return Event("e1", type_, date(2026, 6, 1), parameters=EventParameters(**params))


class TestOneTimeEvents:
    def test_income(self):
        outcome = EventOneTimeIncome().apply(
            _event(EventType.ONE_TIME_INCOME, amount=5000), STATE, EventContext(5)
        )
        assert outcome.income == 5000
        assert outcome.taxable_income == 5000
        assert outcome.state is STATE

    def test_non_taxable_income(self):
        outcome = EventOneTimeIncome().apply(
            _event(EventType.ONE_TIME_INCOME, amount=5000, taxable=False),
            STATE,
            EventContext(5),
        )
        assert outcome.taxable_income == 0

    def test_expense(self):
        outcome = EventOneTimeExpense().apply(
            _event(EventType.ONE_TIME_EXPENSE, amount=750), STATE, EventContext(5)
        )
        assert outcome.expense == 750
        assert outcome.income == 0


class TestExtraDebtPayment:
    """Lump-sum payments against debt balances."""

    def test_payment_capped_at_balance(self):
        ctx = EventContext(5, debt_balances={"loan": 1200.0})
        outcome = EventExtraDebtPayment().apply(
            _event(EventType.EXTRA_DEBT_PAYMENT, account_id="loan", amount=5000),
            STATE,
            ctx,
        )
        assert outcome.debt_payments == {"loan": 1200.0}
        assert outcome.expense == 1200.0

    def test_partial_payment(self):
        ctx = EventContext(5, debt_balances={"loan": 1200.0})
        outcome = EventExtraDebtPayment().apply(
            _event(EventType.EXTRA_DEBT_PAYMENT, account_id="loan", amount=200),
            STATE,
            ctx,
        )
        assert outcome.debt_payments == {"loan": 200.0}

    def test_unknown_account_is_soft_error(self):
        """An unknown target changes nothing and reports an EventTargetError."""
        outcome = EventExtraDebtPayment().apply(
            _event(EventType.EXTRA_DEBT_PAYMENT, account_id="ghost", amount=100),
            STATE,
            EventContext(5, debt_balances={"loan": 1200.0}),
        )
        assert outcome.debt_payments == {}
        assert outcome.expense == 0
        assert isinstance(outcome.errors[0], EventTargetError)
        assert outcome.errors[0].subject == "ghost"

    def test_context_balances_read_only(self):
        ctx = EventContext(5, debt_balances={"loan": 1.0})
        with pytest.raises(TypeError):
            ctx.debt_balances["loan"] = 0.0


class TestSalaryChange:
    def test_new_salary_anchored_at_event_month(self):
        """Growth compounds from the event month, not from month 0."""
        outcome = EventSalaryChange().apply(
            _event(EventType.SALARY_CHANGE, new_salary=80000), STATE, EventContext(6)
        )
        state = outcome.state
        assert state.salary_at(6) == pytest.approx(80000)
        assert state.salary_at(18) == pytest.approx(80000 * 1.03)
        assert state.annual_salary_growth == 0.03

    def test_growth_override(self):
        outcome = EventSalaryChange().apply(
            _event(EventType.SALARY_CHANGE, new_salary=80000, new_salary_growth=0.05),
            STATE,
            EventContext(6),
        )
        assert outcome.state.annual_salary_growth == 0.05
        assert STATE.annual_salary_growth == 0.03


class TestExpenseLevelChange:
    """All expense change modes."""

    @pytest.mark.parametrize(
        "params,expected",
        [
            (
                {
                    "new_expenses": 2500,
                    "expense_change_type": ExpenseChangeType.ABSOLUTE,
                },
                2500,
            ),
            (
                {
                    "expense_change": -300,
                    "expense_change_type": ExpenseChangeType.RELATIVE_AMOUNT,
                },
                1700,
            ),
            (
                {
                    "expense_change": 0.25,
                    "expense_change_type": ExpenseChangeType.RELATIVE_PERCENT,
                },
                2500,
            ),
            ({"new_expenses": 1800}, 1800),
            ({}, 2000),
            (
                {
                    "expense_change": -5000,
                    "expense_change_type": ExpenseChangeType.RELATIVE_AMOUNT,
                },
                0,
            ),
        ],
    )
    def test_modes(self, params, expected):
        outcome = EventExpenseLevelChange().apply(
            _event(EventType.EXPENSE_LEVEL_CHANGE, **params), STATE, EventContext(4)
        )
        assert outcome.state.expenses_at(4) == pytest.approx(expected)
        assert outcome.state.expense_anchor == 4

    def test_relative_change_uses_grown_level(self):
        grown = ProjectionState(
            annual_salary=0,
            annual_salary_growth=0,
            monthly_expenses=2000,
            annual_expense_growth=0.10,
            monthly_savings_rate=0,
        )
        outcome = EventExpenseLevelChange().apply(
            _event(
                EventType.EXPENSE_LEVEL_CHANGE,
                expense_change=100,
                expense_change_type=ExpenseChangeType.RELATIVE_AMOUNT,
            ),
            grown,
            EventContext(12),
        )
        assert outcome.state.expenses_at(12) == pytest.approx(2200 + 100)


class TestSavingsRateChange:
    @pytest.mark.parametrize("rate,expected", [(0.35, 0.35), (1.5, 1.0), (-0.5, 0.0)])
    def test_clamped(self, rate, expected):
        outcome = EventSavingsRateChange().apply(
            _event(EventType.SAVINGS_RATE_CHANGE, new_savings_rate=rate),
            STATE,
            EventContext(3),
        )
        assert outcome.state.monthly_savings_rate == expected
