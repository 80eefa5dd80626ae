"""
FinForecast kind constants (event kinds, frequencies, account families).
"""

from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Closed set of projection event kinds."""

    ONE_TIME_INCOME = "one_time_income"
    ONE_TIME_EXPENSE = "one_time_expense"
    EXTRA_DEBT_PAYMENT = "extra_debt_payment"
    SALARY_CHANGE = "salary_change"
    EXPENSE_LEVEL_CHANGE = "expense_level_change"
    SAVINGS_RATE_CHANGE = "savings_rate_change"


class ExpenseChangeType(str, Enum):
    """How an expense-level change event modifies the monthly base expense."""

    ABSOLUTE = "absolute"
    RELATIVE_AMOUNT = "relative_amount"
    RELATIVE_PERCENT = "relative_percent"


class DebtKind(str, Enum):
    """Debt accounts with detailed amortization terms."""

    MORTGAGE = "mortgage"
    LOAN = "loan"


class ValuationKind(str, Enum):
    """How a non-debt asset balance evolves month to month."""

    INVESTMENT = "investment"  # returns compound, receives savings allocation
    APPRECIATING = "appreciating"  # real assets (property, vehicles)
    STATIC = "static"  # held at face value


class F:
    # === Payment frequencies (monthly multipliers live in core.frequency) ===
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    # Recurrence steps for expanded events, in months
    RECURRENCE_STEPS = {MONTHLY: 1, QUARTERLY: 3, ANNUALLY: 12}

    @classmethod
    def payment_frequencies(cls) -> list[str]:
        """Enumerate recognised payment frequencies."""
        return [
            cls.WEEKLY,
            cls.BI_WEEKLY,
            cls.SEMI_MONTHLY,
            cls.MONTHLY,
            cls.QUARTERLY,
            cls.ANNUALLY,
        ]


# Synthetic balance buckets owned by the simulator
UNALLOCATED_CASH = "unallocated_cash"
UNFUNDED_SHORTFALL = "unfunded_shortfall"
