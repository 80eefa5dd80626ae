"""
Projection state threaded through the monthly loop.

`ProjectionState` is immutable: event strategies return a new state instead of
mutating a shared one, and the simulator carries it from month to month.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config
    from .errors import SoftError


def _grow(base: float, annual_rate: float, months: int) -> float:
    if months <= 0 or annual_rate == 0:
        return base
    return base * (1.0 + annual_rate) ** (months / 12.0)


@dataclass(frozen=True)
class ProjectionState:
    """
    Persistent scenario levels that events can change.

    Salary and expense levels are stored together with the month they were last
    set (their anchor); growth compounds smoothly from that anchor.

    Attributes:
        annual_salary: Gross annual salary at ``salary_anchor``
        annual_salary_growth: Annual salary growth rate
        salary_anchor: Month index the salary level refers to
        monthly_expenses: Base monthly expenses at ``expense_anchor``
        annual_expense_growth: Annual base-expense growth rate
        expense_anchor: Month index the expense level refers to
        monthly_savings_rate: Share of positive net cash flow invested (0..1)
    """

    annual_salary: float
    annual_salary_growth: float
    monthly_expenses: float
    annual_expense_growth: float
    monthly_savings_rate: float
    salary_anchor: int = 0
    expense_anchor: int = 0

    @classmethod
    def from_config(cls, config: Config) -> ProjectionState:
        return cls(
            annual_salary=config.annual_salary,
            annual_salary_growth=config.annual_salary_growth,
            monthly_expenses=config.monthly_expenses,
            annual_expense_growth=config.annual_expense_growth,
            monthly_savings_rate=min(max(config.monthly_savings_rate, 0.0), 1.0),
        )

    def salary_at(self, month: int) -> float:
        """Annual gross salary in effect at ``month``."""
        return _grow(
            self.annual_salary, self.annual_salary_growth, month - self.salary_anchor
        )

    def expenses_at(self, month: int) -> float:
        """Base monthly expenses in effect at ``month``."""
        return _grow(
            self.monthly_expenses, self.annual_expense_growth, month - self.expense_anchor
        )

    def evolve(self, **changes) -> ProjectionState:
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


@dataclass(frozen=True)
class EventOutcome:
    """
    Result of applying one event occurrence.

    Attributes:
        state: State after the event (the input state when unchanged)
        income: One-time income for the month
        taxable_income: Part of ``income`` subject to income tax
        expense: One-time expense for the month
        debt_payments: Extra principal to apply, by debt account id
        errors: Soft errors to record as warnings
    """

    state: ProjectionState
    income: float = 0.0
    taxable_income: float = 0.0
    expense: float = 0.0
    debt_payments: Mapping[str, float] = field(default_factory=dict)
    errors: tuple[SoftError, ...] = ()


@dataclass(frozen=True)
class EventContext:
    """
    Read-only view handed to event strategies.

    Attributes:
        month: Month index being simulated (1..N)
        debt_balances: Current outstanding balance per debt account
    """

    month: int
    debt_balances: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.debt_balances, MappingProxyType):
            object.__setattr__(
                self, "debt_balances", MappingProxyType(dict(self.debt_balances))
            )


@dataclass(frozen=True)
class DebtSchedule:
    """
    Prepared servicing parameters of one debt account.

    Attributes:
        account_id: Debt account id
        annual_rate: Annual rate as a fraction
        monthly_payment: Scheduled payment, normalised to a monthly amount
        remaining_months: Months left on the schedule when the run starts (0 = unknown)
    """

    account_id: str
    annual_rate: float
    monthly_payment: float
    remaining_months: int = 0

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / 12.0


@dataclass(frozen=True)
class AmortizationStep:
    """
    One month of servicing a debt.

    Attributes:
        balance: Balance after the payment (>= 0)
        interest: Interest charged and paid this month
        principal: Scheduled principal repaid
        extra: Extra principal repaid (configured extra payments)
        errors: Soft errors raised by this step
    """

    balance: float
    interest: float = 0.0
    principal: float = 0.0
    extra: float = 0.0
    errors: tuple[SoftError, ...] = ()

    @property
    def payment(self) -> float:
        """Cash paid this month (interest plus all principal)."""
        return self.interest + self.principal + self.extra
