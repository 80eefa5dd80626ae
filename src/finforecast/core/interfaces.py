"""
Strategy and provider interface protocols for FinForecast.
Defines the contracts that event strategies and data providers must satisfy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import date

    from .accounts import AccountSnapshot, DebtTerms, RecurringExpense
    from .events import Event
    from .state import (
        AmortizationStep,
        DebtSchedule,
        EventContext,
        EventOutcome,
        ProjectionState,
    )


@runtime_checkable
class IEventStrategy(Protocol):
    """
    Contract for event strategies (one per `EventType`).
    Responsibilities: turn one event occurrence into a state transition and
    one-time cash amounts, without touching any balance.
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        """
        Apply one (non-recurring) event occurrence.

        Returns:
            EventOutcome with the new state, one-time income/expense and the
            extra debt payments the simulator should apply.
        """
        ...


@runtime_checkable
class IScheduleStrategy(Protocol):
    """
    Contract for debt schedule strategies (one per `DebtKind`).
    Responsibilities: derive servicing parameters once, then advance a balance
    one month at a time.
    """

    def prepare(
        self, terms: DebtTerms, balance: float, start: date
    ) -> tuple[DebtSchedule, list]:
        """
        Resolve rate and monthly payment for a debt at the projection start.

        Returns:
            ``(schedule, soft_errors)``
        """
        ...

    def step(
        self, schedule: DebtSchedule, balance: float, extra: float = 0.0
    ) -> AmortizationStep:
        """Advance ``balance`` by one monthly period."""
        ...


@runtime_checkable
class IValuationStrategy(Protocol):
    """
    Contract for asset valuation strategies.
    Responsibilities: grow one asset balance by one month.
    """

    def step(self, balance: float, annual_rate: float, flow: float = 0.0) -> float:
        """Balance after one month of growth plus ``flow`` (signed)."""
        ...


@runtime_checkable
class IAccountProvider(Protocol):
    """
    Contract for the external account data source.
    Responsibilities: return the user's active accounts and debt terms.
    """

    def get_accounts(self, user_id: str) -> list[AccountSnapshot]:
        """All active accounts with their latest balances."""
        ...

    def get_debt_terms(self, user_id: str) -> list[DebtTerms]:
        """Mortgage and loan terms, keyed to liability accounts."""
        ...


@runtime_checkable
class IRecurringExpenseProvider(Protocol):
    """Contract for the external recurring-expense source."""

    def get_recurring_expenses(self, user_id: str) -> list[RecurringExpense]:
        """Recurring expenses (the simulator ignores inactive ones)."""
        ...


__all__ = [
    "IEventStrategy",
    "IScheduleStrategy",
    "IValuationStrategy",
    "IAccountProvider",
    "IRecurringExpenseProvider",
]
