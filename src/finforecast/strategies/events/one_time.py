"""
One-time income and expense event strategies.
"""

from __future__ import annotations

from finforecast.core.events import Event
from finforecast.core.interfaces import IEventStrategy
from finforecast.core.state import EventContext, EventOutcome, ProjectionState


class EventOneTimeIncome(IEventStrategy):
    """
    One-time income (kind: 'one_time_income').

    Bonuses, inheritances, asset sales. The amount is taxable at the marginal
    rate unless the event sets ``taxable: false``.

    Required Parameters:
        - amount: Income received in the event month
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        amount = event.parameters.amount
        return EventOutcome(
            state=state,
            income=amount,
            taxable_income=amount if event.parameters.taxable else 0.0,
        )


class EventOneTimeExpense(IEventStrategy):
    """
    One-time expense (kind: 'one_time_expense').

    Required Parameters:
        - amount: Cash outflow in the event month
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        return EventOutcome(state=state, expense=event.parameters.amount)
