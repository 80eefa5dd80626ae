"""
Salary change event strategy.
"""

from __future__ import annotations

from finforecast.core.events import Event
from finforecast.core.interfaces import IEventStrategy
from finforecast.core.state import EventContext, EventOutcome, ProjectionState


class EventSalaryChange(IEventStrategy):
    """
    Persistent salary change (kind: 'salary_change').

    Sets the annual salary from the event month on; growth then compounds from
    that month.

    Required Parameters:
        - new_salary: New gross annual salary

    Optional Parameters:
        - new_salary_growth: Replaces the annual growth rate when given
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        params = event.parameters
        growth = state.annual_salary_growth
        if params.new_salary_growth is not None:
            growth = params.new_salary_growth
        return EventOutcome(
            state=state.evolve(
                annual_salary=max(params.new_salary, 0.0),
                annual_salary_growth=growth,
                salary_anchor=ctx.month,
            )
        )
