"""
Savings rate change event strategy.
"""

from __future__ import annotations

from finforecast.core.events import Event
from finforecast.core.interfaces import IEventStrategy
from finforecast.core.state import EventContext, EventOutcome, ProjectionState


class EventSavingsRateChange(IEventStrategy):
    """
    Persistent savings rate change (kind: 'savings_rate_change').

    Required Parameters:
        - new_savings_rate: New rate, clamped to [0, 1]
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        rate = min(max(event.parameters.new_savings_rate, 0.0), 1.0)
        return EventOutcome(state=state.evolve(monthly_savings_rate=rate))
