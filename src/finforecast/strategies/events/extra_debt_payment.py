"""
Extra debt payment event strategy.
"""

from __future__ import annotations

from finforecast.core.errors import EventTargetError
from finforecast.core.events import Event
from finforecast.core.interfaces import IEventStrategy
from finforecast.core.state import EventContext, EventOutcome, ProjectionState


class EventExtraDebtPayment(IEventStrategy):
    """
    Lump-sum principal payment on a debt account (kind: 'extra_debt_payment').

    The payment is capped at the outstanding balance, so a balance never goes
    negative; the amount actually paid is a cash outflow of the month. An
    unknown ``account_id`` is a no-op that yields an `EventTargetError`.

    Required Parameters:
        - account_id: Debt account to pay down
        - amount: Requested payment
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        account_id = event.parameters.account_id
        if account_id not in ctx.debt_balances:
            return EventOutcome(
                state=state,
                errors=(
                    EventTargetError(
                        f"Event '{event.id}': debt account '{account_id}' not found; "
                        f"extra payment skipped",
                        subject=account_id or event.id,
                    ),
                ),
            )

        paid = min(max(event.parameters.amount, 0.0), ctx.debt_balances[account_id])
        if paid <= 0:
            return EventOutcome(state=state)
        return EventOutcome(state=state, expense=paid, debt_payments={account_id: paid})
