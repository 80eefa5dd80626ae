"""
Expense level change event strategy.
"""

from __future__ import annotations

from finforecast.core.events import Event
from finforecast.core.interfaces import IEventStrategy
from finforecast.core.kinds import ExpenseChangeType
from finforecast.core.state import EventContext, EventOutcome, ProjectionState


class EventExpenseLevelChange(IEventStrategy):
    """
    Persistent change of base monthly expenses (kind: 'expense_level_change').

    The change applies to the grown expense level of the event month, and growth
    then compounds from that month.

    Modes (``expense_change_type``):
        - 'absolute': set expenses to ``new_expenses``
        - 'relative_amount': add ``expense_change`` (signed)
        - 'relative_percent': multiply by ``1 + expense_change``
        - unset: behaves as 'absolute' when ``new_expenses > 0``, else no change

    The result is clamped to >= 0. ``new_expense_growth`` replaces the growth
    rate when given.
    """

    def apply(
        self, event: Event, state: ProjectionState, ctx: EventContext
    ) -> EventOutcome:
        params = event.parameters
        current = state.expenses_at(ctx.month)

        mode = params.expense_change_type
        if mode is ExpenseChangeType.ABSOLUTE:
            level = params.new_expenses
        elif mode is ExpenseChangeType.RELATIVE_AMOUNT:
            level = current + params.expense_change
        elif mode is ExpenseChangeType.RELATIVE_PERCENT:
            level = current * (1.0 + params.expense_change)
        elif params.new_expenses > 0:
            level = params.new_expenses
        else:
            level = current

        growth = state.annual_expense_growth
        if params.new_expense_growth is not None:
            growth = params.new_expense_growth

        return EventOutcome(
            state=state.evolve(
                monthly_expenses=max(level, 0.0),
                annual_expense_growth=growth,
                expense_anchor=ctx.month,
            )
        )
