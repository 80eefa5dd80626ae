"""
Strategy implementations for FinForecast.

Strategies implement the behaviour behind each kind discriminator:

- Event Strategies: turn an event occurrence into a state transition and
  one-time cash amounts
- Schedule Strategies: service mortgage and loan balances month by month
- Valuation Strategies: grow investment and real-asset balances

Registry System:
The module registers all default strategies in the global registries when it is
imported, and fails loudly if any kind is left without a strategy.
"""

from .events import (
    EventExpenseLevelChange,
    EventExtraDebtPayment,
    EventOneTimeExpense,
    EventOneTimeIncome,
    EventSalaryChange,
    EventSavingsRateChange,
)
from .registry import register_defaults
from .schedule import ScheduleAmortizingDebt, annuity_payment
from .valuation import ValuationAppreciating, ValuationInvestment, ValuationStatic

# Register all default strategies when module is imported
register_defaults()

__all__ = [
    # Event strategies
    "EventOneTimeIncome",
    "EventOneTimeExpense",
    "EventExtraDebtPayment",
    "EventSalaryChange",
    "EventExpenseLevelChange",
    "EventSavingsRateChange",
    # Schedule strategies
    "ScheduleAmortizingDebt",
    "annuity_payment",
    # Valuation strategies
    "ValuationInvestment",
    "ValuationAppreciating",
    "ValuationStatic",
    # Registry
    "register_defaults",
]
