"""
Strategy registry setup for FinForecast.
"""

from finforecast.core.kinds import DebtKind, EventType, ValuationKind
from finforecast.core.registry import (
    EventRegistry,
    ScheduleRegistry,
    ValuationRegistry,
    ensure_registries_complete,
)

# Event strategies
from .events.expense_level_change import EventExpenseLevelChange
from .events.extra_debt_payment import EventExtraDebtPayment
from .events.one_time import EventOneTimeExpense, EventOneTimeIncome
from .events.salary_change import EventSalaryChange
from .events.savings_rate_change import EventSavingsRateChange

# Schedule strategies
from .schedule.amortizing_debt import ScheduleAmortizingDebt

# Valuation strategies
from .valuation.growth import ValuationAppreciating, ValuationInvestment, ValuationStatic


def register_defaults():
    """
    Register all default strategy implementations in the global registries.

    Registered Strategies:
        Events:
            - 'one_time_income' / 'one_time_expense': one-off cash amounts
            - 'extra_debt_payment': lump-sum principal payment
            - 'salary_change', 'expense_level_change', 'savings_rate_change':
              persistent state changes

        Debts:
            - 'mortgage', 'loan': fixed-rate amortizing schedule

        Assets:
            - 'investment': compounding returns plus savings allocation
            - 'appreciating': real-asset appreciation/depreciation
            - 'static': held at face value

    Raises:
        ConfigError: If an event, debt or valuation kind is left without a strategy

    Note:
        This function is automatically called when `finforecast.strategies` is
        imported.
    """
    # Register event strategies
    EventRegistry[EventType.ONE_TIME_INCOME] = EventOneTimeIncome()
    EventRegistry[EventType.ONE_TIME_EXPENSE] = EventOneTimeExpense()
    EventRegistry[EventType.EXTRA_DEBT_PAYMENT] = EventExtraDebtPayment()
    EventRegistry[EventType.SALARY_CHANGE] = EventSalaryChange()
    EventRegistry[EventType.EXPENSE_LEVEL_CHANGE] = EventExpenseLevelChange()
    EventRegistry[EventType.SAVINGS_RATE_CHANGE] = EventSavingsRateChange()

    # Register debt schedule strategies
    ScheduleRegistry[DebtKind.MORTGAGE] = ScheduleAmortizingDebt()
    ScheduleRegistry[DebtKind.LOAN] = ScheduleAmortizingDebt()

    # Register asset valuation strategies
    ValuationRegistry[ValuationKind.INVESTMENT] = ValuationInvestment()
    ValuationRegistry[ValuationKind.APPRECIATING] = ValuationAppreciating()
    ValuationRegistry[ValuationKind.STATIC] = ValuationStatic()

    ensure_registries_complete()
