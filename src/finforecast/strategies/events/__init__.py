"""
Event strategies (one per event kind).
"""

from .expense_level_change import EventExpenseLevelChange
from .extra_debt_payment import EventExtraDebtPayment
from .one_time import EventOneTimeExpense, EventOneTimeIncome
from .salary_change import EventSalaryChange
from .savings_rate_change import EventSavingsRateChange

__all__ = [
    "EventOneTimeIncome",
    "EventOneTimeExpense",
    "EventExtraDebtPayment",
    "EventSalaryChange",
    "EventExpenseLevelChange",
    "EventSavingsRateChange",
]
