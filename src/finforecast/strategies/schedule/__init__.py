"""
Schedule strategies for debt accounts.
"""

from .amortizing_debt import ScheduleAmortizingDebt, annuity_payment

__all__ = ["ScheduleAmortizingDebt", "annuity_payment"]
