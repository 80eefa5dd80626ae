"""
Data providers for the projection service.
"""

from .memory import InMemoryAccountProvider, InMemoryRecurringExpenseProvider

__all__ = ["InMemoryAccountProvider", "InMemoryRecurringExpenseProvider"]
