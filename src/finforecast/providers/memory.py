"""
In-memory account and recurring-expense providers.

Both read from a snapshot mapping (the same shape as `FinancialSnapshot.from_dict`),
either shared by every user or keyed by user id under a ``users`` mapping.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from finforecast.core.accounts import (
    AccountSnapshot,
    DebtTerms,
    FinancialSnapshot,
    RecurringExpense,
)
from finforecast.core.config import load_mapping
from finforecast.core.interfaces import IAccountProvider, IRecurringExpenseProvider


class _SnapshotStore:
    def __init__(self, data: dict[str, Any] | FinancialSnapshot):
        self._shared: FinancialSnapshot | None = None
        self._by_user: dict[str, FinancialSnapshot] = {}
        if isinstance(data, FinancialSnapshot):
            self._shared = data
        elif isinstance(data.get("users"), dict):
            self._by_user = {
                str(uid): FinancialSnapshot.from_dict(snap)
                for uid, snap in data["users"].items()
            }
        else:
            self._shared = FinancialSnapshot.from_dict(data)

    def snapshot_for(self, user_id: str) -> FinancialSnapshot:
        if self._shared is not None:
            return self._shared
        try:
            return self._by_user[user_id]
        except KeyError:
            raise LookupError(f"no snapshot for user '{user_id}'") from None


class InMemoryAccountProvider(IAccountProvider):
    """
    Account provider backed by a snapshot mapping.

    Example:
        ```python
        provider = InMemoryAccountProvider({
            "accounts": [{"id": "tfsa", "type": "tfsa", "balance": 25_000}],
        })
        provider.get_accounts("user-1")
        ```
    """

    def __init__(self, data: dict[str, Any] | FinancialSnapshot):
        self._store = _SnapshotStore(data)

    @classmethod
    def from_file(cls, path: str | Path) -> InMemoryAccountProvider:
        return cls(load_mapping(path))

    def get_accounts(self, user_id: str) -> list[AccountSnapshot]:
        return list(self._store.snapshot_for(user_id).accounts)

    def get_debt_terms(self, user_id: str) -> list[DebtTerms]:
        return list(self._store.snapshot_for(user_id).debts)


class InMemoryRecurringExpenseProvider(IRecurringExpenseProvider):
    """Recurring-expense provider backed by a snapshot mapping."""

    def __init__(self, data: dict[str, Any] | FinancialSnapshot):
        self._store = _SnapshotStore(data)

    @classmethod
    def from_file(cls, path: str | Path) -> InMemoryRecurringExpenseProvider:
        return cls(load_mapping(path))

    def get_recurring_expenses(self, user_id: str) -> list[RecurringExpense]:
        return list(self._store.snapshot_for(user_id).recurring_expenses)
