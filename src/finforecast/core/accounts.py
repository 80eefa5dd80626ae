"""
Account, debt and recurring-expense snapshots.

These are read-only inputs fetched once from the external account data
providers before a projection starts. Nothing in here is mutated by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .errors import ConfigError
from .kinds import DebtKind, F
from .utils import coerce_date, coerce_float


@dataclass(frozen=True)
class AccountSnapshot:
    """
    Current state of one account.

    Attributes:
        id: Account identifier
        account_type: Account class used for returns/allocation lookups
            (e.g. 'tfsa', 'rrsp', 'savings', 'real_estate', 'mortgage')
        is_asset: True for assets, False for liabilities
        balance: Latest balance; liabilities may be stored negative
        currency: ISO currency code of the balance
        name: Display name
    """

    id: str
    account_type: str
    is_asset: bool
    balance: float = 0.0
    currency: str = "CAD"
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict, label: str = "account") -> AccountSnapshot:
        if not isinstance(data, dict) or not data.get("id"):
            raise ConfigError(f"{label}: 'id' is required")
        account_type = data.get("type", data.get("account_type"))
        if not account_type:
            raise ConfigError(f"{label}: 'type' is required")
        return cls(
            id=str(data["id"]),
            account_type=str(account_type).lower(),
            is_asset=bool(data.get("is_asset", True)),
            balance=coerce_float(data.get("balance"), f"{label}.balance", 0.0),
            currency=str(data.get("currency") or "CAD").upper(),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class DebtTerms:
    """
    Amortization terms of a mortgage or loan account.

    The current balance lives on the matching `AccountSnapshot`; these terms
    only describe how that balance is serviced.

    Attributes:
        account_id: Id of the liability account these terms belong to
        kind: Mortgage or loan
        original_principal: Principal at origination
        annual_rate: Annual interest rate as a fraction (0.03 for 3%)
        start_date: Origination date
        term_months: Length of the current term
        amortization_months: Full amortization length (mortgages); 0 = use term
        payment_amount: Scheduled payment per period; 0 = derive (annuity)
        payment_frequency: Cadence of ``payment_amount``
        current_balance: Balance used when no matching account snapshot exists
    """

    account_id: str
    kind: DebtKind = DebtKind.LOAN
    original_principal: float = 0.0
    annual_rate: float = 0.0
    start_date: date | None = None
    term_months: int = 0
    amortization_months: int = 0
    payment_amount: float = 0.0
    payment_frequency: str = F.MONTHLY
    current_balance: float | None = None

    @classmethod
    def from_dict(cls, data: dict, label: str = "debt") -> DebtTerms:
        if not isinstance(data, dict) or not data.get("account_id"):
            raise ConfigError(f"{label}: 'account_id' is required")
        try:
            kind = DebtKind(str(data.get("kind", DebtKind.LOAN.value)).lower())
        except ValueError as exc:
            raise ConfigError(
                f"{label}.kind must be 'mortgage' or 'loan', got {data.get('kind')!r}"
            ) from exc
        start = data.get("start_date")
        return cls(
            account_id=str(data["account_id"]),
            kind=kind,
            original_principal=coerce_float(
                data.get("original_principal", data.get("original_amount")),
                f"{label}.original_principal",
                0.0,
            ),
            annual_rate=coerce_float(
                data.get("annual_rate", data.get("interest_rate")),
                f"{label}.annual_rate",
                0.0,
            ),
            start_date=coerce_date(start, f"{label}.start_date") if start else None,
            term_months=int(data.get("term_months") or 0),
            amortization_months=int(data.get("amortization_months") or 0),
            payment_amount=coerce_float(
                data.get("payment_amount"), f"{label}.payment_amount", 0.0
            ),
            payment_frequency=str(data.get("payment_frequency") or F.MONTHLY),
            current_balance=(
                coerce_float(data["current_balance"], f"{label}.current_balance")
                if data.get("current_balance") is not None
                else None
            ),
        )

    @property
    def schedule_months(self) -> int:
        """Months over which the debt amortizes to zero."""
        return self.amortization_months or self.term_months


@dataclass(frozen=True)
class RecurringExpense:
    """An active recurring expense folded into monthly expenses."""

    id: str
    amount: float
    frequency: str = F.MONTHLY
    currency: str = "CAD"
    name: str = ""
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: dict, label: str = "recurring_expense") -> RecurringExpense:
        if not isinstance(data, dict):
            raise ConfigError(f"{label} must be a mapping")
        return cls(
            id=str(data.get("id") or data.get("name") or label),
            amount=coerce_float(data.get("amount"), f"{label}.amount"),
            frequency=str(data.get("frequency") or F.MONTHLY),
            currency=str(data.get("currency") or "CAD").upper(),
            name=str(data.get("name") or ""),
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(frozen=True)
class FinancialSnapshot:
    """
    Read-only bundle of everything the simulator needs from the outside world.

    Attributes:
        accounts: All active accounts with their latest balances
        debts: Amortization terms for mortgage/loan accounts
        recurring_expenses: Recurring expenses (inactive ones are ignored)
    """

    accounts: tuple[AccountSnapshot, ...] = ()
    debts: tuple[DebtTerms, ...] = ()
    recurring_expenses: tuple[RecurringExpense, ...] = field(default=())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FinancialSnapshot:
        """
        Build a snapshot from a mapping with ``accounts``, ``debts`` and
        ``recurring_expenses`` lists.
        """
        data = data or {}
        accounts = tuple(
            AccountSnapshot.from_dict(a, f"accounts[{i}]")
            for i, a in enumerate(data.get("accounts") or [])
        )
        debts = tuple(
            DebtTerms.from_dict(d, f"debts[{i}]")
            for i, d in enumerate(data.get("debts") or [])
        )
        expenses = tuple(
            RecurringExpense.from_dict(e, f"recurring_expenses[{i}]")
            for i, e in enumerate(data.get("recurring_expenses") or [])
        )
        return cls(accounts=accounts, debts=debts, recurring_expenses=expenses)

    def find_account(self, account_id: str) -> AccountSnapshot | None:
        """Return the account with ``account_id``, or None."""
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    @property
    def active_expenses(self) -> list[RecurringExpense]:
        return [e for e in self.recurring_expenses if e.is_active]
