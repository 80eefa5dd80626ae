"""
Net worth simulator: the month-by-month projection loop.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta

from .accounts import AccountSnapshot, DebtTerms, FinancialSnapshot
from .config import Config
from .errors import EventTargetError, SoftError, UnsupportedFrequencyError
from .events import expand_recurring_events, group_events_by_month
from .frequency import MONTHLY_MULTIPLIERS, normalize_frequency
from .interfaces import IEventStrategy, IScheduleStrategy, IValuationStrategy
from .kinds import (
    UNALLOCATED_CASH,
    UNFUNDED_SHORTFALL,
    DebtKind,
    EventType,
    ValuationKind,
)
from .registry import (
    EventRegistry,
    ScheduleRegistry,
    ValuationRegistry,
    ensure_complete,
    ensure_registries_complete,
)
from .results import (
    AssetBreakdownPoint,
    CashFlowPoint,
    DataPoint,
    DebtPayoffPoint,
    ProjectionResult,
    SimulationWarning,
)
from .state import DebtSchedule, EventContext, ProjectionState
from .tax import combined_tax
from .utils import add_months, month_key

logger = logging.getLogger(__name__)

# Weights this close to 1.0 count as summing to 1
_WEIGHT_TOL = 1e-6


class WarningCollector:
    """
    Collects soft anomalies of one run.

    Each (code, subject) pair is recorded and logged once; repeats of the same
    anomaly in later months are dropped.
    """

    def __init__(self):
        self._seen: set[tuple[str, str | None]] = set()
        self.items: list[SimulationWarning] = []

    def add(
        self,
        code: str,
        message: str,
        month: int | None = None,
        subject: str | None = None,
    ) -> None:
        key = (code, subject)
        if key in self._seen:
            return
        self._seen.add(key)
        self.items.append(SimulationWarning(code, message, month, subject))
        logger.warning("%s (month=%s)", message, month)

    def add_error(self, error: SoftError, month: int | None = None) -> None:
        self.add(error.code, str(error), month, error.subject)


@dataclass
class _Asset:
    """Mutable balance of one asset account, owned by a single run."""

    id: str
    account_type: str
    kind: ValuationKind
    annual_rate: float
    balance: float


class NetWorthSimulator:
    """
    Month-by-month projection of cash flow, net worth and debt payoff.

    The simulator takes an immutable `Config` and a read-only
    `FinancialSnapshot`. Every call to `run()` builds its own balance maps and
    state, so one simulator can be run repeatedly and runs never share memory.

    **Monthly Step (month 1..N):**
        1. Apply the month's events (pure strategies returning a new state)
        2. Gross income from the grown salary plus one-time income
        3. Income tax on the annualised salary (federal + regional); one-time
           income is taxed at the marginal rate
        4. Expenses: grown base expenses, recurring expenses (monthly-normalised),
           one-time expenses and debt service (every debt advanced one period)
        5. Net cash flow = income after tax - expenses
        6. Surplus repays any unfunded shortfall, then ``savings_rate`` of the
           rest is allocated; a deficit is withdrawn from the allocation accounts
        7. Investment returns and asset appreciation
        8. Record one point per series

    Month 0 is the unmodified snapshot; its cash-flow point is an informational
    baseline computed without events.

    **Example:**
        ```python
        config = Config.from_dict({"time_horizon_years": 1, "annual_salary": 75_000})
        snapshot = FinancialSnapshot.from_dict({"accounts": [...]})
        result = NetWorthSimulator(config, snapshot).run()
        len(result.net_worth)  # 13
        ```
    """

    def __init__(
        self,
        config: Config,
        snapshot: FinancialSnapshot | None = None,
        *,
        event_registry: Mapping[EventType, IEventStrategy] | None = None,
        schedule_registry: Mapping[DebtKind, IScheduleStrategy] | None = None,
        valuation_registry: Mapping[ValuationKind, IValuationStrategy] | None = None,
    ):
        defaults = (event_registry, schedule_registry, valuation_registry)
        if all(r is None for r in defaults):
            ensure_registries_complete()
        self.config = config
        self.snapshot = snapshot or FinancialSnapshot()
        self.event_registry = EventRegistry if event_registry is None else event_registry
        self.schedule_registry = (
            ScheduleRegistry if schedule_registry is None else schedule_registry
        )
        self.valuation_registry = (
            ValuationRegistry if valuation_registry is None else valuation_registry
        )
        ensure_complete(self.event_registry)

    # --- setup -------------------------------------------------------------

    def _valuation_kind(self, account: AccountSnapshot) -> tuple[ValuationKind, float]:
        cfg = self.config
        if account.account_type in cfg.investment_returns:
            return ValuationKind.INVESTMENT, cfg.investment_returns[account.account_type]
        if account.account_type in cfg.savings_allocation:
            return ValuationKind.INVESTMENT, 0.0
        if account.account_type in cfg.asset_appreciation:
            rate = cfg.asset_appreciation[account.account_type]
            return ValuationKind.APPRECIATING, rate
        return ValuationKind.STATIC, 0.0

    def _check_currency(
        self, subject: str, currency: str, warn: WarningCollector
    ) -> None:
        if currency and currency != self.config.currency:
            warn.add(
                "currency_mismatch",
                f"'{subject}' is in {currency}, projection is in "
                f"{self.config.currency}; amount taken at face value",
                subject=subject,
            )

    def _recurring_monthly(self, warn: WarningCollector) -> float:
        total = 0.0
        for expense in self.snapshot.active_expenses:
            self._check_currency(expense.id, expense.currency, warn)
            try:
                key = normalize_frequency(expense.frequency)
            except UnsupportedFrequencyError:
                warn.add(
                    UnsupportedFrequencyError.code,
                    f"Recurring expense '{expense.id}': unsupported frequency "
                    f"{expense.frequency!r}; treated as monthly",
                    subject=expense.id,
                )
                key = None
            total += expense.amount * (MONTHLY_MULTIPLIERS[key] if key else 1.0)
        return total

    def _debt_balance(self, terms: DebtTerms) -> float:
        account = self.snapshot.find_account(terms.account_id)
        if account is not None:
            return abs(account.balance)
        if terms.current_balance is not None:
            return abs(terms.current_balance)
        return abs(terms.original_principal)

    def _allocation_weights(
        self, assets: dict[str, _Asset], warn: WarningCollector
    ) -> dict[str, float]:
        """Renormalised allocation weight per held account type."""
        configured = self.config.savings_allocation
        if not configured:
            return {}
        total = sum(configured.values())
        if abs(total - 1.0) > _WEIGHT_TOL:
            warn.add(
                "allocation_weights",
                f"savings_allocation weights sum to {total:.4f}; renormalised",
            )
        held = {
            a.account_type
            for a in assets.values()
            if a.kind is ValuationKind.INVESTMENT
        }
        for account_type in configured:
            if account_type not in held:
                warn.add(
                    "allocation_type_missing",
                    f"savings_allocation type '{account_type}' has no account; "
                    f"its weight is redistributed",
                    subject=account_type,
                )
        weights = {t: w for t, w in configured.items() if t in held and w > 0}
        norm = sum(weights.values())
        return {t: w / norm for t, w in weights.items()} if norm > 0 else {}

    # --- monthly helpers ---------------------------------------------------

    @staticmethod
    def _split(
        amount: float, members: list[_Asset], weights: dict[str, float]
    ) -> dict[str, float]:
        """
        Split ``amount`` across allocation accounts.

        Each type gets its weight; within a type the share is pro rata by
        balance, or equal when all balances are zero.
        """
        shares: dict[str, float] = {}
        for account_type, weight in weights.items():
            group = [a for a in members if a.account_type == account_type]
            if not group:
                continue
            type_amount = amount * weight
            total = sum(max(a.balance, 0.0) for a in group)
            for a in group:
                part = max(a.balance, 0.0) / total if total > 0 else 1.0 / len(group)
                shares[a.id] = shares.get(a.id, 0.0) + type_amount * part
        return shares

    def _withdraw(
        self,
        need: float,
        members: list[_Asset],
        weights: dict[str, float],
        grown: dict[str, float],
    ) -> tuple[dict[str, float], float]:
        """
        Withdraw ``need`` from allocation accounts.

        Returns:
            ``(withdrawals, uncovered)``; withdrawals never exceed an account's
            grown balance.
        """
        available = {a.id: max(grown.get(a.id, a.balance), 0.0) for a in members}
        taken = {
            aid: min(share, available[aid])
            for aid, share in self._split(need, members, weights).items()
        }
        left = need - sum(taken.values())
        if left > 0:
            spare = {aid: v - taken.get(aid, 0.0) for aid, v in available.items()}
            spare = {aid: v for aid, v in spare.items() if v > 0}
            pool = sum(spare.values())
            if pool > 0:
                take = min(left, pool)
                for aid, v in spare.items():
                    taken[aid] = taken.get(aid, 0.0) + take * v / pool
                left -= take
        return taken, max(left, 0.0)

    # --- run -----------------------------------------------------------------

    def run(self) -> ProjectionResult:
        """
        Run the projection.

        Returns:
            ProjectionResult with ``total_months + 1`` points per series and
            the soft warnings of the run
        """
        cfg = self.config
        start = cfg.resolved_start
        total_months = cfg.total_months
        horizon_end = add_months(start, total_months + 1) - timedelta(days=1)
        warn = WarningCollector()

        # Balances owned by this run
        assets: dict[str, _Asset] = {}
        static_liabilities: dict[str, float] = {}
        debt_balances: dict[str, float] = {}
        schedules: dict[str, DebtSchedule] = {}
        terms_by_id = {t.account_id: t for t in self.snapshot.debts}

        for account in self.snapshot.accounts:
            self._check_currency(account.id, account.currency, warn)
            if account.is_asset:
                kind, rate = self._valuation_kind(account)
                assets[account.id] = _Asset(
                    account.id, account.account_type, kind, rate, account.balance
                )
            elif account.id not in terms_by_id and account.balance != 0:
                static_liabilities[account.id] = abs(account.balance)

        for terms in self.snapshot.debts:
            balance = self._debt_balance(terms)
            schedule, errors = self.schedule_registry[terms.kind].prepare(
                terms, balance, start
            )
            for error in errors:
                warn.add_error(error)
            debt_balances[terms.account_id] = balance
            schedules[terms.account_id] = schedule

        for account_id in cfg.extra_debt_payments:
            if account_id not in debt_balances:
                warn.add(
                    EventTargetError.code,
                    f"extra_debt_payments: debt account '{account_id}' not found; "
                    f"ignored",
                    subject=account_id,
                )

        recurring = self._recurring_monthly(warn)
        weights = self._allocation_weights(assets, warn)
        shortfall = 0.0

        # Events: expand once, skip anything not after month 0
        events = expand_recurring_events(cfg.events, horizon_end, on_error=warn.add_error)
        start_key = month_key(start)
        due = []
        for event in events:
            if month_key(event.date) <= start_key:
                warn.add(
                    "event_before_start",
                    f"Event '{event.id}' dated {event.date} is not after the "
                    f"projection start {start}; skipped",
                    subject=event.id,
                )
                continue
            due.append(event)
        by_month = group_events_by_month(due)

        state = ProjectionState.from_config(cfg)
        result = ProjectionResult()

        def allocation_members() -> list[_Asset]:
            if weights:
                return [a for a in assets.values() if a.account_type in weights]
            if UNALLOCATED_CASH not in assets:
                assets[UNALLOCATED_CASH] = _Asset(
                    UNALLOCATED_CASH, UNALLOCATED_CASH, ValuationKind.STATIC, 0.0, 0.0
                )
            return [assets[UNALLOCATED_CASH]]

        def member_weights() -> dict[str, float]:
            return weights or {UNALLOCATED_CASH: 1.0}

        def record(month: int, when: date, flow: CashFlowPoint) -> None:
            asset_total = sum(a.balance for a in assets.values())
            breakdown: dict[str, float] = {}
            for a in assets.values():
                breakdown[a.account_type] = breakdown.get(a.account_type, 0.0) + a.balance
            debts = dict(debt_balances)
            debts.update(static_liabilities)
            if shortfall > 0:
                debts[UNFUNDED_SHORTFALL] = shortfall
            total_debt = sum(debts.values())

            result.net_worth.append(DataPoint(month, when, asset_total - total_debt))
            result.assets.append(DataPoint(month, when, asset_total))
            result.liabilities.append(DataPoint(month, when, total_debt))
            result.cash_flow.append(flow)
            result.debt_payoff.append(DebtPayoffPoint(month, when, debts, total_debt))
            result.asset_breakdown.append(AssetBreakdownPoint(month, when, breakdown))

        def income_and_tax(
            month: int, one_time: float, taxable: float
        ) -> tuple[float, float]:
            annual = state.salary_at(month)
            brackets = (cfg.federal_tax_brackets, cfg.regional_tax_brackets)
            base_tax = combined_tax(annual, *brackets)
            tax = base_tax / 12.0
            if taxable:
                tax += combined_tax(annual + taxable, *brackets) - base_tax
            return annual / 12.0 + one_time, tax

        # Month 0: snapshot plus baseline cash flow (no balances move)
        gross, tax = income_and_tax(0, 0.0, 0.0)
        service = interest = 0.0
        for account_id, schedule in schedules.items():
            step = self.schedule_registry[terms_by_id[account_id].kind].step(
                schedule,
                debt_balances[account_id],
                cfg.extra_debt_payments.get(account_id, 0.0),
            )
            service += step.payment
            interest += step.interest
        expenses = state.expenses_at(0) + recurring + service
        record(
            0,
            start,
            CashFlowPoint(
                0, start, gross - tax, expenses, gross - tax - expenses,
                gross_income=gross, tax=tax, debt_service=service, interest=interest,
            ),
        )

        for month in range(1, total_months + 1):
            when = add_months(start, month)

            # 1. events
            one_time_income = taxable_income = one_time_expense = event_debt_paid = 0.0
            for event in by_month.get(month_key(when), []):
                ctx = EventContext(month=month, debt_balances=debt_balances)
                outcome = self.event_registry[event.type].apply(event, state, ctx)
                state = outcome.state
                one_time_income += outcome.income
                taxable_income += outcome.taxable_income
                one_time_expense += outcome.expense
                for account_id, paid in outcome.debt_payments.items():
                    debt_balances[account_id] = max(debt_balances[account_id] - paid, 0.0)
                    event_debt_paid += paid
                for error in outcome.errors:
                    warn.add_error(error, month)

            # 2-3. income and tax
            gross, tax = income_and_tax(month, one_time_income, taxable_income)

            # 4. expenses, with every debt advanced one period
            service = interest = 0.0
            for account_id, schedule in schedules.items():
                step = self.schedule_registry[terms_by_id[account_id].kind].step(
                    schedule,
                    debt_balances[account_id],
                    cfg.extra_debt_payments.get(account_id, 0.0),
                )
                debt_balances[account_id] = step.balance
                service += step.payment
                interest += step.interest
                for error in step.errors:
                    warn.add_error(error, month)
            expenses = state.expenses_at(month) + recurring + one_time_expense + service

            # 5. net cash flow
            net = gross - tax - expenses

            # 6-7. savings allocation or withdrawal, then growth
            grown = {
                a.id: self.valuation_registry[a.kind].step(a.balance, a.annual_rate)
                for a in assets.values()
            }
            flows: dict[str, float] = {}
            if net >= 0:
                repaid = min(shortfall, net)
                shortfall -= repaid
                invested = (net - repaid) * state.monthly_savings_rate
                if invested > 0:
                    flows = self._split(invested, allocation_members(), member_weights())
                saved = invested
            else:
                members = allocation_members()
                taken, uncovered = self._withdraw(-net, members, member_weights(), grown)
                flows = {aid: -amount for aid, amount in taken.items()}
                shortfall += uncovered
                saved = -sum(taken.values())
                if uncovered > 0:
                    warn.add(
                        "unfunded_shortfall",
                        f"Month {month}: deficit of {uncovered:.2f} exceeds savings; "
                        f"recorded as '{UNFUNDED_SHORTFALL}' liability",
                        month,
                        UNFUNDED_SHORTFALL,
                    )

            for a in list(assets.values()):
                if a.id in flows:
                    a.balance = self.valuation_registry[a.kind].step(
                        a.balance, a.annual_rate, flows[a.id]
                    )
                elif a.id in grown:
                    a.balance = grown[a.id]

            # 8. record
            record(
                month,
                when,
                CashFlowPoint(
                    month, when, gross - tax, expenses, net,
                    gross_income=gross,
                    tax=tax,
                    debt_service=service + event_debt_paid,
                    interest=interest,
                    savings=saved,
                ),
            )
            logger.debug(
                "month %d: income=%.2f tax=%.2f expenses=%.2f net=%.2f net_worth=%.2f",
                month, gross, tax, expenses, net, result.net_worth[-1].value,
            )

        result.warnings = warn.items
        return result


def simulate(
    config: Config, snapshot: FinancialSnapshot | None = None
) -> ProjectionResult:
    """Run one projection with the default strategy registries."""
    return NetWorthSimulator(config, snapshot).run()
