"""
Projection service: the request boundary around the simulator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .accounts import FinancialSnapshot
from .config import Config
from .context import RequestContext
from .errors import AuthenticationError, DataLoadError
from .interfaces import IAccountProvider, IRecurringExpenseProvider
from .results import ProjectionResult
from .simulator import NetWorthSimulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionRequest:
    """Input of `ProjectionService.calculate_projection`."""

    config: Config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectionRequest:
        """Accept ``{"config": {...}}`` or a bare config mapping."""
        raw = data.get("config", data) if isinstance(data, dict) else data
        return cls(config=Config.from_dict(raw))


class ProjectionService:
    """
    Loads the user's financial snapshot and runs one projection.

    Only authentication, data loading and cancellation fail a request; every
    other anomaly is reported in `ProjectionResult.warnings`.

    Args:
        accounts: Source of accounts and debt terms
        expenses: Source of recurring expenses (optional)

    Example:
        ```python
        service = ProjectionService(InMemoryAccountProvider(data))
        result = service.calculate_projection(RequestContext("user-1"), request)
        ```
    """

    def __init__(
        self,
        accounts: IAccountProvider,
        expenses: IRecurringExpenseProvider | None = None,
    ):
        self.accounts = accounts
        self.expenses = expenses

    def load_snapshot(self, ctx: RequestContext) -> FinancialSnapshot:
        """
        Read the user's snapshot from the providers.

        Raises:
            RequestCancelledError: If cancelled before or after the reads
            DataLoadError: If a provider fails (original exception chained)
        """
        ctx.check()
        user_id = ctx.user_id
        try:
            accounts = self.accounts.get_accounts(user_id)
        except Exception as exc:
            raise DataLoadError("accounts", f"failed to load accounts: {exc}") from exc
        try:
            debts = self.accounts.get_debt_terms(user_id)
        except Exception as exc:
            raise DataLoadError("debts", f"failed to load debt terms: {exc}") from exc
        recurring = []
        if self.expenses is not None:
            try:
                recurring = self.expenses.get_recurring_expenses(user_id)
            except Exception as exc:
                raise DataLoadError(
                    "recurring_expenses", f"failed to load recurring expenses: {exc}"
                ) from exc
        ctx.check()
        return FinancialSnapshot(
            accounts=tuple(accounts),
            debts=tuple(debts),
            recurring_expenses=tuple(recurring),
        )

    def calculate_projection(
        self, ctx: RequestContext, request: ProjectionRequest
    ) -> ProjectionResult:
        """
        Run a projection for the authenticated user.

        Args:
            ctx: Request context (user id, deadline, cancellation)
            request: Projection request carrying the scenario config

        Returns:
            ProjectionResult with one point per month and series

        Raises:
            AuthenticationError: If ``ctx.user_id`` is empty
            DataLoadError: If the snapshot cannot be loaded
            RequestCancelledError: If the request is cancelled before the run
        """
        if not ctx.user_id:
            raise AuthenticationError("unauthenticated: user id is required")

        config = request.config
        logger.info(
            "Projection started: user=%s horizon=%dy",
            ctx.user_id,
            config.time_horizon_years,
        )
        snapshot = self.load_snapshot(ctx)
        result = NetWorthSimulator(config, snapshot).run()
        logger.info(
            "Projection finished: user=%s months=%d warnings=%d",
            ctx.user_id,
            len(result.net_worth),
            len(result.warnings),
        )
        return result
