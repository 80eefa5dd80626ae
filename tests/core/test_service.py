"""
Tests for the projection service boundary and request context.
"""

import time

import pytest
from finforecast.core.accounts import AccountSnapshot
from finforecast.core.context import RequestContext
from finforecast.core.errors import (
    AuthenticationError,
    DataLoadError,
    RequestCancelledError,
)
from finforecast.core.service import ProjectionRequest, ProjectionService
from finforecast.providers import (
    InMemoryAccountProvider,
    InMemoryRecurringExpenseProvider,
)

USER_DATA = {
    "users": {
        "alice": {
            "accounts": [
                {"id": "tfsa", "type": "tfsa", "is_asset": True, "balance": 20000},
                {"id": "loan", "type": "loan", "is_asset": False, "balance": -5000},
            ],
            "debts": [
                {
                    "account_id": "loan",
                    "kind": "loan",
                    "annual_rate": 0.06,
                    "payment_amount": 250,
                }
            ],
            "recurring_expenses": [
                {"id": "phone", "amount": 80, "frequency": "monthly"}
            ],
        }
    }
}


class FailingProvider:
    """Account provider whose reads always fail."""

    def get_accounts(self, user_id):
        raise OSError("database unavailable")

    def get_debt_terms(self, user_id):
        return []


@pytest.fixture
def service():
    return ProjectionService(
        InMemoryAccountProvider(USER_DATA),
        InMemoryRecurringExpenseProvider(USER_DATA),
    )


@pytest.fixture
def request_(make_config):
    return ProjectionRequest(make_config())


class TestProjectionService:
    """Authentication, loading and cancellation."""

    def test_successful_projection(self, service, request_):
        result = service.calculate_projection(RequestContext("alice"), request_)
        assert len(result) == 13
        assert result.debt_payoff[0].debts == {"loan": 5000}
        assert result.cash_flow[1].expenses > 3080
        result.validate()

    @pytest.mark.parametrize("user_id", [None, ""])
    def test_unauthenticated(self, service, request_, user_id):
        with pytest.raises(AuthenticationError):
            service.calculate_projection(RequestContext(user_id), request_)

    def test_provider_failure_wrapped(self, request_):
        """Provider exceptions surface as DataLoadError with the cause chained."""
        service = ProjectionService(FailingProvider())
        with pytest.raises(DataLoadError) as exc_info:
            service.calculate_projection(RequestContext("alice"), request_)
        assert exc_info.value.source == "accounts"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_unknown_user_is_load_error(self, service, request_):
        with pytest.raises(DataLoadError):
            service.calculate_projection(RequestContext("bob"), request_)

    def test_cancelled_request(self, service, request_):
        ctx = RequestContext("alice")
        ctx.cancel()
        with pytest.raises(RequestCancelledError):
            service.calculate_projection(ctx, request_)

    def test_expired_deadline(self, service, request_):
        ctx = RequestContext("alice", deadline=time.monotonic() - 1)
        with pytest.raises(RequestCancelledError, match="deadline"):
            service.calculate_projection(ctx, request_)

    def test_load_snapshot(self, service):
        snapshot = service.load_snapshot(RequestContext("alice"))
        assert isinstance(snapshot.accounts[0], AccountSnapshot)
        assert [e.id for e in snapshot.recurring_expenses] == ["phone"]


class TestProjectionRequest:
    def test_envelope_and_bare(self, scenario_dict):
        wrapped = ProjectionRequest.from_dict({"config": scenario_dict})
        bare = ProjectionRequest.from_dict(scenario_dict)
        assert wrapped == bare


class TestRequestContext:
    """Deadline and cancellation state."""

    def test_fresh_context_not_cancelled(self):
        ctx = RequestContext.with_timeout("alice", seconds=60)
        assert not ctx.cancelled
        ctx.check()

    def test_cancel(self):
        ctx = RequestContext("alice")
        ctx.cancel()
        assert ctx.cancelled
        with pytest.raises(RequestCancelledError, match="cancelled"):
            ctx.check()
