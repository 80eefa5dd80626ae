"""
Scenario configuration for a projection run.
"""

from __future__ import annotations

import json
import warnings
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, ConfigWarning
from .events import Event, EventParameters
from .kinds import EventType
from .tax import TaxBracket
from .utils import add_months, coerce_date, coerce_float, first_of_month

# Upper bound on the projection horizon (360 months is the common case)
MAX_HORIZON_YEARS = 100

# Legacy key -> canonical key
_ALIASES = {
    "provincial_tax_brackets": "regional_tax_brackets",
    "state_tax_brackets": "regional_tax_brackets",
}


def _rate_map(raw: Any, label: str) -> dict[str, float]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{label} must be a mapping, got {type(raw).__name__}")
    return {
        str(k).lower(): coerce_float(v, f"{label}.{k}") for k, v in raw.items()
    }


def _brackets(raw: Any, label: str) -> tuple[TaxBracket, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError(f"{label} must be a list, got {type(raw).__name__}")
    return tuple(TaxBracket.from_dict(b, f"{label}[{i}]") for i, b in enumerate(raw))


def _legacy_one_time(raw: Any, event_type: EventType, label: str) -> list[Event]:
    events = []
    for i, item in enumerate(raw or []):
        if not isinstance(item, dict):
            raise ConfigError(f"{label}[{i}] must be a mapping")
        events.append(
            Event(
                id=f"{label}_{i}",
                type=event_type,
                date=coerce_date(item.get("date"), f"{label}[{i}].date"),
                description=str(item.get("description") or ""),
                parameters=EventParameters(
                    amount=coerce_float(item.get("amount"), f"{label}[{i}].amount")
                ),
            )
        )
    return events


@dataclass(frozen=True)
class Config:
    """
    Projection scenario parameters (immutable per run).

    Attributes:
        time_horizon_years: Horizon in years (0..MAX_HORIZON_YEARS)
        inflation_rate: Annual inflation, used for real-terms KPIs
        annual_salary: Gross annual salary at month 0
        annual_salary_growth: Annual salary growth (0.03 for 3%)
        monthly_expenses: Base monthly expenses at month 0
        annual_expense_growth: Annual growth of base expenses
        monthly_savings_rate: Share of positive net cash flow invested (0..1)
        federal_tax_brackets: Federal progressive brackets
        regional_tax_brackets: Provincial/state progressive brackets
        investment_returns: Annual return by account type
        asset_appreciation: Annual appreciation by account type (real assets)
        savings_allocation: Allocation weight by account type
        extra_debt_payments: Extra monthly principal by debt account id
        events: Event templates (one-time or recurring)
        currency: Projection currency; other currencies are taken at face value
        start_date: Month 0 (defaults to the first day of the current month)
    """

    time_horizon_years: int = 5
    inflation_rate: float = 0.0
    annual_salary: float = 0.0
    annual_salary_growth: float = 0.0
    monthly_expenses: float = 0.0
    annual_expense_growth: float = 0.0
    monthly_savings_rate: float = 0.0
    federal_tax_brackets: tuple[TaxBracket, ...] = ()
    regional_tax_brackets: tuple[TaxBracket, ...] = ()
    investment_returns: dict[str, float] = field(default_factory=dict)
    asset_appreciation: dict[str, float] = field(default_factory=dict)
    savings_allocation: dict[str, float] = field(default_factory=dict)
    extra_debt_payments: dict[str, float] = field(default_factory=dict)
    events: tuple[Event, ...] = ()
    currency: str = "CAD"
    start_date: date | None = None

    def __post_init__(self):
        """Validate ranges that would make the run meaningless or unbounded."""
        if isinstance(self.time_horizon_years, bool) or not isinstance(
            self.time_horizon_years, int
        ):
            raise ConfigError("time_horizon_years must be an integer")
        if not 0 <= self.time_horizon_years <= MAX_HORIZON_YEARS:
            raise ConfigError(
                f"time_horizon_years must be between 0 and {MAX_HORIZON_YEARS}, "
                f"got {self.time_horizon_years}"
            )
        for name in (
            "inflation_rate",
            "annual_salary",
            "annual_salary_growth",
            "monthly_expenses",
            "annual_expense_growth",
            "monthly_savings_rate",
        ):
            coerce_float(getattr(self, name), name)
        for account_id, amount in self.extra_debt_payments.items():
            if amount < 0:
                raise ConfigError(
                    f"extra_debt_payments.{account_id} must be >= 0, got {amount}"
                )

    @property
    def total_months(self) -> int:
        return self.time_horizon_years * 12

    @property
    def resolved_start(self) -> date:
        """Month 0 of the projection."""
        return first_of_month(self.start_date) if self.start_date else first_of_month()

    @property
    def end_date(self) -> date:
        """Last simulated month (inclusive)."""
        return add_months(self.resolved_start, self.total_months)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Create a Config from its JSON/YAML mapping.

        Args:
            data: Mapping using the wire key names (see `to_dict`). The legacy
                ``provincial_tax_brackets`` key and the ``one_time_incomes`` /
                ``one_time_expenses`` lists are accepted.

        Returns:
            Validated Config

        Raises:
            ConfigError: On missing/invalid fields
        """
        if not isinstance(data, dict):
            raise ConfigError(f"config must be a mapping, got {type(data).__name__}")
        data = dict(data)

        for legacy, canonical in _ALIASES.items():
            if legacy not in data:
                continue
            if canonical in data and data[canonical] != data[legacy]:
                warnings.warn(
                    f"'{legacy}' ignored because '{canonical}' is set "
                    f"(precedence: {canonical}).",
                    ConfigWarning,
                    stacklevel=2,
                )
            else:
                data.setdefault(canonical, data[legacy])

        events = [
            Event.from_dict(e, f"events[{i}]")
            for i, e in enumerate(data.get("events") or [])
        ]
        events += _legacy_one_time(
            data.get("one_time_incomes"), EventType.ONE_TIME_INCOME, "one_time_incomes"
        )
        events += _legacy_one_time(
            data.get("one_time_expenses"),
            EventType.ONE_TIME_EXPENSE,
            "one_time_expenses",
        )

        horizon = data.get("time_horizon_years", 5)
        if isinstance(horizon, float) and horizon.is_integer():
            horizon = int(horizon)

        extra = {
            str(k): coerce_float(v, f"extra_debt_payments.{k}")
            for k, v in (data.get("extra_debt_payments") or {}).items()
        }

        return cls(
            time_horizon_years=horizon,
            inflation_rate=coerce_float(
                data.get("inflation_rate"), "inflation_rate", 0.0
            ),
            annual_salary=coerce_float(data.get("annual_salary"), "annual_salary", 0.0),
            annual_salary_growth=coerce_float(
                data.get("annual_salary_growth"), "annual_salary_growth", 0.0
            ),
            monthly_expenses=coerce_float(
                data.get("monthly_expenses"), "monthly_expenses", 0.0
            ),
            annual_expense_growth=coerce_float(
                data.get("annual_expense_growth"), "annual_expense_growth", 0.0
            ),
            monthly_savings_rate=coerce_float(
                data.get("monthly_savings_rate"), "monthly_savings_rate", 0.0
            ),
            federal_tax_brackets=_brackets(
                data.get("federal_tax_brackets"), "federal_tax_brackets"
            ),
            regional_tax_brackets=_brackets(
                data.get("regional_tax_brackets"), "regional_tax_brackets"
            ),
            investment_returns=_rate_map(
                data.get("investment_returns"), "investment_returns"
            ),
            asset_appreciation=_rate_map(
                data.get("asset_appreciation"), "asset_appreciation"
            ),
            savings_allocation=_rate_map(
                data.get("savings_allocation"), "savings_allocation"
            ),
            extra_debt_payments=extra,
            events=tuple(events),
            currency=str(data.get("currency") or "CAD").upper(),
            start_date=(
                coerce_date(data["start_date"], "start_date")
                if data.get("start_date")
                else None
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire format accepted by `from_dict`."""
        out: dict[str, Any] = {
            "time_horizon_years": self.time_horizon_years,
            "inflation_rate": self.inflation_rate,
            "annual_salary": self.annual_salary,
            "annual_salary_growth": self.annual_salary_growth,
            "monthly_expenses": self.monthly_expenses,
            "annual_expense_growth": self.annual_expense_growth,
            "monthly_savings_rate": self.monthly_savings_rate,
            "federal_tax_brackets": [b.to_dict() for b in self.federal_tax_brackets],
            "regional_tax_brackets": [b.to_dict() for b in self.regional_tax_brackets],
            "investment_returns": dict(self.investment_returns),
            "asset_appreciation": dict(self.asset_appreciation),
            "savings_allocation": dict(self.savings_allocation),
            "extra_debt_payments": dict(self.extra_debt_payments),
            "events": [e.to_dict() for e in self.events],
            "currency": self.currency,
        }
        if self.start_date is not None:
            out["start_date"] = self.start_date.isoformat()
        return out


def load_mapping(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> dict:
    """
    Read a YAML or JSON mapping from a path (format chosen by suffix).

    Dicts are returned as a shallow copy so callers can pass in-memory data.
    """
    if isinstance(source, dict):
        return dict(source)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    if fmt in {"yaml", "yml", ""}:
        data = yaml.safe_load(text)
    elif fmt == "json":
        data = json.loads(text)
    else:
        raise ConfigError(f"Unsupported file format '{fmt}' for {path}")

    if not isinstance(data, dict):
        raise ConfigError(f"Root of {path} must be a mapping")
    return data


def load_config(source: str | Path | dict[str, Any]) -> Config:
    """Load and validate a Config from a YAML/JSON file or mapping."""
    data = load_mapping(source)
    # accept both a bare config and a {"config": {...}} request envelope
    if isinstance(data.get("config"), dict):
        data = data["config"]
    return Config.from_dict(data)
