"""
Single-parameter sensitivity analysis.

Re-runs the projection once per value of one numeric config parameter and
tabulates how the outcome moves.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import fields, replace
from typing import NamedTuple

import pandas as pd

from finforecast.core.accounts import FinancialSnapshot
from finforecast.core.config import Config
from finforecast.core.errors import ConfigError
from finforecast.core.simulator import NetWorthSimulator
from finforecast.kpi import debt_free_month

logger = logging.getLogger(__name__)

_MAP_FIELDS = {
    "investment_returns",
    "asset_appreciation",
    "savings_allocation",
    "extra_debt_payments",
}


class Sweep(NamedTuple):
    """Inclusive sweep range."""

    min: float
    max: float
    step: float

    def values(self) -> list[float]:
        """Values from ``min`` to ``max`` by ``step``; ``max`` is always included."""
        if self.step <= 0 or self.max <= self.min:
            return [self.min] if self.max <= self.min else [self.min, self.max]
        count = int(math.floor((self.max - self.min) / self.step + 1e-9))
        out = [round(self.min + i * self.step, 10) for i in range(count + 1)]
        if out[-1] < self.max - 1e-9:
            out.append(self.max)
        return out


def default_sweep(current_value: float) -> Sweep:
    """
    Default range around ``current_value``.

    Rates in (0, 1] sweep +/-50% clipped to [0, 1] in steps of 10% of the
    value; anything else sweeps +/-50% in rounded steps of at least 1.
    """
    v = float(current_value)
    if 0 < v <= 1:
        return Sweep(max(0.0, v * 0.5), min(1.0, v * 1.5), v * 0.1)
    lo, hi = sorted((v * 0.5, v * 1.5))
    return Sweep(lo, hi, float(max(1, round(abs(v) * 0.1))))


def get_parameter(config: Config, parameter: str) -> float:
    """Read a numeric parameter by name or dotted path (``investment_returns.tfsa``)."""
    head, _, key = parameter.partition(".")
    if key:
        if head not in _MAP_FIELDS:
            raise ConfigError(f"'{head}' is not a rate map parameter")
        return float(getattr(config, head).get(key, 0.0))
    value = getattr(config, parameter, None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{parameter}' is not a numeric config parameter")
    return float(value)


def with_parameter(config: Config, parameter: str, value: float) -> Config:
    """
    Copy of ``config`` with one numeric parameter replaced.

    Raises:
        ConfigError: If the parameter is unknown, not numeric, or the new value
            fails validation
    """
    head, _, key = parameter.partition(".")
    if key:
        if head not in _MAP_FIELDS:
            raise ConfigError(f"'{head}' is not a rate map parameter")
        updated = dict(getattr(config, head))
        updated[key] = float(value)
        return replace(config, **{head: updated})

    names = {f.name for f in fields(config)}
    if parameter not in names:
        raise ConfigError(f"Unknown config parameter '{parameter}'")
    get_parameter(config, parameter)
    if parameter == "time_horizon_years":
        return replace(config, time_horizon_years=int(round(value)))
    return replace(config, **{parameter: float(value)})


def run_sensitivity(
    config: Config,
    snapshot: FinancialSnapshot | None,
    parameter: str,
    values: Iterable[float] | None = None,
) -> pd.DataFrame:
    """
    Sweep one parameter and run a fresh projection per value.

    Args:
        config: Base scenario
        snapshot: Financial snapshot shared (read-only) by all runs
        parameter: Config field name or dotted map path
        values: Values to test; defaults to `default_sweep` of the current value

    Returns:
        DataFrame with columns ``parameter_value``, ``final_net_worth``,
        ``debt_free_month``, ``final_total_debt`` and ``change_vs_current``
        (difference to the run at the current value)

    Example:
        ```python
        df = run_sensitivity(config, snapshot, "investment_returns.tfsa")
        df.plot(x="parameter_value", y="final_net_worth")
        ```
    """
    current = get_parameter(config, parameter)
    if values is None:
        values = default_sweep(current).values()
    values = list(values)

    baseline = NetWorthSimulator(config, snapshot).run()
    baseline_nw = baseline.net_worth[-1].value

    rows = []
    for value in values:
        variant = with_parameter(config, parameter, value)
        result = NetWorthSimulator(variant, snapshot).run()
        final = result.net_worth[-1].value
        rows.append(
            {
                "parameter_value": float(value),
                "final_net_worth": final,
                "debt_free_month": debt_free_month(result),
                "final_total_debt": result.debt_payoff[-1].total_debt,
                "change_vs_current": final - baseline_nw,
            }
        )
    logger.info("Sensitivity on %s: %d runs", parameter, len(rows))

    df = pd.DataFrame(
        rows,
        columns=[
            "parameter_value",
            "final_net_worth",
            "debt_free_month",
            "final_total_debt",
            "change_vs_current",
        ],
    )
    # keep None (never debt-free) instead of NaN
    df["debt_free_month"] = pd.Series(
        [row["debt_free_month"] for row in rows], index=df.index, dtype=object
    )
    df.attrs["parameter"] = parameter
    df.attrs["current_value"] = current
    return df
