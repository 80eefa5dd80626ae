"""
KPI calculation utilities for projection analysis.

All functions operate on the DataFrame returned by `ProjectionResult.to_frame()`
(monthly ``PeriodIndex``, one row per month) and return pandas Series or scalars.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from finforecast.core.results import ProjectionResult


def _frame(data: ProjectionResult | pd.DataFrame) -> pd.DataFrame:
    return data.to_frame() if isinstance(data, ProjectionResult) else data


def debt_free_month(
    data: ProjectionResult | pd.DataFrame,
    total_debt_col: str = "total_debt",
    tol: float = 0.005,
) -> int | None:
    """
    First month in which total debt is zero.

    Args:
        data: Projection result or its frame
        total_debt_col: Column name for total debt
        tol: Balances at or below this count as paid off

    Returns:
        Month index (0 = snapshot), or None if debt never reaches zero
    """
    debt = _frame(data)[total_debt_col].to_numpy()
    paid = np.flatnonzero(debt <= tol)
    return int(paid[0]) if len(paid) else None


def max_drawdown(series_or_df: pd.Series | pd.DataFrame) -> float | pd.Series:
    """
    Calculate maximum drawdown from peak.

    Drawdown is relative to the running peak; while the peak is not positive
    (e.g. negative net worth) the drawdown counts as 0.

    Args:
        series_or_df: Series, or DataFrame for a per-column result

    Returns:
        Maximum drawdown (<= 0) as a float for a Series, a Series per column
        for a DataFrame
    """
    if isinstance(series_or_df, pd.DataFrame):
        results = {}
        for col in series_or_df.columns:
            if pd.api.types.is_numeric_dtype(series_or_df[col]):
                results[col] = max_drawdown(series_or_df[col])
            else:
                results[col] = np.nan
        return pd.Series(results, name="max_drawdown")

    values = series_or_df.to_numpy(dtype=float)
    if len(values) == 0:
        return 0.0
    running_max = np.maximum.accumulate(values)
    drawdown = np.where(
        running_max > 0,
        (values - running_max) / np.where(running_max > 0, running_max, 1.0),
        0.0,
    )
    return float(drawdown.min())


def savings_rate(
    df: pd.DataFrame,
    savings_col: str = "savings",
    income_col: str = "income",
) -> pd.Series:
    """
    Calculate savings rate.

    Savings rate = savings / net income (after tax)

    Args:
        df: Projection frame
        savings_col: Column name for amounts moved into savings
        income_col: Column name for net income

    Returns:
        Series with savings rate (NaN where income <= 0)
    """
    income = df[income_col]
    rate = np.where(
        income > 0,
        df[savings_col] / income.where(income > 0, 1.0),
        np.nan,
    )
    return pd.Series(rate, index=df.index, name="savings_rate")


def inflation_adjusted(series: pd.Series, annual_rate: float) -> pd.Series:
    """
    Deflate a monthly series to month-0 money.

    Each row ``m`` is divided by ``(1 + annual_rate) ** (m / 12)``.

    Args:
        series: Monthly series (first row = month 0)
        annual_rate: Annual inflation rate (``Config.inflation_rate``)

    Returns:
        Series in real terms, named ``<name>_real``
    """
    months = np.arange(len(series))
    deflator = (1.0 + annual_rate) ** (months / 12.0)
    name = f"{series.name}_real" if series.name else "real"
    values = series.to_numpy(dtype=float) / deflator
    return pd.Series(values, index=series.index, name=name)


def interest_paid_cum(
    df: pd.DataFrame,
    interest_col: str = "interest",
) -> pd.Series:
    """
    Calculate cumulative interest paid on debts.

    Month 0 is a baseline row, so it is excluded from the sum.

    Args:
        df: Projection frame
        interest_col: Column name for interest (optional field)

    Returns:
        Series with cumulative interest paid
    """
    if interest_col not in df.columns:
        return pd.Series(0.0, index=df.index, name="interest_paid_cum")

    interest = df[interest_col].copy()
    if len(interest):
        interest.iloc[0] = 0.0
    return interest.cumsum().rename("interest_paid_cum")


def dsti(
    df: pd.DataFrame,
    debt_service_col: str = "debt_service",
    income_col: str = "income",
) -> pd.Series:
    """
    Calculate Debt Service to Income ratio.

    DSTI = debt_service / net_income

    Returns:
        Series with DSTI ratio (NaN where income <= 0)
    """
    income = df[income_col]
    ratio = np.where(
        income > 0,
        df[debt_service_col] / income.where(income > 0, 1.0),
        np.nan,
    )
    return pd.Series(ratio, index=df.index, name="dsti")


def summary(result: ProjectionResult, inflation_rate: float = 0.0) -> dict:
    """
    Headline figures of a projection.

    Returns:
        Dict with final/initial net worth, real final net worth, debt-free
        month, max drawdown, total interest and average savings rate
    """
    df = result.to_frame()
    real = inflation_adjusted(df["net_worth"], inflation_rate)
    rates = savings_rate(df.iloc[1:]) if len(df) > 1 else pd.Series(dtype=float)
    return {
        "initial_net_worth": float(df["net_worth"].iloc[0]),
        "final_net_worth": float(df["net_worth"].iloc[-1]),
        "final_net_worth_real": float(real.iloc[-1]),
        "debt_free_month": debt_free_month(df),
        "max_drawdown": max_drawdown(df["net_worth"]),
        "interest_paid": float(interest_paid_cum(df).iloc[-1]),
        "avg_savings_rate": float(rates.mean()) if rates.notna().any() else None,
        "warnings": len(result.warnings),
    }
