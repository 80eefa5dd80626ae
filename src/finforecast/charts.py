"""
Chart functions for visualizing projections.

All chart functions take a `ProjectionResult` (or a sensitivity frame) and
return (figure, tidy_dataframe_used) for consistency.
"""

from __future__ import annotations

import pandas as pd

from finforecast.core.results import ProjectionResult

# Plotly imports with graceful fallback
try:
    import plotly.express as px
    import plotly.graph_objects as go

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False


def _check_plotly() -> None:
    """Check if Plotly is available and raise helpful error if not."""
    if not PLOTLY_AVAILABLE:
        raise ImportError(
            "Plotly is required for chart functions. Install with:\n"
            "pip install plotly\n"
            "or\n"
            "pip install 'finforecast[viz]'"
        )


def _tidy(result: ProjectionResult) -> pd.DataFrame:
    df = result.to_frame()
    df = df.reset_index()
    df["date"] = df["month"].dt.to_timestamp()
    return df


def net_worth_over_time(
    result: ProjectionResult, inflation_rate: float | None = None
) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot net worth over time.

    **Args:**
        result: Projection result
        inflation_rate: When given, also plot net worth in month-0 money

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)

    **Example:**
        ```python
        fig, data = net_worth_over_time(result, inflation_rate=config.inflation_rate)
        fig.show()
        ```
    """
    _check_plotly()
    from finforecast.kpi import inflation_adjusted

    tidy = _tidy(result)
    y = ["net_worth"]
    if inflation_rate is not None:
        tidy["net_worth_real"] = inflation_adjusted(
            tidy["net_worth"], inflation_rate
        ).to_numpy()
        y.append("net_worth_real")

    fig = px.line(
        tidy,
        x="date",
        y=y,
        title="Net Worth Over Time",
        labels={"value": "Amount", "date": "Date", "variable": "Series"},
    )
    fig.update_layout(hovermode="x unified")
    return fig, tidy


def assets_vs_liabilities(result: ProjectionResult) -> tuple[go.Figure, pd.DataFrame]:
    """
    Stacked asset breakdown above zero, liabilities below, net worth as a line.

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    assets = result.breakdown_frame("assets")
    tidy = _tidy(result)
    dates = tidy["date"]

    fig = go.Figure()
    for col in assets.columns:
        fig.add_trace(
            go.Scatter(
                x=dates,
                y=assets[col].to_numpy(),
                name=col,
                stackgroup="assets",
                mode="lines",
            )
        )
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=-tidy["liabilities"],
            name="liabilities",
            fill="tozeroy",
            mode="lines",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=tidy["net_worth"],
            name="net worth",
            mode="lines",
            line={"color": "black", "dash": "dash"},
        )
    )
    fig.update_layout(
        title="Assets and Liabilities", hovermode="x unified", yaxis_title="Amount"
    )
    return fig, tidy


def debt_payoff(result: ProjectionResult) -> tuple[go.Figure, pd.DataFrame]:
    """
    Outstanding balance per debt account over time.

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    debts = result.breakdown_frame("debts").reset_index()
    debts["date"] = debts["month"].dt.to_timestamp()
    tidy = debts.melt(
        id_vars=["month", "date"], var_name="account_id", value_name="balance"
    )

    fig = px.area(
        tidy,
        x="date",
        y="balance",
        color="account_id",
        title="Debt Payoff",
        labels={"balance": "Outstanding Balance", "date": "Date"},
    )
    fig.update_layout(hovermode="x unified", legend_title="Debt")
    return fig, tidy


def cashflow_bars(result: ProjectionResult) -> tuple[go.Figure, pd.DataFrame]:
    """
    Monthly income vs expenses bars with net cash flow line.

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    tidy = _tidy(result)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=tidy["date"], y=tidy["income"], name="income (after tax)"))
    fig.add_trace(go.Bar(x=tidy["date"], y=-tidy["expenses"], name="expenses"))
    fig.add_trace(
        go.Scatter(x=tidy["date"], y=tidy["net_cash_flow"], name="net", mode="lines")
    )
    fig.update_layout(
        title="Monthly Cash Flow",
        barmode="relative",
        hovermode="x unified",
        yaxis_title="Amount",
    )
    return fig, tidy


def sensitivity_curve(df: pd.DataFrame) -> tuple[go.Figure, pd.DataFrame]:
    """
    Final net worth against the swept parameter value.

    **Args:**
        df: Frame returned by `run_sensitivity`

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    parameter = df.attrs.get("parameter", "parameter")
    fig = px.line(
        df,
        x="parameter_value",
        y="final_net_worth",
        markers=True,
        title=f"Sensitivity: {parameter}",
        labels={"parameter_value": parameter, "final_net_worth": "Final Net Worth"},
    )
    current = df.attrs.get("current_value")
    if current is not None:
        fig.add_vline(x=current, line_dash="dot", annotation_text="current")
    return fig, df


def save_chart(fig: go.Figure, filename: str, format: str = "html") -> None:
    """
    Save chart to file.

    Args:
        fig: Plotly figure
        filename: Output filename
        format: Output format ('html', 'png', 'pdf', 'svg')
    """
    _check_plotly()

    if format == "html":
        fig.write_html(filename)
    elif format in {"png", "pdf", "svg"}:
        fig.write_image(filename, format=format)
    else:
        raise ValueError(f"Unsupported format: {format}")
