"""
Unit tests for chart helpers.
"""

from __future__ import annotations

import importlib.util

import pytest
from finforecast.core.simulator import simulate
from finforecast.sensitivity import run_sensitivity

plotly_available = importlib.util.find_spec("plotly") is not None


def _skip_if_no_plotly():
    return pytest.mark.skipif(
        not plotly_available, reason="Plotly is required for chart tests"
    )


@pytest.fixture
def result(make_config, mortgage_snapshot):
    return simulate(make_config(annual_salary=120000), mortgage_snapshot)


@_skip_if_no_plotly()
def test_net_worth_with_real_series(result):
    from finforecast.charts import net_worth_over_time

    fig, tidy = net_worth_over_time(result, inflation_rate=0.02)
    assert len(fig.data) == 2
    assert {"date", "net_worth", "net_worth_real"} <= set(tidy.columns)
    assert len(tidy) == 13


@_skip_if_no_plotly()
def test_assets_vs_liabilities_traces(result):
    from finforecast.charts import assets_vs_liabilities

    fig, tidy = assets_vs_liabilities(result)
    names = [trace.name for trace in fig.data]
    assert names[-2:] == ["liabilities", "net worth"]
    assert (tidy["liabilities"] > 0).all()


@_skip_if_no_plotly()
def test_debt_payoff_long_format(result):
    from finforecast.charts import debt_payoff

    fig, tidy = debt_payoff(result)
    assert set(tidy["account_id"]) == {"mortgage"}
    assert tidy["balance"].iloc[0] == pytest.approx(400000)
    assert fig.layout.title.text == "Debt Payoff"


@_skip_if_no_plotly()
def test_cashflow_bars(result):
    from finforecast.charts import cashflow_bars

    fig, _ = cashflow_bars(result)
    assert [trace.type for trace in fig.data] == ["bar", "bar", "scatter"]


@_skip_if_no_plotly()
def test_sensitivity_curve_title(make_config, savings_snapshot):
    from finforecast.charts import sensitivity_curve

    df = run_sensitivity(
        make_config(), savings_snapshot, "monthly_savings_rate", [0.1, 0.2, 0.3]
    )
    fig, data = sensitivity_curve(df)
    assert fig.layout.title.text == "Sensitivity: monthly_savings_rate"
    assert data is df


@_skip_if_no_plotly()
def test_save_chart_html(result, tmp_path):
    from finforecast.charts import net_worth_over_time, save_chart

    fig, _ = net_worth_over_time(result)
    path = tmp_path / "nw.html"
    save_chart(fig, str(path))
    assert path.exists()
    with pytest.raises(ValueError):
        save_chart(fig, str(tmp_path / "nw.gif"), format="gif")
