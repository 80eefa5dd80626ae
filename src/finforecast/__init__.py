"""
FinForecast - Personal-finance projection engine

FinForecast projects a household's finances month by month: given the current
accounts and debts and a scenario (salary, expenses, tax brackets, returns,
debt terms and a list of one-time or recurring events), it produces cash flow,
net worth, asset breakdown and debt payoff series over a multi-year horizon.

Key Features:
- **Progressive Tax**: Federal and regional brackets applied slice by slice
- **Amortization**: Mortgages and loans serviced monthly, with extra payments
- **Events**: One-time and recurring events expanded once before the run
- **Strategy Pattern**: Event, debt and asset behaviours wired through registries
- **Consistent Series**: Net worth = assets - liabilities at every month
- **Analysis**: KPIs, single-parameter sensitivity sweeps and Plotly charts

Quick Start:
    ```python
    from finforecast import Config, FinancialSnapshot, simulate

    config = Config.from_dict({
        "time_horizon_years": 1,
        "annual_salary": 75_000,
        "monthly_expenses": 3_000,
        "monthly_savings_rate": 0.2,
        "investment_returns": {"tfsa": 0.07},
        "savings_allocation": {"tfsa": 1.0},
    })
    snapshot = FinancialSnapshot.from_dict({
        "accounts": [{"id": "tfsa", "type": "tfsa", "balance": 25_000}],
    })
    result = simulate(config, snapshot)
    result.to_frame()
    ```
"""

# Version information
__version__ = "0.1.0"
__author__ = "FinForecast Team"
__description__ = "Month-by-month personal-finance projection engine"

# Import core components for easy access
import finforecast.strategies

from .core import (
    AccountSnapshot,
    AuthenticationError,
    Config,
    ConfigError,
    DataLoadError,
    DebtTerms,
    Event,
    EventType,
    FinancialSnapshot,
    NetWorthSimulator,
    ProjectionRequest,
    ProjectionResult,
    ProjectionService,
    RecurringExpense,
    RequestCancelledError,
    RequestContext,
    TaxBracket,
    calculate_tax,
    convert_to_monthly_payment,
    expand_recurring_events,
    load_config,
    simulate,
)

# Import KPI utilities
from .kpi import (
    debt_free_month,
    dsti,
    inflation_adjusted,
    interest_paid_cum,
    max_drawdown,
    savings_rate,
)
from .providers import InMemoryAccountProvider, InMemoryRecurringExpenseProvider
from .sensitivity import default_sweep, run_sensitivity

# Import chart functions (optional - requires plotly)
from .charts import PLOTLY_AVAILABLE as CHARTS_AVAILABLE

__all__ = [
    # Core classes
    "Config",
    "FinancialSnapshot",
    "AccountSnapshot",
    "DebtTerms",
    "RecurringExpense",
    "Event",
    "EventType",
    "TaxBracket",
    "NetWorthSimulator",
    "ProjectionResult",
    "ProjectionRequest",
    "ProjectionService",
    "RequestContext",
    # Errors
    "ConfigError",
    "AuthenticationError",
    "DataLoadError",
    "RequestCancelledError",
    # Functions
    "simulate",
    "load_config",
    "calculate_tax",
    "convert_to_monthly_payment",
    "expand_recurring_events",
    # KPI utilities
    "debt_free_month",
    "dsti",
    "inflation_adjusted",
    "interest_paid_cum",
    "max_drawdown",
    "savings_rate",
    # Analysis
    "run_sensitivity",
    "default_sweep",
    # Providers
    "InMemoryAccountProvider",
    "InMemoryRecurringExpenseProvider",
    "CHARTS_AVAILABLE",
]
