"""
Core module for FinForecast.

This module contains the data model and the projection engine: configuration,
snapshots, events, tax and frequency helpers, the simulator and the service
boundary around it.
"""

from .accounts import AccountSnapshot, DebtTerms, FinancialSnapshot, RecurringExpense
from .config import MAX_HORIZON_YEARS, Config, load_config, load_mapping
from .context import RequestContext
from .errors import (
    AuthenticationError,
    ConfigError,
    ConfigWarning,
    DataLoadError,
    DebtScheduleError,
    EventTargetError,
    FinForecastError,
    RequestCancelledError,
    SoftError,
    UnsupportedFrequencyError,
)
from .events import (
    Event,
    EventParameters,
    Recurrence,
    expand_event,
    expand_recurring_events,
    find_events_for_month,
    sort_events,
)
from .frequency import convert_to_monthly_payment, normalize_frequency
from .interfaces import (
    IAccountProvider,
    IEventStrategy,
    IRecurringExpenseProvider,
    IScheduleStrategy,
    IValuationStrategy,
)
from .kinds import DebtKind, EventType, ExpenseChangeType, ValuationKind
from .registry import EventRegistry, ScheduleRegistry, ValuationRegistry
from .results import (
    AssetBreakdownPoint,
    CashFlowPoint,
    DataPoint,
    DebtPayoffPoint,
    ProjectionResult,
    SimulationWarning,
)
from .service import ProjectionRequest, ProjectionService
from .simulator import NetWorthSimulator, simulate
from .state import EventContext, EventOutcome, ProjectionState
from .tax import TaxBracket, calculate_tax, combined_tax
from .utils import month_range
