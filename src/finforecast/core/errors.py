"""
Error classes for FinForecast.

This module defines the exception hierarchy used by the projection engine.
Hard errors (configuration, authentication, data loading, cancellation) are
raised to the caller and abort the request before any result is produced.
Soft errors (unknown event targets, unsupported frequencies) are never raised
out of a simulation: the engine records them as warnings on the result.
"""

from __future__ import annotations


class FinForecastError(Exception):
    """Base class for all FinForecast errors."""


class ConfigError(FinForecastError):
    """
    Configuration error during scenario parsing or validation.

    This exception is raised when a projection config cannot be turned into a
    valid `Config`: missing or non-numeric fields, a time horizon outside the
    supported range, unknown event types or expense change modes.

    **Common Causes:**
    - `time_horizon_years` negative or above the supported maximum
    - Event `type` not in the closed set of event kinds
    - Non-finite rates (NaN / inf) in growth or return maps
    - Tax brackets that are not a list of `{up_to_income, rate}` mappings

    **Example Usage:**
        ```python
        from finforecast.core.config import Config
        from finforecast.core.errors import ConfigError

        try:
            Config.from_dict({"time_horizon_years": -1})
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```
    """


class AuthenticationError(FinForecastError):
    """Raised when the request context does not resolve to a user id."""


class DataLoadError(FinForecastError):
    """
    Raised when the initial account/debt snapshot cannot be loaded.

    The provider's original exception is chained as ``__cause__``.
    """

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"[{source}] {message}")


class RequestCancelledError(FinForecastError):
    """Raised when the request was cancelled or its deadline passed."""


class SoftError(FinForecastError):
    """
    Base class for anomalies that degrade gracefully.

    Soft errors carry a stable ``code`` so that they can be deduplicated and
    reported as `SimulationWarning` entries instead of aborting the run.
    """

    code = "soft_error"

    def __init__(
        self, message: str, subject: str | None = None, code: str | None = None
    ):
        self.subject = subject
        if code is not None:
            self.code = code
        super().__init__(message)


class EventTargetError(SoftError):
    """An extra-debt-payment event references an unknown debt account."""

    code = "event_target_missing"


class UnsupportedFrequencyError(SoftError):
    """A recurrence or payment frequency string is not recognised."""

    code = "unsupported_frequency"


class DebtScheduleError(SoftError):
    """Debt terms needed a fallback (rate in percent, derived payment, ...)."""

    code = "debt_schedule"


class ConfigWarning(UserWarning):
    """Warning for non-fatal configuration issues (alias clashes, legacy keys)."""
