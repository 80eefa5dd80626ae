"""
Payment-frequency normalisation.

Converts any payment cadence to its monthly-equivalent amount. Unknown
frequency strings pass through unchanged (treated as monthly); callers that
want to surface the anomaly use `normalize_frequency` directly and catch
`UnsupportedFrequencyError`.
"""

from __future__ import annotations

from .errors import UnsupportedFrequencyError
from .kinds import F

# Monthly multipliers per recognised frequency
MONTHLY_MULTIPLIERS: dict[str, float] = {
    F.WEEKLY: 52.0 / 12.0,
    F.BI_WEEKLY: 26.0 / 12.0,
    F.SEMI_MONTHLY: 2.0,
    F.MONTHLY: 1.0,
    F.QUARTERLY: 1.0 / 3.0,
    F.ANNUALLY: 1.0 / 12.0,
}

_ALIASES = {
    "biweekly": F.BI_WEEKLY,
    "fortnightly": F.BI_WEEKLY,
    "semimonthly": F.SEMI_MONTHLY,
    "twice-monthly": F.SEMI_MONTHLY,
    "yearly": F.ANNUALLY,
    "annual": F.ANNUALLY,
}


def normalize_frequency(frequency: str | None) -> str:
    """
    Canonicalise a frequency string.

    Matching ignores case and surrounding whitespace, and accepts ``_`` as a
    separator (``BI_WEEKLY`` -> ``bi-weekly``).

    Raises:
        UnsupportedFrequencyError: If the string is not a recognised frequency
    """
    key = (frequency or "").strip().lower().replace("_", "-")
    key = _ALIASES.get(key, key)
    if key not in MONTHLY_MULTIPLIERS:
        raise UnsupportedFrequencyError(
            f"Unsupported payment frequency {frequency!r}; treated as monthly",
            subject=str(frequency),
        )
    return key


def convert_to_monthly_payment(amount: float, frequency: str | None) -> float:
    """
    Convert a payment at any cadence to its monthly equivalent.

    Args:
        amount: Payment amount per period (sign is preserved)
        frequency: One of weekly, bi-weekly, semi-monthly, monthly, quarterly,
            annually (case-insensitive)

    Returns:
        The monthly-equivalent amount. Unknown frequencies pass through as monthly.

    Example:
        ```python
        convert_to_monthly_payment(1200, "quarterly")  # 400.0
        convert_to_monthly_payment(100, "semi-monthly")  # 200.0
        ```
    """
    try:
        key = normalize_frequency(frequency)
    except UnsupportedFrequencyError:
        return float(amount)
    return float(amount) * MONTHLY_MULTIPLIERS[key]
