"""
Progressive income tax calculation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ConfigError
from .utils import coerce_float


@dataclass(frozen=True)
class TaxBracket:
    """
    One marginal tax bracket.

    Attributes:
        up_to_income: Upper bound of the bracket; 0 means unlimited (top bracket)
        rate: Marginal rate applied to income inside the bracket (0.15 for 15%)
    """

    up_to_income: float
    rate: float

    @classmethod
    def from_dict(cls, data: dict, label: str = "bracket") -> TaxBracket:
        if not isinstance(data, dict):
            raise ConfigError(f"{label} must be a mapping, got {type(data).__name__}")
        up_to = coerce_float(data.get("up_to_income"), f"{label}.up_to_income", 0.0)
        if up_to < 0:
            raise ConfigError(f"{label}.up_to_income must be >= 0")
        return cls(
            up_to_income=up_to,
            rate=coerce_float(data.get("rate"), f"{label}.rate"),
        )

    def to_dict(self) -> dict:
        return {"up_to_income": self.up_to_income, "rate": self.rate}


def _ordered(brackets: Iterable[TaxBracket]) -> list[TaxBracket]:
    # ascending by bound, unlimited (0) bracket last
    return sorted(
        brackets,
        key=lambda b: (b.up_to_income == 0, b.up_to_income),
    )


def calculate_tax(income: float, brackets: Iterable[TaxBracket]) -> float:
    """
    Calculate tax owed on an annual income using progressive brackets.

    Income is taxed slice by slice: the part of income between the previous
    bracket's bound and this bracket's bound is taxed at this bracket's rate,
    and the remainder carries forward. The bracket with ``up_to_income == 0``
    absorbs all remaining income. Income above the highest finite bound with no
    unlimited bracket is untaxed.

    Args:
        income: Annual taxable income
        brackets: Tax brackets (order-insensitive; sorted ascending internally)

    Returns:
        Tax owed; 0 for non-positive income or an empty bracket list

    Example:
        ```python
        brackets = [
            TaxBracket(50_000, 0.15),
            TaxBracket(100_000, 0.20),
            TaxBracket(0, 0.26),
        ]
        calculate_tax(1_000_000, brackets)  # 251500.0
        ```
    """
    if income <= 0:
        return 0.0

    total = 0.0
    remaining = float(income)
    lower = 0.0
    for bracket in _ordered(brackets):
        if bracket.up_to_income == 0:
            slice_income = remaining
        else:
            width = max(bracket.up_to_income - lower, 0.0)
            slice_income = min(remaining, width)
            lower = max(lower, bracket.up_to_income)

        total += slice_income * bracket.rate
        remaining -= slice_income
        if remaining <= 0:
            break

    return total


def combined_tax(
    income: float, *bracket_sets: Iterable[TaxBracket]
) -> float:
    """Sum of `calculate_tax` over several jurisdictions (federal + regional)."""
    return sum(calculate_tax(income, brackets) for brackets in bracket_sets)
