"""
Projection events and recurrence expansion.

Events are either terminal one-time occurrences or recurring templates. Recurring
templates are expanded exactly once, before the simulation starts, into concrete
non-recurring occurrences bounded by the projection horizon.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

import numpy as np

from .errors import ConfigError, UnsupportedFrequencyError
from .kinds import EventType, ExpenseChangeType, F
from .utils import add_months, coerce_date, coerce_float, is_same_month, month_key


@dataclass(frozen=True)
class EventParameters:
    """
    Type-specific payload of an event.

    Only the fields relevant to the event's type are read; the rest keep their
    defaults. Optional growth overrides use ``None`` for "leave unchanged".
    """

    # One-time financial
    amount: float = 0.0
    category: str = ""
    account_id: str = ""
    taxable: bool = True

    # Persistent changes
    new_salary: float = 0.0
    new_salary_growth: float | None = None
    new_expenses: float = 0.0
    expense_change: float = 0.0
    expense_change_type: ExpenseChangeType | None = None
    new_expense_growth: float | None = None
    new_savings_rate: float = 0.0
    reason: str = ""

    @classmethod
    def from_dict(cls, data: dict | None, label: str = "parameters") -> EventParameters:
        data = dict(data or {})
        change_type = data.get("expense_change_type")
        if change_type in (None, ""):
            change_type = None
        else:
            try:
                change_type = ExpenseChangeType(str(change_type).lower())
            except ValueError as exc:
                raise ConfigError(
                    f"{label}.expense_change_type must be one of "
                    f"{[m.value for m in ExpenseChangeType]}, got {change_type!r}"
                ) from exc

        def opt(key: str) -> float | None:
            if data.get(key) is None:
                return None
            return coerce_float(data[key], f"{label}.{key}")

        return cls(
            amount=coerce_float(data.get("amount"), f"{label}.amount", 0.0),
            category=str(data.get("category") or ""),
            account_id=str(data.get("account_id") or ""),
            taxable=bool(data.get("taxable", True)),
            new_salary=coerce_float(data.get("new_salary"), f"{label}.new_salary", 0.0),
            new_salary_growth=opt("new_salary_growth"),
            new_expenses=coerce_float(
                data.get("new_expenses"), f"{label}.new_expenses", 0.0
            ),
            expense_change=coerce_float(
                data.get("expense_change"), f"{label}.expense_change", 0.0
            ),
            expense_change_type=change_type,
            new_expense_growth=opt("new_expense_growth"),
            new_savings_rate=coerce_float(
                data.get("new_savings_rate"), f"{label}.new_savings_rate", 0.0
            ),
            reason=str(data.get("reason") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "amount": self.amount,
            "category": self.category,
            "account_id": self.account_id,
            "taxable": self.taxable,
            "new_salary": self.new_salary,
            "new_expenses": self.new_expenses,
            "expense_change": self.expense_change,
            "new_savings_rate": self.new_savings_rate,
            "reason": self.reason,
        }
        if self.new_salary_growth is not None:
            out["new_salary_growth"] = self.new_salary_growth
        if self.expense_change_type is not None:
            out["expense_change_type"] = self.expense_change_type.value
        if self.new_expense_growth is not None:
            out["new_expense_growth"] = self.new_expense_growth
        return out


@dataclass(frozen=True)
class Recurrence:
    """Recurrence rule of an event template."""

    frequency: str
    end_date: date | None = None  # None = recur until end of projection


@dataclass(frozen=True)
class Event:
    """
    A financial event that occurs during the projection.

    Attributes:
        id: Identifier; expanded occurrences carry ``{id}_occurrence_{n}``
        type: Event kind (closed set, see `EventType`)
        date: Date of the (first) occurrence; matched by calendar month
        description: Human-readable label
        parameters: Type-specific payload
        recurrence: Recurrence rule for templates; None for terminal events
    """

    id: str
    type: EventType
    date: date
    description: str = ""
    parameters: EventParameters = field(default_factory=EventParameters)
    recurrence: Recurrence | None = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @classmethod
    def from_dict(cls, data: dict, label: str = "event") -> Event:
        """
        Build an event from its wire format.

        Accepts both the nested ``recurrence`` mapping and the flat
        ``is_recurring`` / ``recurrence_frequency`` / ``recurrence_end_date`` keys.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"{label} must be a mapping, got {type(data).__name__}")
        raw_type = data.get("type")
        try:
            event_type = EventType(str(raw_type).lower())
        except ValueError as exc:
            raise ConfigError(
                f"{label}.type must be one of {[m.value for m in EventType]}, "
                f"got {raw_type!r}"
            ) from exc
        if data.get("date") is None:
            raise ConfigError(f"{label}.date is required")

        recurrence = None
        nested = data.get("recurrence")
        if isinstance(nested, dict):
            recurrence = _recurrence_from(
                nested.get("frequency"), nested.get("end_date"), label
            )
        elif data.get("is_recurring"):
            recurrence = _recurrence_from(
                data.get("recurrence_frequency"), data.get("recurrence_end_date"), label
            )

        return cls(
            id=str(data.get("id") or f"{event_type.value}_{data['date']}"),
            type=event_type,
            date=coerce_date(data["date"], f"{label}.date"),
            description=str(data.get("description") or ""),
            parameters=EventParameters.from_dict(
                data.get("parameters"), f"{label}.parameters"
            ),
            recurrence=recurrence,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "date": self.date.isoformat(),
            "description": self.description,
            "parameters": self.parameters.to_dict(),
            "is_recurring": self.is_recurring,
        }
        if self.recurrence is not None:
            out["recurrence_frequency"] = self.recurrence.frequency
            if self.recurrence.end_date is not None:
                out["recurrence_end_date"] = self.recurrence.end_date.isoformat()
        return out


def _recurrence_from(frequency, end_date, label: str) -> Recurrence:
    return Recurrence(
        frequency=str(frequency or ""),
        end_date=(
            coerce_date(end_date, f"{label}.recurrence_end_date")
            if end_date is not None
            else None
        ),
    )


def expand_event(
    event: Event, projection_end: date
) -> tuple[list[Event], UnsupportedFrequencyError | None]:
    """
    Expand one event into its concrete occurrences.

    Non-recurring events pass through unchanged. A recurring template emits one
    occurrence per step (monthly / quarterly / annually = 1 / 3 / 12 months),
    starting at the event date, until the date exceeds
    ``min(recurrence.end_date, projection_end)``. Occurrence dates are offsets
    from the template date, so month-end anchors do not drift.

    Returns:
        ``(occurrences, error)``. For an unrecognised frequency the fallback is
        exactly one occurrence (the event is treated as one-time) and ``error``
        describes the problem; otherwise ``error`` is None.
    """
    if not event.is_recurring:
        return [event], None

    end = projection_end
    if event.recurrence.end_date is not None and event.recurrence.end_date < end:
        end = event.recurrence.end_date

    key = (event.recurrence.frequency or "").strip().lower()
    step = F.RECURRENCE_STEPS.get(key)
    error = None
    if step is None:
        error = UnsupportedFrequencyError(
            f"Event '{event.id}': unsupported recurrence frequency "
            f"{event.recurrence.frequency!r}; treated as a single occurrence",
            subject=event.id,
        )

    occurrences: list[Event] = []
    n = 0
    current = event.date
    while current <= end:
        occurrences.append(
            replace(event, id=f"{event.id}_occurrence_{n}", date=current, recurrence=None)
        )
        if step is None:
            break
        n += 1
        current = add_months(event.date, step * n)

    return occurrences, error


def expand_recurring_events(
    events: Iterable[Event],
    projection_end: date,
    on_error: Callable[[UnsupportedFrequencyError], None] | None = None,
) -> list[Event]:
    """
    Expand all recurring templates and return every occurrence sorted by date.

    Args:
        events: Event templates and terminal events
        projection_end: Last date covered by the projection (inclusive)
        on_error: Optional callback receiving soft errors (unsupported frequencies)

    Returns:
        Date-sorted list of non-recurring events (stable for equal dates)
    """
    expanded: list[Event] = []
    for event in events:
        occurrences, error = expand_event(event, projection_end)
        if error is not None and on_error is not None:
            on_error(error)
        expanded.extend(occurrences)
    return sort_events(expanded)


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Sort events by date, earliest first (stable)."""
    return sorted(events, key=lambda e: e.date)


def find_events_for_month(events: Iterable[Event], current: date) -> list[Event]:
    """Events whose date falls in the same calendar month as ``current``."""
    return [e for e in events if is_same_month(e.date, current)]


def group_events_by_month(events: Iterable[Event]) -> dict[np.datetime64, list[Event]]:
    """Index events by calendar month, preserving their order."""
    grouped: dict[np.datetime64, list[Event]] = defaultdict(list)
    for event in events:
        grouped[month_key(event.date)].append(event)
    return dict(grouped)
