"""
Strategy registries.

Map every `EventType`, `DebtKind` and `ValuationKind` to the strategy that
handles it. The mappings are filled by `finforecast.strategies.register_defaults()`
and must cover every kind.
"""

from __future__ import annotations

from collections.abc import Mapping

from .errors import ConfigError
from .interfaces import IEventStrategy, IScheduleStrategy, IValuationStrategy
from .kinds import DebtKind, EventType, ValuationKind

# Global registries (kind -> strategy)
EventRegistry: dict[EventType, IEventStrategy] = {}
ScheduleRegistry: dict[DebtKind, IScheduleStrategy] = {}
ValuationRegistry: dict[ValuationKind, IValuationStrategy] = {}


def missing_event_kinds(
    registry: Mapping[EventType, IEventStrategy] | None = None,
) -> list[EventType]:
    """Event kinds without a registered strategy, in declaration order."""
    registry = EventRegistry if registry is None else registry
    return [kind for kind in EventType if kind not in registry]


def ensure_complete(registry: Mapping[EventType, IEventStrategy] | None = None) -> None:
    """
    Check that every event kind has a strategy.

    Raises:
        ConfigError: Naming the unhandled kinds
    """
    registry = EventRegistry if registry is None else registry
    missing = missing_event_kinds(registry)
    if missing:
        raise ConfigError(
            "No event strategy registered for: "
            + ", ".join(kind.value for kind in missing)
        )
    for kind, strategy in registry.items():
        if not isinstance(strategy, IEventStrategy):
            raise ConfigError(
                f"Strategy for {kind.value!r} does not implement IEventStrategy"
            )


def get_strategy(
    kind: EventType, registry: Mapping[EventType, IEventStrategy] | None = None
) -> IEventStrategy:
    registry = EventRegistry if registry is None else registry
    try:
        return registry[kind]
    except KeyError as exc:
        raise ConfigError(f"Unknown event strategy: {kind}") from exc


def ensure_registries_complete() -> None:
    """
    Check all three global registries.

    Raises:
        ConfigError: If any event, debt or valuation kind has no strategy
    """
    ensure_complete(EventRegistry)
    missing = [k.value for k in DebtKind if k not in ScheduleRegistry]
    missing += [k.value for k in ValuationKind if k not in ValuationRegistry]
    if missing:
        raise ConfigError("No strategy registered for: " + ", ".join(missing))
