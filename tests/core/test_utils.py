"""
Tests for month arithmetic helpers.
"""

from datetime import date

import numpy as np
import pytest
from finforecast.core.errors import ConfigError
from finforecast.core.simulator import simulate
from finforecast.core.utils import (
    add_months,
    coerce_date,
    is_same_month,
    month_range,
    months_between,
)


class TestMonthRange:
    """Monthly datetime64 index."""

    def test_consecutive_months(self):
        dates = month_range(date(2026, 11, 15), 4)
        assert dates.dtype == np.dtype("datetime64[M]")
        assert [str(d) for d in dates] == ["2026-11", "2026-12", "2027-01", "2027-02"]

    def test_empty(self):
        assert len(month_range(date(2026, 1, 1), 0)) == 0

    def test_matches_result_index(self, make_config, savings_snapshot):
        result = simulate(make_config(), savings_snapshot)
        assert str(result.t_index[0]) == "2026-01"
        assert str(result.t_index[-1]) == "2027-01"


class TestMonthArithmetic:
    """Calendar month comparisons and offsets."""

    def test_is_same_month(self):
        assert is_same_month(date(2026, 3, 1), date(2026, 3, 31))
        assert not is_same_month(date(2026, 3, 31), date(2026, 4, 1))
        assert not is_same_month(date(2025, 3, 1), date(2026, 3, 1))

    def test_add_months_clamps_to_month_end(self):
        anchor = date(2026, 1, 31)
        assert add_months(anchor, 1) == date(2026, 2, 28)
        assert add_months(anchor, 2) == date(2026, 3, 31)

    def test_months_between(self):
        assert months_between(date(2026, 1, 31), date(2026, 2, 1)) == 1
        assert months_between(date(2027, 1, 1), date(2026, 1, 1)) == -12

    def test_coerce_date_rejects_garbage(self):
        with pytest.raises(ConfigError):
            coerce_date("not a date", "when")
