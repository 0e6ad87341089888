"""Tests for shared page helpers that need no running client."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from scriptflow.pages.components import STATUS_LABELS, format_timestamp
from tests.unit.conftest import T0


class TestFormatTimestamp:
    """Relative then absolute comment timestamps."""

    @pytest.mark.parametrize(
        ("age", "expected"),
        [
            (timedelta(seconds=5), "Just now"),
            (timedelta(minutes=12), "12m ago"),
            (timedelta(hours=3, minutes=59), "3h ago"),
            (timedelta(days=2), "01 Mar 2026, 09:00"),
        ],
    )
    def test_ages(self, age: timedelta, expected: str) -> None:
        assert format_timestamp(T0, now=T0 + age) == expected

    def test_naive_timestamp_treated_as_utc(self) -> None:
        naive = datetime(2026, 3, 1, 9, 0)
        assert format_timestamp(naive, now=T0 + timedelta(minutes=1)) == "1m ago"


class TestStatusLabels:
    def test_every_review_status_has_label(self) -> None:
        from scriptflow.db.models import REVIEW_STATUSES

        assert set(STATUS_LABELS) == set(REVIEW_STATUSES)
