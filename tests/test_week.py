"""Tests für Wochenarithmetik, Wochen-Beschriftung und Navigation."""

from datetime import date

import pytest

from grid.week_navigator import WeekNavigator
from grid.week_range import (
    WeekRange,
    day_date,
    format_day_date,
    format_week_label,
    parse_week,
    week_end_for,
    week_start_for,
)


# ─── Wochenbeginn ─────────────────────────────────────────────────────────────

class TestWeekStart:
    def test_monday_is_own_week_start(self):
        assert week_start_for(date(2026, 1, 26)) == date(2026, 1, 26)

    def test_midweek_maps_to_monday(self):
        assert week_start_for(date(2026, 1, 28)) == date(2026, 1, 26)

    def test_sunday_belongs_to_previous_monday(self):
        assert week_start_for(date(2026, 2, 1)) == date(2026, 1, 26)

    def test_across_year_boundary(self):
        assert week_start_for(date(2026, 1, 1)) == date(2025, 12, 29)

    def test_week_end_is_six_days_later(self):
        assert week_end_for(date(2026, 1, 26)) == date(2026, 2, 1)

    def test_day_date(self):
        assert day_date(date(2026, 1, 26), 0) == date(2026, 1, 26)
        assert day_date(date(2026, 1, 26), 6) == date(2026, 2, 1)

    def test_parse_week_normalises(self):
        assert parse_week("2026-01-29") == date(2026, 1, 26)

    def test_parse_week_invalid(self):
        with pytest.raises(ValueError):
            parse_week("kein-datum")


# ─── Beschriftung ─────────────────────────────────────────────────────────────

class TestWeekLabel:
    def test_same_month(self):
        assert format_week_label(date(2026, 2, 2)) == "2 – 8 Feb 2026"

    def test_different_months_same_year(self):
        assert format_week_label(date(2026, 1, 30), date(2026, 2, 5)) == \
            "30 Jan – 5 Feb 2026"

    def test_week_ending_in_next_month(self):
        assert format_week_label(date(2026, 1, 26)) == "26 Jan – 1 Feb 2026"

    def test_different_years(self):
        assert format_week_label(date(2025, 12, 29)) == "29 Dec 2025 – 4 Jan 2026"

    def test_day_header_date(self):
        assert format_day_date(date(2026, 1, 26), 1) == "27 Jan"
        assert format_day_date(date(2026, 1, 26), 6) == "1 Feb"


# ─── WeekRange ────────────────────────────────────────────────────────────────

class TestWeekRange:
    def test_rejects_non_monday(self):
        with pytest.raises(ValueError):
            WeekRange(date(2026, 1, 27))

    def test_containing(self):
        week = WeekRange.containing(date(2026, 1, 31))
        assert week.start == date(2026, 1, 26)
        assert week.end == date(2026, 2, 1)

    def test_shifted(self):
        week = WeekRange(date(2026, 1, 5))
        assert week.shifted(-1).start == date(2025, 12, 29)
        assert week.shifted(2).start == date(2026, 1, 19)

    def test_contains_and_current(self):
        week = WeekRange(date(2026, 1, 26))
        assert week.contains(date(2026, 2, 1))
        assert not week.contains(date(2026, 2, 2))
        assert week.is_current(date(2026, 1, 30))
        assert not week.is_current(date(2026, 2, 3))

    def test_str_is_iso(self):
        assert str(WeekRange(date(2026, 1, 26))) == "2026-01-26"


# ─── Navigation ───────────────────────────────────────────────────────────────

class TestWeekNavigator:
    def _nav(self, start=date(2026, 1, 28)):
        changes: list[date] = []
        nav = WeekNavigator(start, on_change=changes.append,
                            today=lambda: date(2026, 2, 10))
        return nav, changes

    def test_initial_week_is_normalised(self):
        nav, changes = self._nav()
        assert nav.week_start == date(2026, 1, 26)
        assert changes == []

    def test_defaults_to_today(self):
        nav = WeekNavigator(today=lambda: date(2026, 2, 10))
        assert nav.week_start == date(2026, 2, 9)
        assert nav.is_current_week

    def test_next_and_previous_round_trip(self):
        nav, changes = self._nav()
        assert nav.next() == date(2026, 2, 2)
        assert nav.previous() == date(2026, 1, 26)
        assert changes == [date(2026, 2, 2), date(2026, 1, 26)]

    def test_label_follows_week(self):
        nav, _ = self._nav()
        nav.next()
        assert nav.label == "2 – 8 Feb 2026"

    def test_previous_across_year(self):
        nav, _ = self._nav(date(2026, 1, 5))
        assert nav.previous() == date(2025, 12, 29)
        assert nav.label == "29 Dec 2025 – 4 Jan 2026"

    def test_current(self):
        nav, changes = self._nav()
        assert not nav.is_current_week
        assert nav.current() == date(2026, 2, 9)
        assert nav.is_current_week
        assert changes == [date(2026, 2, 9)]

    def test_goto(self):
        nav, _ = self._nav()
        assert nav.goto(date(2025, 12, 31)) == date(2025, 12, 29)
