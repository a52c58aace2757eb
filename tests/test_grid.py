"""Tests for the contribution grid layout and intensity levels."""

from datetime import date, timedelta

import pytest

from lift_analytics.core.grid import build_contribution_grid, capped_range, intensity_level, month_labels
from lift_analytics.core.models import DateRange


class TestIntensityLevel:
    @pytest.mark.parametrize(
        "volume, expected",
        [(0.0, 0), (1.0, 1), (299.0, 1), (301.0, 2), (599.0, 2), (601.0, 3), (900.0, 3)],
    )
    def test_thirds_of_max(self, volume, expected):
        assert intensity_level(volume, 900.0) == expected

    def test_no_max(self):
        assert intensity_level(100.0, 0.0) == 0


class TestCappedRange:
    def test_365_days_not_capped(self):
        r = DateRange(date(2023, 1, 1), date(2023, 12, 31))
        assert capped_range(r) == (r, False)

    def test_366_days_capped_to_last_365(self):
        r = DateRange(date(2024, 1, 1), date(2024, 12, 31))
        shown, capped = capped_range(r)
        assert capped
        assert shown == DateRange(date(2025, 1, 1) - timedelta(days=365), date(2024, 12, 31))
        assert shown.days == 365


class TestBuildContributionGrid:
    @pytest.mark.parametrize(
        "start, end",
        [
            (date(2024, 1, 15), date(2024, 1, 15)),
            (date(2024, 1, 9), date(2024, 1, 15)),
            (date(2024, 2, 1), date(2024, 2, 29)),
            (date(2023, 1, 1), date(2023, 12, 31)),
            (date(2020, 3, 4), date(2024, 6, 1)),
        ],
    )
    def test_every_week_has_seven_days(self, start, end):
        r = DateRange(start, end)
        grid = build_contribution_grid({}, r, today=end)
        assert all(len(week) == 7 for week in grid.weeks)
        assert grid.is_capped_to_year == (r.days > 365)

    def test_columns_start_on_monday_and_rows_are_weekdays(self):
        # 2024-01-10 is a Wednesday
        grid = build_contribution_grid({}, DateRange(date(2024, 1, 10), date(2024, 1, 23)), today=date(2024, 1, 23))
        assert grid.weeks[0][0].date == date(2024, 1, 8)
        for week in grid.weeks:
            assert [c.date.weekday() for c in week] == list(range(7))
        assert grid.total_weeks == 3

    def test_padding_outside_period(self):
        grid = build_contribution_grid(
            {"2024-01-08": 500.0, "2024-01-10": 500.0},
            DateRange(date(2024, 1, 10), date(2024, 1, 14)),
            today=date(2024, 1, 14),
        )
        monday = grid.weeks[0][0]
        assert not monday.is_in_period
        assert monday.volume == 0.0
        assert monday.level == 0
        assert grid.weeks[0][2].is_in_period
        assert grid.weeks[0][2].level == 3

    def test_levels_scale_to_in_period_max(self):
        grid = build_contribution_grid(
            {"2024-01-08": 1000.0, "2024-01-09": 200.0, "2024-01-10": 150.0},
            DateRange(date(2024, 1, 8), date(2024, 1, 14)),
            today=date(2024, 1, 14),
        )
        assert [c.level for c in grid.weeks[0][:3]] == [3, 1, 1]

    def test_today_flag(self):
        grid = build_contribution_grid({}, DateRange(date(2024, 1, 8), date(2024, 1, 14)), today=date(2024, 1, 11))
        flagged = [c.date for week in grid.weeks for c in week if c.is_today]
        assert flagged == [date(2024, 1, 11)]

    def test_empty_map_still_complete(self):
        grid = build_contribution_grid({}, DateRange(date(2024, 1, 1), date(2024, 1, 31)), today=date(2024, 1, 31))
        assert grid.is_empty
        assert grid.total_weeks == 5
        assert all(c.level == 0 for week in grid.weeks for c in week)

    def test_capped_grid_covers_last_365_days(self):
        r = DateRange(date(2020, 1, 1), date(2024, 6, 1))
        grid = build_contribution_grid({"2020-06-01": 100.0, "2024-05-31": 100.0}, r, today=date(2024, 6, 1))
        assert grid.is_capped_to_year
        assert grid.range.end == date(2024, 6, 1)
        in_period = [c for week in grid.weeks for c in week if c.is_in_period]
        assert len(in_period) == 365
        assert sum(c.volume for c in in_period) == pytest.approx(100.0)


class TestMonthLabels:
    def test_label_on_week_containing_first(self):
        grid = build_contribution_grid({}, DateRange(date(2024, 1, 22), date(2024, 2, 11)), today=date(2024, 2, 11))
        # 2024-02-01 is a Thursday in the second column
        assert month_labels(grid) == [("Feb", 1)]
