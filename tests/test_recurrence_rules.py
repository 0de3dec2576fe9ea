"""Tests for recurrence rule evaluation."""

from datetime import datetime

from recurring_todo.services.recurrence_rules import occurrences


def _days(instants):
    return [(i.year, i.month, i.day) for i in instants]


class TestDaily:
    def test_every_day_inside_window(self, make_template):
        template = make_template(start_date=datetime(2025, 3, 1, 9, 0))
        result = occurrences(template, datetime(2025, 3, 1), datetime(2025, 3, 5, 23, 59))
        assert _days(result) == [(2025, 3, d) for d in range(1, 6)]

    def test_time_of_day_is_kept(self, make_template):
        template = make_template(start_date=datetime(2025, 3, 1, 9, 30))
        result = occurrences(template, datetime(2025, 3, 1), datetime(2025, 3, 2, 23, 0))
        assert result == [datetime(2025, 3, 1, 9, 30), datetime(2025, 3, 2, 9, 30)]

    def test_interval_aligns_to_start_date(self, make_template):
        template = make_template(start_date=datetime(2025, 1, 1), interval=3)
        result = occurrences(template, datetime(2025, 1, 5), datetime(2025, 1, 15))
        assert _days(result) == [(2025, 1, 7), (2025, 1, 10), (2025, 1, 13)]

    def test_window_bounds_are_inclusive(self, make_template):
        template = make_template(start_date=datetime(2025, 1, 1))
        result = occurrences(template, datetime(2025, 1, 2), datetime(2025, 1, 4))
        assert result == [datetime(2025, 1, 2), datetime(2025, 1, 3), datetime(2025, 1, 4)]

    def test_nothing_before_start_date(self, make_template):
        template = make_template(start_date=datetime(2025, 6, 1))
        assert occurrences(template, datetime(2025, 1, 1), datetime(2025, 5, 31)) == []

    def test_window_clipped_to_start_date(self, make_template):
        template = make_template(start_date=datetime(2025, 6, 1))
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 6, 2))
        assert result == [datetime(2025, 6, 1), datetime(2025, 6, 2)]


class TestWeekly:
    def test_every_other_week_without_weekdays(self, make_template):
        template = make_template(frequency="WEEKLY", interval=2, start_date=datetime(2025, 1, 6))
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 2, 10))
        assert _days(result) == [(2025, 1, 6), (2025, 1, 20), (2025, 2, 3)]

    def test_weekdays_skip_days_before_start_in_first_week(self, make_template):
        # 2025-01-08 is a Wednesday; the Monday of that week is not an occurrence
        template = make_template(
            frequency="WEEKLY", by_week_day=["MO", "WE", "FR"], start_date=datetime(2025, 1, 8)
        )
        result = occurrences(template, datetime(2025, 1, 6), datetime(2025, 1, 19))
        assert _days(result) == [
            (2025, 1, 8),
            (2025, 1, 10),
            (2025, 1, 13),
            (2025, 1, 15),
            (2025, 1, 17),
        ]

    def test_weekdays_with_interval(self, make_template):
        template = make_template(
            frequency="WEEKLY", interval=2, by_week_day=["FR", "MO"], start_date=datetime(2025, 1, 6)
        )
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 2, 2))
        assert _days(result) == [(2025, 1, 6), (2025, 1, 10), (2025, 1, 20), (2025, 1, 24)]

    def test_weekday_count_is_global_to_the_rule(self, make_template):
        template = make_template(
            frequency="WEEKLY",
            by_week_day=["MO", "WE", "FR"],
            start_date=datetime(2025, 1, 8),
            end_type="AFTER_COUNT",
            count=4,
        )
        full = occurrences(template, datetime(2025, 1, 1), datetime(2025, 3, 1))
        assert _days(full) == [(2025, 1, 8), (2025, 1, 10), (2025, 1, 13), (2025, 1, 15)]

        later = occurrences(template, datetime(2025, 1, 14), datetime(2025, 3, 1))
        assert _days(later) == [(2025, 1, 15)]


class TestMonthly:
    def test_day_31_clamps_to_month_end(self, make_template):
        template = make_template(frequency="MONTHLY", start_date=datetime(2025, 1, 31))
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 5, 31))
        assert _days(result) == [
            (2025, 1, 31),
            (2025, 2, 28),
            (2025, 3, 31),
            (2025, 4, 30),
            (2025, 5, 31),
        ]

    def test_by_month_day_before_start_skips_first_month(self, make_template):
        template = make_template(
            frequency="MONTHLY",
            by_month_day=15,
            start_date=datetime(2025, 1, 20),
            end_type="AFTER_COUNT",
            count=2,
        )
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 12, 31))
        assert _days(result) == [(2025, 2, 15), (2025, 3, 15)]

    def test_by_month_day_clamps_in_short_months(self, make_template):
        template = make_template(frequency="MONTHLY", by_month_day=30, start_date=datetime(2025, 1, 1))
        result = occurrences(template, datetime(2025, 2, 1), datetime(2025, 3, 31))
        assert _days(result) == [(2025, 2, 28), (2025, 3, 30)]

    def test_interval_of_three_months(self, make_template):
        template = make_template(frequency="MONTHLY", interval=3, start_date=datetime(2025, 1, 10))
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 12, 31))
        assert _days(result) == [(2025, 1, 10), (2025, 4, 10), (2025, 7, 10), (2025, 10, 10)]

    def test_window_starting_mid_month(self, make_template):
        template = make_template(frequency="MONTHLY", start_date=datetime(2025, 1, 10))
        result = occurrences(template, datetime(2025, 3, 11), datetime(2025, 5, 10))
        assert _days(result) == [(2025, 4, 10), (2025, 5, 10)]


class TestYearly:
    def test_same_month_and_day(self, make_template):
        template = make_template(frequency="YEARLY", start_date=datetime(2025, 7, 4))
        result = occurrences(template, datetime(2025, 1, 1), datetime(2027, 12, 31))
        assert _days(result) == [(2025, 7, 4), (2026, 7, 4), (2027, 7, 4)]

    def test_leap_day_clamps_in_common_years(self, make_template):
        template = make_template(frequency="YEARLY", start_date=datetime(2024, 2, 29))
        result = occurrences(template, datetime(2024, 1, 1), datetime(2028, 3, 1))
        assert _days(result) == [
            (2024, 2, 29),
            (2025, 2, 28),
            (2026, 2, 28),
            (2027, 2, 28),
            (2028, 2, 29),
        ]


class TestTermination:
    def test_on_date_is_inclusive(self, make_template):
        template = make_template(
            start_date=datetime(2025, 1, 1, 9, 0),
            end_type="ON_DATE",
            end_date=datetime(2025, 1, 3, 9, 0),
        )
        result = occurrences(template, datetime(2025, 1, 1), datetime(2025, 1, 31))
        assert _days(result) == [(2025, 1, 1), (2025, 1, 2), (2025, 1, 3)]

    def test_after_count_over_a_huge_window(self, make_template):
        template = make_template(
            start_date=datetime(2025, 3, 1), end_type="AFTER_COUNT", count=3
        )
        result = occurrences(template, datetime(2025, 3, 1), datetime(2025, 12, 31))
        assert result == [datetime(2025, 3, 1), datetime(2025, 3, 2), datetime(2025, 3, 3)]

    def test_after_count_counts_from_start_not_window(self, make_template):
        template = make_template(
            start_date=datetime(2025, 3, 1), end_type="AFTER_COUNT", count=3
        )
        assert occurrences(template, datetime(2025, 3, 3), datetime(2025, 12, 31)) == [
            datetime(2025, 3, 3)
        ]
        assert occurrences(template, datetime(2025, 3, 4), datetime(2025, 12, 31)) == []

    def test_end_date_before_window(self, make_template):
        template = make_template(
            start_date=datetime(2025, 1, 1), end_type="ON_DATE", end_date=datetime(2025, 1, 10)
        )
        assert occurrences(template, datetime(2025, 2, 1), datetime(2025, 2, 28)) == []
