#!/usr/bin/env python3
"""
Unit tests for the availability calculator.
"""

import unittest
from datetime import date, datetime, timezone
from types import SimpleNamespace

from core.availability import (
    ScheduleSource, TimeBlock, TravelConflict, compute_availability, bucket_for_hours,
    count_travel_conflict_days, is_month_in_range, parse_time_to_hours, iter_weeks,
    average_available_hours, TRAVEL_PREFIX
)

# 2026-03-02 is a Monday
MONDAY = date(2026, 3, 2)
SUNDAY = date(2026, 3, 8)


def sport(start_month=2, end_month=5, practice=10.0, competition=5.0, season_type='in_season', **kw):
    return ScheduleSource(
        schedule_type='sport',
        sport_name=kw.pop('sport_name', 'Basketball'),
        season_type=season_type,
        start_month=start_month,
        end_month=end_month,
        practice_hours_per_week=practice,
        competition_hours_per_week=competition,
        intensity_level=kw.pop('intensity_level', 4),
        **kw
    )


class TestWeekWindows(unittest.TestCase):

    def test_no_entries_gives_baseline_every_week(self):
        windows = compute_availability([], MONDAY, date(2026, 3, 29))

        self.assertEqual(len(windows), 4)
        for window in windows:
            self.assertEqual(window.available_hours, 40.0)
            self.assertEqual(window.bucket, 'high')
            self.assertEqual(window.constraints, [])

    def test_windows_are_monday_aligned_and_cover_partial_weeks(self):
        windows = compute_availability([], date(2026, 3, 4), date(2026, 3, 10))

        self.assertEqual([w.week_start for w in windows], [date(2026, 3, 2), date(2026, 3, 9)])
        self.assertEqual(windows[0].week_end, date(2026, 3, 8))

    def test_start_after_end_returns_empty(self):
        self.assertEqual(compute_availability([], date(2026, 4, 1), date(2026, 3, 1)), [])

    def test_accepts_iso_strings(self):
        windows = compute_availability([], "2026-03-02", "2026-03-08")
        self.assertEqual(len(windows), 1)

    def test_custom_baseline(self):
        windows = compute_availability([], MONDAY, SUNDAY, baseline_hours=25)
        self.assertEqual(windows[0].available_hours, 25.0)
        self.assertEqual(windows[0].bucket, 'medium')

    def test_iter_weeks_count(self):
        weeks = list(iter_weeks(date(2026, 3, 1), date(2026, 3, 2)))
        # Sunday belongs to the previous Monday-aligned week
        self.assertEqual(weeks[0][0], date(2026, 2, 23))
        self.assertEqual(len(weeks), 2)


class TestSportSeasons(unittest.TestCase):

    def test_in_season_subtracts_sport_hours(self):
        windows = compute_availability([sport()], MONDAY, SUNDAY)

        window = windows[0]
        self.assertEqual(window.available_hours, 25.0)
        self.assertEqual(window.bucket, 'medium')
        self.assertEqual(window.sport_conflicts, 1)
        self.assertIn("Basketball in-season (intensity 4)", window.constraints)
        self.assertEqual(window.committed_hours, 15.0)

    def test_off_season_is_noted_but_free(self):
        windows = compute_availability([sport(season_type='off_season')], MONDAY, SUNDAY)

        self.assertEqual(windows[0].available_hours, 40.0)
        self.assertIn("Basketball off-season", windows[0].constraints)
        self.assertEqual(windows[0].sport_conflicts, 0)

    def test_season_outside_week_months_has_no_effect(self):
        windows = compute_availability([sport(start_month=9, end_month=11)], MONDAY, SUNDAY)
        self.assertEqual(windows[0].available_hours, 40.0)

    def test_wrapping_season_applies_in_january(self):
        windows = compute_availability(
            [sport(start_month=10, end_month=2)], date(2026, 1, 12), date(2026, 1, 18)
        )
        self.assertEqual(windows[0].available_hours, 25.0)

    def test_available_hours_clamped_at_zero(self):
        windows = compute_availability([sport(practice=40, competition=10)], MONDAY, SUNDAY)

        self.assertEqual(windows[0].available_hours, 0.0)
        self.assertEqual(windows[0].bucket, 'none')


class TestTimeBlocks(unittest.TestCase):

    def test_recurring_block_subtracts_every_week(self):
        source = ScheduleSource(
            schedule_type='work',
            custom_blocks=[TimeBlock(day='monday', start_time='09:00', end_time='12:00', label='Lab')]
        )
        windows = compute_availability([source], MONDAY, date(2026, 3, 15))

        self.assertEqual([w.available_hours for w in windows], [37.0, 37.0])
        self.assertEqual(windows[0].constraints, ["Lab: 3h"])

    def test_dated_block_only_in_its_week(self):
        source = ScheduleSource(
            schedule_type='custom',
            custom_blocks=[TimeBlock(day='2026-03-11', start_time='13:00', end_time='17:30')]
        )
        windows = compute_availability([source], MONDAY, date(2026, 3, 15))

        self.assertEqual(windows[0].available_hours, 40.0)
        self.assertEqual(windows[1].available_hours, 35.5)
        self.assertEqual(windows[1].constraints, ["custom: 4.5h"])

    def test_malformed_block_is_ignored(self):
        source = ScheduleSource(custom_blocks=[TimeBlock(day='monday', start_time='late', end_time='12:00')])
        windows = compute_availability([source], MONDAY, SUNDAY)
        self.assertEqual(windows[0].available_hours, 40.0)

    def test_time_block_from_camel_case(self):
        block = TimeBlock.from_dict({'day': 'tue', 'startTime': '08:15', 'endTime': '10:45'})
        self.assertEqual(block.duration_hours, 2.5)


class TestTravelConflicts(unittest.TestCase):

    def test_travel_week_forces_zero(self):
        source = ScheduleSource(
            schedule_type='sport',
            travel_conflicts=[TravelConflict(date(2026, 3, 2), date(2026, 3, 8), 'Tournament')]
        )
        windows = compute_availability([source], MONDAY, SUNDAY)

        window = windows[0]
        self.assertEqual(window.available_hours, 0.0)
        self.assertEqual(window.bucket, 'none')
        self.assertEqual(window.travel_constraints, [f"{TRAVEL_PREFIX} Tournament"])
        self.assertEqual(window.scheduling_constraints, [])
        self.assertTrue(window.has_travel)

    def test_single_travel_day_blocks_the_week(self):
        source = ScheduleSource(travel_conflicts=[TravelConflict(date(2026, 3, 12), date(2026, 3, 12))])
        windows = compute_availability([source], MONDAY, date(2026, 3, 15))

        self.assertEqual(windows[0].available_hours, 40.0)
        self.assertEqual(windows[1].available_hours, 0.0)
        self.assertEqual(windows[1].travel_constraints, ["Travel: Away"])

    def test_travel_from_dict_reorders_dates(self):
        conflict = TravelConflict.from_dict({'startDate': '2026-03-10', 'endDate': '2026-03-08'})
        self.assertEqual(conflict.start_date, date(2026, 3, 8))
        self.assertIsNone(TravelConflict.from_dict({'start_date': 'soon'}))

    def test_count_travel_days_is_inclusive(self):
        source = ScheduleSource(travel_conflicts=[
            TravelConflict(date(2026, 3, 10), date(2026, 3, 12)),
            TravelConflict(date(2026, 2, 27), date(2026, 3, 3)),
        ])
        self.assertEqual(count_travel_conflict_days([source], MONDAY, date(2026, 3, 31)), 5)

    def test_inactive_travel_is_not_counted(self):
        source = ScheduleSource(
            is_active=False,
            travel_conflicts=[TravelConflict(date(2026, 3, 10), date(2026, 3, 12))]
        )
        self.assertEqual(count_travel_conflict_days([source], MONDAY, date(2026, 3, 31)), 0)


class TestBaselineAndApplicability(unittest.TestCase):

    def test_override_replaces_baseline(self):
        windows = compute_availability(
            [ScheduleSource(available_hours_per_week=20)], MONDAY, SUNDAY
        )
        self.assertEqual(windows[0].available_hours, 20.0)
        self.assertEqual(windows[0].baseline_hours, 20.0)

    def test_latest_effective_override_wins(self):
        older = ScheduleSource(available_hours_per_week=10, effective_start=date(2026, 1, 1))
        newer = ScheduleSource(available_hours_per_week=30, effective_start=date(2026, 2, 1))
        windows = compute_availability([newer, older], MONDAY, SUNDAY)
        self.assertEqual(windows[0].available_hours, 30.0)

    def test_created_at_breaks_override_ties(self):
        first = ScheduleSource(available_hours_per_week=10, created_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
        second = ScheduleSource(available_hours_per_week=12, created_at=datetime(2026, 1, 2, tzinfo=timezone.utc))
        windows = compute_availability([second, first], MONDAY, SUNDAY)
        self.assertEqual(windows[0].available_hours, 12.0)

    def test_inactive_entries_are_ignored(self):
        windows = compute_availability([sport(is_active=False)], MONDAY, SUNDAY)
        self.assertEqual(windows[0].available_hours, 40.0)

    def test_effective_range_limits_entry(self):
        source = sport(effective_start=date(2026, 3, 9), effective_end=date(2026, 3, 31))
        windows = compute_availability([source], MONDAY, date(2026, 3, 15))
        self.assertEqual([w.available_hours for w in windows], [40.0, 25.0])

    def test_from_entry_joins_season_and_calendar(self):
        season = SimpleNamespace(
            sport_name='Soccer', season_type='in_season', start_month=8, end_month=11,
            practice_hours_per_week=18, competition_hours_per_week=4,
            travel_days_per_month=3, intensity_level=5
        )
        calendar = SimpleNamespace(priority_level=5, start_date=date(2026, 8, 20), end_date=date(2026, 12, 15))
        entry = SimpleNamespace(
            id='s1', schedule_type='sport', is_active=True,
            custom_blocks=[{'day': 'friday', 'start_time': '14:00', 'end_time': '16:00'}],
            travel_conflicts=[{'start_date': '2026-09-01', 'end_date': '2026-09-02'}, {'bad': True}],
            available_hours_per_week=None, effective_start=None, effective_end=None,
            created_at=None, sport_season=season, academic_calendar=calendar
        )

        source = ScheduleSource.from_entry(entry)

        self.assertEqual(source.sport_hours_per_week, 22.0)
        self.assertEqual(source.priority_level, 5)
        self.assertEqual(source.effective_start, date(2026, 8, 20))
        self.assertEqual(len(source.travel_conflicts), 1)
        self.assertEqual(source.custom_blocks[0].duration_hours, 2.0)


class TestHelpers(unittest.TestCase):

    def test_bucket_thresholds(self):
        self.assertEqual(bucket_for_hours(30), 'high')
        self.assertEqual(bucket_for_hours(29.9), 'medium')
        self.assertEqual(bucket_for_hours(15), 'medium')
        self.assertEqual(bucket_for_hours(14.9), 'low')
        self.assertEqual(bucket_for_hours(0.1), 'low')
        self.assertEqual(bucket_for_hours(0), 'none')

    def test_month_range_wraps(self):
        self.assertTrue(is_month_in_range(1, 10, 2))
        self.assertTrue(is_month_in_range(10, 10, 2))
        self.assertFalse(is_month_in_range(5, 10, 2))
        self.assertTrue(is_month_in_range(3, 2, 5))

    def test_parse_time(self):
        self.assertEqual(parse_time_to_hours("09:30"), 9.5)
        self.assertEqual(parse_time_to_hours("17"), 17.0)
        self.assertIsNone(parse_time_to_hours("noon"))
        self.assertIsNone(parse_time_to_hours("25:00"))
        self.assertIsNone(parse_time_to_hours(""))

    def test_average_available_hours(self):
        windows = compute_availability([sport()], date(2026, 1, 26), date(2026, 2, 8))
        # The Jan 26 week reaches Feb 1, so the season applies to both weeks
        self.assertEqual(average_available_hours(windows), 25.0)
        self.assertIsNone(average_available_hours([]))


if __name__ == '__main__':
    unittest.main()
