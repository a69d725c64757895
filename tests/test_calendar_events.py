"""Tests for month event assembly and week bucketing."""

import os
import sys
import pytest
from datetime import date

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from model.IncomeData import Job, PassiveIncome, NonRecurringIncome, HourlyPay, SalaryPay
from model.OverrideData import JobPayPeriodOverride, NonRecurringIncomeOverride
from model.CalendarData import EventKind, WeekSpan
from calc.calendar_events import (
    build_month_calendar,
    generate_events,
    group_by_week,
    month_events,
    week_spans,
)
from calc.dates import MONDAY, SUNDAY


JAN_START = date(2025, 1, 1)
JAN_END = date(2025, 1, 31)


@pytest.fixture
def cafe():
    return Job(
        id='job-cafe',
        name='Cafe',
        pay=HourlyPay(hourly_rate=20.0, planned_hours_per_period=40.0),
        interval_days=14,
        start_date=date(2025, 1, 3),
        applies_tax=True,
        tax_rate=0.1,
    )


@pytest.fixture
def rent():
    return PassiveIncome(id='passive-rent', name='Rent', amount_per_period=300.0,
                         interval_days=7, start_date=date(2025, 1, 1))


@pytest.fixture
def refund():
    return NonRecurringIncome(id='one-refund', name='Refund', amount=450.0, date=date(2025, 1, 8))


class TestGenerateEvents:

    def test_all_sources_sorted_by_day(self, cafe, rent, refund):
        events = generate_events([cafe], [rent], [refund], [], [], [], JAN_START, JAN_END, False)
        assert [e.day.day for e in events] == [1, 3, 8, 8, 15, 17, 22, 29, 31]
        assert [e.source.kind for e in events[2:4]] == [EventKind.PASSIVE, EventKind.ONE_TIME]

    def test_jobs_before_passive_on_same_day(self, rent):
        weekly = Job(id='job-w', name='Weekly', pay=SalaryPay(100.0), interval_days=7,
                     start_date=date(2025, 1, 1))
        events = generate_events([weekly], [rent], [], [], [], [], JAN_START, JAN_START, False)
        assert [e.source.kind for e in events] == [EventKind.JOB, EventKind.PASSIVE]

    def test_overrides_applied(self, cafe, refund):
        job_overrides = [JobPayPeriodOverride('job-cafe', date(2025, 1, 17), override_hours_worked=10.0)]
        one_time_overrides = [NonRecurringIncomeOverride('one-refund', date(2025, 1, 8), 0.0)]
        events = generate_events([cafe], [], [refund], job_overrides, [], one_time_overrides,
                                 JAN_START, JAN_END, False)
        amounts = {(e.source.entity_id, e.day): e.amount for e in events}
        assert amounts[('job-cafe', date(2025, 1, 3))] == pytest.approx(800.0)
        assert amounts[('job-cafe', date(2025, 1, 17))] == pytest.approx(200.0)
        # zero overrides stay visible
        assert amounts[('one-refund', date(2025, 1, 8))] == 0.0

    def test_net_amounts(self, cafe):
        events = generate_events([cafe], [], [], [], [], [], JAN_START, JAN_END, True)
        assert all(e.amount == pytest.approx(720.0) for e in events)

    def test_one_time_outside_month_skipped(self, refund):
        events = generate_events([], [], [refund], [], [], [], date(2025, 2, 1), date(2025, 2, 28), False)
        assert events == []


class TestWeekBuckets:

    def test_spans_clipped_to_month(self):
        spans = week_spans(date(2025, 2, 1), date(2025, 2, 28), SUNDAY)
        assert spans[0] == WeekSpan(date(2025, 2, 1), date(2025, 2, 1))
        assert spans[-1] == WeekSpan(date(2025, 2, 23), date(2025, 2, 28))
        assert len(spans) == 5

    def test_monday_week_start(self):
        spans = week_spans(JAN_START, JAN_END, MONDAY)
        assert spans[0] == WeekSpan(date(2025, 1, 1), date(2025, 1, 5))
        assert spans[1] == WeekSpan(date(2025, 1, 6), date(2025, 1, 12))

    def test_grouping(self, cafe, rent, refund):
        events = generate_events([cafe], [rent], [refund], [], [], [], JAN_START, JAN_END, False)
        buckets = group_by_week(events, JAN_START, JAN_END)

        assert [b.span for b in buckets] == [
            WeekSpan(date(2025, 1, 1), date(2025, 1, 4)),
            WeekSpan(date(2025, 1, 5), date(2025, 1, 11)),
            WeekSpan(date(2025, 1, 12), date(2025, 1, 18)),
            WeekSpan(date(2025, 1, 19), date(2025, 1, 25)),
            WeekSpan(date(2025, 1, 26), date(2025, 1, 31)),
        ]
        assert buckets[0].total == pytest.approx(300.0 + 800.0)
        for bucket in buckets:
            assert all(bucket.span.start <= e.day <= bucket.span.end for e in bucket.events)

    def test_empty_weeks_dropped(self):
        single = NonRecurringIncome(name='Gift', amount=50.0, date=date(2025, 1, 20))
        buckets = month_events([], [], [single], [], [], [], 2025, 1, False)
        assert len(buckets) == 1
        assert buckets[0].span == WeekSpan(date(2025, 1, 19), date(2025, 1, 25))

    def test_empty_month(self):
        assert month_events([], [], [], [], [], [], 2025, 1, False) == []


class TestMonthCalendar:

    def test_totals(self, cafe, rent, refund):
        calendar = build_month_calendar([cafe], [rent], [refund], [], [], [], 2025, 1, False)
        assert calendar.month_start == JAN_START
        assert calendar.month_end == JAN_END
        assert len(calendar.events) == 9
        assert calendar.total == pytest.approx(3 * 800.0 + 5 * 300.0 + 450.0)
