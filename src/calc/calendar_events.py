"""Assemble the income events of one month and group them by week.

Jobs and passive income are expanded with the recurrence generator over the
month window; one-time incomes are included when their day falls inside it.
Each event's amount is resolved through the matching override table.
"""

from datetime import date
from typing import Dict, List

from model.CalendarData import EventKind, EventSource, IncomeEvent, MonthCalendar, WeekBucket, WeekSpan
from model.IncomeData import Job, PassiveIncome, NonRecurringIncome
from model.OverrideData import OverrideTable
from calc.dates import SUNDAY, add_days, month_bounds, start_of_week
from calc.override_resolver import (
    effective_job_amount,
    effective_passive_amount,
    effective_non_recurring_amount,
)
from calc.recurrence import occurrences_for


def generate_events(jobs: List[Job],
                    passive_incomes: List[PassiveIncome],
                    non_recurring_incomes: List[NonRecurringIncome],
                    job_overrides,
                    passive_overrides,
                    non_recurring_overrides,
                    month_start: date,
                    month_end: date,
                    use_net: bool) -> List[IncomeEvent]:
    """Return every income event in [month_start, month_end] sorted by day.

    Events keep the order jobs, passive, one-time for equal days. Events
    whose amount resolves to zero are kept so zero overrides stay visible.
    """
    job_table = OverrideTable.coerce(job_overrides)
    passive_table = OverrideTable.coerce(passive_overrides)
    one_time_table = OverrideTable.coerce(non_recurring_overrides)

    events: List[IncomeEvent] = []

    for job in jobs:
        for day in occurrences_for(job, month_start, month_end):
            amount = effective_job_amount(job, day, job_table, use_net)
            events.append(IncomeEvent(day, job.name, amount, EventSource(EventKind.JOB, job.id)))

    for item in passive_incomes:
        for day in occurrences_for(item, month_start, month_end):
            amount = effective_passive_amount(item, day, passive_table, use_net)
            events.append(IncomeEvent(day, item.name, amount, EventSource(EventKind.PASSIVE, item.id)))

    for one in non_recurring_incomes:
        if month_start <= one.date <= month_end:
            amount = effective_non_recurring_amount(one, one.date, one_time_table, use_net)
            events.append(IncomeEvent(one.date, one.name, amount, EventSource(EventKind.ONE_TIME, one.id)))

    # sorted() is stable, so insertion order breaks ties
    return sorted(events, key=lambda e: e.day)


def week_spans(month_start: date, month_end: date, first_weekday: int = SUNDAY) -> List[WeekSpan]:
    """All week spans overlapping the month, clipped to the month bounds."""
    spans = []
    cursor = start_of_week(month_start, first_weekday)
    while cursor <= month_end:
        spans.append(_clipped_span(cursor, month_start, month_end))
        cursor = add_days(cursor, 7)
    return spans


def group_by_week(events: List[IncomeEvent],
                  month_start: date,
                  month_end: date,
                  first_weekday: int = SUNDAY) -> List[WeekBucket]:
    """Bucket events into week spans; empty spans are dropped.

    Buckets come back sorted by span start, each holding its events sorted
    by day.
    """
    buckets: Dict[WeekSpan, List[IncomeEvent]] = {
        span: [] for span in week_spans(month_start, month_end, first_weekday)
    }
    for event in events:
        span = _clipped_span(start_of_week(event.day, first_weekday), month_start, month_end)
        buckets.setdefault(span, []).append(event)

    result = []
    for span in sorted(buckets, key=lambda s: s.start):
        if buckets[span]:
            result.append(WeekBucket(span, sorted(buckets[span], key=lambda e: e.day)))
    return result


def month_events(jobs: List[Job],
                 passive_incomes: List[PassiveIncome],
                 non_recurring_incomes: List[NonRecurringIncome],
                 job_overrides,
                 passive_overrides,
                 non_recurring_overrides,
                 year: int,
                 month: int,
                 use_net: bool,
                 first_weekday: int = SUNDAY) -> List[WeekBucket]:
    """Week-bucketed income events for a calendar month."""
    return build_month_calendar(jobs, passive_incomes, non_recurring_incomes,
                                job_overrides, passive_overrides, non_recurring_overrides,
                                year, month, use_net, first_weekday).weeks


def build_month_calendar(jobs: List[Job],
                         passive_incomes: List[PassiveIncome],
                         non_recurring_incomes: List[NonRecurringIncome],
                         job_overrides,
                         passive_overrides,
                         non_recurring_overrides,
                         year: int,
                         month: int,
                         use_net: bool,
                         first_weekday: int = SUNDAY) -> MonthCalendar:
    month_start, month_end = month_bounds(year, month)
    events = generate_events(jobs, passive_incomes, non_recurring_incomes,
                             job_overrides, passive_overrides, non_recurring_overrides,
                             month_start, month_end, use_net)
    return MonthCalendar(
        year=year,
        month=month,
        month_start=month_start,
        month_end=month_end,
        use_net=use_net,
        weeks=group_by_week(events, month_start, month_end, first_weekday),
    )


def _clipped_span(week_start: date, month_start: date, month_end: date) -> WeekSpan:
    week_end = add_days(week_start, 6)
    return WeekSpan(max(week_start, month_start), min(week_end, month_end))
