"""Renderer classes for displaying income and savings data.

Each renderer receives the aggregate it displays (IncomeTracker or
SavingsTracker) and prints a fixed-width text report.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from model.IncomeData import HourlyPay, ContractPay
from calc.dates import SUNDAY
from calc.income_tracker import IncomeTracker
from calc.savings_tracker import SavingsTracker
from calc.savings_schedule import estimated_duration_text, is_goal_complete, upcoming_payments


WIDTH = 72


def format_money(value: float) -> str:
    return f"${value:,.2f}"


def format_day(day: date) -> str:
    return day.strftime('%b %d, %Y')


def format_week_range(start: date, end: date) -> str:
    return f"{start.strftime('%b %d').upper()} - {end.strftime('%b %d').upper()}"


def print_banner(title: str) -> None:
    print()
    print("=" * WIDTH)
    print(f"{title:^{WIDTH}}")
    print("=" * WIDTH)


def print_section(title: str) -> None:
    print()
    print("-" * WIDTH)
    print(title)
    print("-" * WIDTH)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data) -> None:
        """Render the data to output."""
        pass


class SummaryRenderer(BaseRenderer):
    """Monthly projection of recurring income plus a list of every source."""

    def __init__(self, use_net: bool = False):
        self.use_net = use_net

    def render(self, data: IncomeTracker) -> None:
        summary = data.summary()
        label = 'NET' if self.use_net else 'GROSS'

        print_banner(f"PROJECTED INCOME THIS MONTH ({label})")
        print()
        print(f"  {'Jobs:':<40} {format_money(summary.jobs_net if self.use_net else summary.jobs_gross):>20}")
        print(f"  {'Passive income:':<40} {format_money(summary.passive_net if self.use_net else summary.passive_gross):>20}")
        print(f"  {'Total:':<40} {format_money(summary.total(self.use_net)):>20}")

        print_section("JOBS")
        if not data.jobs:
            print("  No jobs yet")
        for job in data.jobs:
            per_period = job.projected_net_per_period() if self.use_net else job.projected_gross_per_period()
            per_month = job.projected_net_per_month() if self.use_net else job.projected_gross_per_month()
            print(f"  {job.name:<28} {job.type.value:<9} every {job.interval_days:>3}d "
                  f"{format_money(per_period):>12} {format_money(per_month):>12}/mo")
            if isinstance(job.pay, HourlyPay) and job.pay.uses_overtime:
                print(f"    overtime after {job.pay.overtime_threshold or 0:g}h at x{job.pay.overtime_multiplier or 0:g}")
            elif isinstance(job.pay, ContractPay):
                print(f"    {job.pay.expected_units_per_period or 0:g} units at {format_money(job.pay.rate_per_unit or 0)}")

        print_section("PASSIVE INCOME")
        if not data.passive_incomes:
            print("  No passive income yet")
        for item in data.passive_incomes:
            per_period = item.projected_net_per_period() if self.use_net else item.projected_gross_per_period()
            per_month = item.projected_net_per_month() if self.use_net else item.projected_gross_per_month()
            print(f"  {item.name:<38} every {item.interval_days:>3}d "
                  f"{format_money(per_period):>12} {format_money(per_month):>12}/mo")

        print_section("ONE-TIME INCOME")
        if not data.non_recurring_incomes:
            print("  No one-time income yet")
        for item in data.non_recurring_incomes:
            amount = data.non_recurring_amount(item.id, self.use_net)
            print(f"  {item.name:<38} {format_day(item.date):<14} {format_money(amount):>14}")
        print()


class CalendarRenderer(BaseRenderer):
    """Income events of one month grouped by week."""

    def __init__(self, year: int, month: int, use_net: bool = False, first_weekday: int = SUNDAY):
        self.year = year
        self.month = month
        self.use_net = use_net
        self.first_weekday = first_weekday

    def render(self, data: IncomeTracker) -> None:
        calendar = data.month_calendar(self.year, self.month, self.use_net, self.first_weekday)
        label = 'NET' if self.use_net else 'GROSS'
        print_banner(f"INCOME CALENDAR {calendar.month_start.strftime('%B %Y').upper()} ({label})")

        if not calendar.weeks:
            print()
            print("  No income this month")
            print()
            return

        for week in calendar.weeks:
            print_section(format_week_range(week.span.start, week.span.end))
            for event in week.events:
                kind = event.source.kind.value.replace('_', '-')
                print(f"  {format_day(event.day):<14} {event.name:<30} {kind:<9} {format_money(event.amount):>14}")
            print(f"  {'Week total':<55} {format_money(week.total):>14}")

        print()
        print("=" * WIDTH)
        print(f"  {'Month total':<55} {format_money(calendar.total):>14}")
        print()


class GoalsRenderer(BaseRenderer):
    """Savings goals with progress and their next planned payments."""

    def __init__(self, max_payments: int = 10, today: Optional[date] = None):
        self.max_payments = max_payments
        self.today = today

    def render(self, data: SavingsTracker) -> None:
        print_banner("SAVINGS GOALS")
        if not data.goals:
            print()
            print("  No savings goals yet")
            print()
            return

        for goal in data.goals:
            print_section(goal.name.upper())
            print(f"  {'Saved:':<40} {format_money(goal.current_saved):>14} / {format_money(goal.target_amount)}")
            print(f"  {'Left:':<40} {format_money(goal.remaining):>14}")
            print(f"  {'Progress:':<40} {goal.progress:>14.1%}")
            if is_goal_complete(goal):
                print("  Goal reached!")
                continue
            if not goal.has_active_schedule:
                print("  No payment schedule")
                continue

            print(f"  {'Schedule:':<40} {format_money(goal.schedule_amount):>14} every {goal.interval_days} days")
            print(f"  {estimated_duration_text(goal.remaining, goal.schedule_amount, goal.interval_days)}")
            if not goal.planned_entries:
                print("  (preview, no saved plan)")
            for entry in upcoming_payments(goal, self.max_payments, self.today):
                print(f"    {format_day(entry.date):<14} {format_money(entry.amount):>14}")
        print()


RENDERER_REGISTRY = {
    'Summary': SummaryRenderer,
    'Calendar': CalendarRenderer,
    'Goals': GoalsRenderer,
}
