"""Savings goal installment planning.

A goal with an active schedule pays `schedule_amount` every `interval_days`
from `start_date` until the remaining balance is covered. The persisted plan
(`SavingsGoal.planned_entries`) is built once with build_full_plan and then
adjusted incrementally with apply_delta whenever money is added or removed,
so entries edited earlier are preserved.
"""

import math
from datetime import date
from typing import List, Optional

from model.SavingsData import SavingsGoal, SavingsPlannedEntry
from calc.dates import DayLike, add_days, to_day


# Tolerance used when deciding whether a goal has been reached
COMPLETION_EPSILON = 0.005

# Number of entries shown for a goal without a saved plan
PREVIEW_MAX_COUNT = 30

ADD = 'add'
REMOVE = 'remove'


def build_full_plan(goal: SavingsGoal, today: Optional[DayLike] = None) -> List[SavingsPlannedEntry]:
    """Build the complete installment plan for a goal.

    Args:
        goal: The goal to plan for
        today: Start day used when the goal has no start_date (defaults to today)

    Returns:
        Entries earliest first whose amounts sum to the remaining balance, or
        an empty list if the schedule is disabled or invalid
    """
    if not goal.has_active_schedule:
        return []

    per = goal.schedule_amount
    start = to_day(goal.start_date or today or date.today())
    remaining = goal.remaining

    entries: List[SavingsPlannedEntry] = []
    cursor = start
    while remaining > 0:
        allocation = min(per, remaining)
        entries.append(SavingsPlannedEntry(date=cursor, amount=allocation))
        remaining -= allocation
        cursor = add_days(cursor, goal.interval_days)
    return entries


def apply_delta(delta: float,
                entries: List[SavingsPlannedEntry],
                interval_days: int,
                per: float,
                start_date: DayLike) -> None:
    """Adjust a persisted plan in place after money is added or removed.

    A positive delta (money added) consumes entries from the front: whole
    entries are removed while the delta covers them, then the next entry is
    reduced. Paying more than the plan holds simply empties it.

    A negative delta (money removed) appends entries of at most `per` after
    the last entry, spaced `interval_days` apart, or starting at
    `start_date` when the plan is empty.

    Nothing happens unless interval_days and per are both positive.
    """
    if interval_days <= 0 or per <= 0:
        return

    if delta > 0:
        remaining = delta
        i = 0
        while remaining > 0 and i < len(entries):
            amount = entries[i].amount
            if remaining >= amount:
                remaining -= amount
                # the next entry shifts into position i
                del entries[i]
            else:
                entries[i].amount = amount - remaining
                remaining = 0

    elif delta < 0:
        need = -delta
        if entries:
            cursor = add_days(entries[-1].date, interval_days)
        else:
            cursor = to_day(start_date)

        while need > 0:
            allocation = min(per, need)
            entries.append(SavingsPlannedEntry(date=cursor, amount=allocation))
            need -= allocation
            cursor = add_days(cursor, interval_days)


def preview_payments(goal: SavingsGoal,
                     max_count: int = PREVIEW_MAX_COUNT,
                     today: Optional[DayLike] = None) -> List[SavingsPlannedEntry]:
    """Regenerate up to max_count upcoming payments for display only.

    Used for goals saved before plans were persisted. The result must never
    replace `planned_entries`.
    """
    if not goal.has_active_schedule or max_count <= 0:
        return []

    per = goal.schedule_amount
    cursor = to_day(goal.start_date or today or date.today())
    remaining = goal.remaining

    entries: List[SavingsPlannedEntry] = []
    while remaining > 0 and len(entries) < max_count:
        allocation = min(per, remaining)
        entries.append(SavingsPlannedEntry(date=cursor, amount=allocation))
        remaining -= allocation
        cursor = add_days(cursor, goal.interval_days)
    return entries


def upcoming_payments(goal: SavingsGoal,
                      max_count: int = PREVIEW_MAX_COUNT,
                      today: Optional[DayLike] = None) -> List[SavingsPlannedEntry]:
    """Entries to show for a goal: the persisted plan, or the preview if there is none."""
    if goal.planned_entries:
        return list(goal.planned_entries[:max_count])
    return preview_payments(goal, max_count, today)


def is_goal_complete(goal: SavingsGoal) -> bool:
    return goal.current_saved >= goal.target_amount - COMPLETION_EPSILON


def payments_needed(amount_left: float, per: float) -> int:
    if amount_left <= 0 or per <= 0:
        return 0
    return math.ceil(amount_left / per)


def estimated_duration_text(amount_left: float, per: float, interval_days: int) -> str:
    """Describe how long a schedule needs to cover amount_left."""
    if amount_left <= 0 or per <= 0:
        return "You've already reached this goal."

    total_days = payments_needed(amount_left, per) * max(interval_days, 1)
    if total_days < 14:
        return f"You'll reach your goal in {total_days} days."
    if total_days < 60:
        return f"You'll reach your goal in about {_round_half_up(total_days / 7)} weeks."
    return f"You'll reach your goal in about {_round_half_up(total_days / 30)} months."


def validate_money_edit(goal: SavingsGoal, mode: str, amount: Optional[float]) -> Optional[str]:
    """Check an add/remove request against the goal.

    Returns:
        None if the edit is allowed, otherwise a message for the user
    """
    current = max(0.0, goal.current_saved)
    target = max(0.0, goal.target_amount)
    remaining = max(0.0, target - current)

    if amount is None:
        return "Enter an amount"
    if amount <= 0:
        return "Amount must be greater than 0"

    if mode == ADD:
        if remaining <= 0:
            return "Goal already reached"
        if amount > remaining:
            return f"Cannot add more than remaining (${remaining:,.2f})"
    elif mode == REMOVE:
        if current <= 0:
            return "Nothing to remove"
        if amount > current:
            return f"Cannot remove more than current (${current:,.2f})"
    else:
        raise ValueError(f"Unknown money edit mode '{mode}', expected '{ADD}' or '{REMOVE}'")
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
