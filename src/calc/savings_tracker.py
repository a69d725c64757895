"""Savings aggregate: the single owner of savings goals and their plans.

Adding or removing money always updates `current_saved` and
`planned_entries` together. The new plan is computed on a copy and both
fields are assigned in one step.
"""

import copy
from datetime import date
from typing import List, Optional

from model.SavingsData import SavingsGoal
from model.Snapshot import SavingsSnapshot
from calc.dates import DayLike, to_day
from calc.savings_schedule import (
    ADD,
    REMOVE,
    apply_delta,
    build_full_plan,
    is_goal_complete,
    upcoming_payments,
)


MAX_GOALS = 3
MAX_TARGET_AMOUNT = 10_000_000.0


class SavingsTracker:
    """Holds a profile's active savings goals."""

    def __init__(self, snapshot: Optional[SavingsSnapshot] = None):
        snapshot = snapshot or SavingsSnapshot()
        self.goals: List[SavingsGoal] = list(snapshot.goals)

    def to_snapshot(self) -> SavingsSnapshot:
        return SavingsSnapshot(goals=list(self.goals))

    def get_goal(self, goal_id: str) -> SavingsGoal:
        for goal in self.goals:
            if goal.id == goal_id:
                return goal
        raise KeyError(f"No savings goal with id '{goal_id}'")

    def create_goal(self,
                    name: str,
                    target_amount: float,
                    current_saved: float = 0.0,
                    use_schedule: bool = False,
                    interval_days: Optional[int] = None,
                    schedule_amount: Optional[float] = None,
                    start_date: Optional[DayLike] = None,
                    today: Optional[DayLike] = None) -> SavingsGoal:
        """Create a goal and, when a schedule is enabled, its full installment plan.

        Raises:
            ValueError: If the goal limit is reached or the amounts are invalid
        """
        if len(self.goals) >= MAX_GOALS:
            raise ValueError(f"You can have at most {MAX_GOALS} savings goals")
        if not 0 < target_amount <= MAX_TARGET_AMOUNT:
            raise ValueError(f"Target amount must be greater than 0 and at most {MAX_TARGET_AMOUNT:,.0f}")
        if not 0 <= current_saved < target_amount:
            raise ValueError("Current savings must be at least 0 and less than the target")

        goal = SavingsGoal(
            name=name.strip() or 'Goal',
            target_amount=target_amount,
            current_saved=current_saved,
            use_schedule=use_schedule,
        )
        if use_schedule:
            goal.interval_days = interval_days
            goal.schedule_amount = max(0.0, schedule_amount or 0.0)
            goal.start_date = to_day(start_date or today or date.today())
            goal.planned_entries = build_full_plan(goal, today)
        self.goals.append(goal)
        return goal

    def set_schedule(self,
                     goal_id: str,
                     use_schedule: bool,
                     interval_days: Optional[int] = None,
                     schedule_amount: Optional[float] = None,
                     start_date: Optional[DayLike] = None,
                     today: Optional[DayLike] = None) -> SavingsGoal:
        """Enable, change or disable a goal's schedule; the plan is rebuilt from scratch."""
        goal = self.get_goal(goal_id)
        if use_schedule:
            goal.use_schedule = True
            goal.interval_days = interval_days
            goal.schedule_amount = max(0.0, schedule_amount or 0.0)
            goal.start_date = to_day(start_date or goal.start_date or today or date.today())
            goal.planned_entries = build_full_plan(goal, today)
        else:
            goal.use_schedule = False
            goal.interval_days = None
            goal.schedule_amount = None
            goal.start_date = None
            goal.planned_entries = None
        return goal

    def add_money(self, goal_id: str, amount: float, today: Optional[DayLike] = None) -> SavingsGoal:
        """Move money into a goal. Amounts above the remaining balance are capped."""
        goal = self.get_goal(goal_id)
        if amount <= 0:
            raise ValueError("Amount must be greater than 0")
        allowed = min(amount, goal.remaining)
        return self._apply(goal, allowed, today)

    def remove_money(self, goal_id: str, amount: float, today: Optional[DayLike] = None) -> SavingsGoal:
        """Take money back out of a goal. Amounts above what is saved are capped."""
        goal = self.get_goal(goal_id)
        if amount <= 0:
            raise ValueError("Amount must be greater than 0")
        allowed = min(amount, max(0.0, goal.current_saved))
        return self._apply(goal, -allowed, today)

    def edit_money(self, goal_id: str, mode: str, amount: float, today: Optional[DayLike] = None) -> SavingsGoal:
        if mode == ADD:
            return self.add_money(goal_id, amount, today)
        if mode == REMOVE:
            return self.remove_money(goal_id, amount, today)
        raise ValueError(f"Unknown money edit mode '{mode}', expected '{ADD}' or '{REMOVE}'")

    def completed_goals(self) -> List[SavingsGoal]:
        return [goal for goal in self.goals if is_goal_complete(goal)]

    def remove_completed_goals(self) -> List[SavingsGoal]:
        """Drop every completed goal from the active set and return them."""
        completed = self.completed_goals()
        self.goals = [goal for goal in self.goals if not is_goal_complete(goal)]
        return completed

    def delete_goal(self, goal_id: str) -> SavingsGoal:
        goal = self.get_goal(goal_id)
        self.goals.remove(goal)
        return goal

    def upcoming_payments(self, goal_id: str, max_count: int = 30, today: Optional[DayLike] = None):
        return upcoming_payments(self.get_goal(goal_id), max_count, today)

    def _apply(self, goal: SavingsGoal, delta: float, today: Optional[DayLike]) -> SavingsGoal:
        new_saved = min(max(goal.current_saved + delta, 0.0), goal.target_amount)

        entries = goal.planned_entries
        if goal.has_active_schedule:
            if entries is None:
                # Goals saved before plans were persisted get their plan materialized first
                entries = build_full_plan(goal, today)
            else:
                entries = copy.deepcopy(entries)
            start = goal.start_date or to_day(today or date.today())
            apply_delta(delta, entries, goal.interval_days, goal.schedule_amount, start)

        goal.current_saved = new_saved
        goal.planned_entries = entries
        return goal