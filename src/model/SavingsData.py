"""Savings goals and their planned installments."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from calc.dates import to_day
from model.IncomeData import new_id


@dataclass
class SavingsPlannedEntry:
    """One remaining installment toward a goal."""
    date: date
    amount: float
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.date = to_day(self.date)


@dataclass
class SavingsGoal:
    """A savings target with an optional contribution schedule.

    planned_entries holds the remaining installments, earliest first. When a
    schedule is enabled and entries exist, their amounts sum to
    target_amount - current_saved. None means no plan was ever persisted.
    """
    name: str
    target_amount: float
    current_saved: float = 0.0
    use_schedule: Optional[bool] = None
    interval_days: Optional[int] = None
    schedule_amount: Optional[float] = None
    start_date: Optional[date] = None
    planned_entries: Optional[List[SavingsPlannedEntry]] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if self.start_date is not None:
            self.start_date = to_day(self.start_date)

    @property
    def remaining(self) -> float:
        return max(self.target_amount - self.current_saved, 0.0)

    @property
    def has_active_schedule(self) -> bool:
        return (bool(self.use_schedule)
                and (self.schedule_amount or 0) > 0
                and (self.interval_days or 0) > 0)

    @property
    def progress(self) -> float:
        """Fraction of the target saved, clamped to [0, 1]."""
        total = max(self.target_amount, 0.01)
        return min(max(self.current_saved / total, 0.0), 1.0)

    @property
    def planned_total(self) -> float:
        return sum(e.amount for e in self.planned_entries or [])
