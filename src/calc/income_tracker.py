"""Income aggregate: the single owner of income entities and their overrides.

All mutations of jobs, passive income, one-time income and the three
override tables go through IncomeTracker. Each public method performs one
complete change, so callers never observe a half-applied edit.
"""

from typing import List, Optional

from model.IncomeData import Job, PassiveIncome, NonRecurringIncome
from model.OverrideData import (
    JobPayPeriodOverride,
    PassiveIncomeOverride,
    NonRecurringIncomeOverride,
    OverrideTable,
)
from model.CalendarData import MonthCalendar
from model.Snapshot import IncomeSnapshot
from calc.dates import SUNDAY, DayLike, to_day
from calc.calendar_events import build_month_calendar
from calc.override_resolver import (
    effective_job_amount,
    effective_passive_amount,
    effective_non_recurring_amount,
)
from calc.projection import MonthlySummary, monthly_summary


class IncomeTracker:
    """Holds a profile's income entities and override tables."""

    def __init__(self, snapshot: Optional[IncomeSnapshot] = None):
        snapshot = snapshot or IncomeSnapshot()
        self.jobs: List[Job] = list(snapshot.jobs)
        self.passive_incomes: List[PassiveIncome] = list(snapshot.passive_incomes)
        self.non_recurring_incomes: List[NonRecurringIncome] = list(snapshot.non_recurring_incomes)
        self.job_overrides = OverrideTable(snapshot.job_overrides)
        self.passive_overrides = OverrideTable(snapshot.passive_overrides)
        self.non_recurring_overrides = OverrideTable(snapshot.non_recurring_overrides)

    def to_snapshot(self) -> IncomeSnapshot:
        return IncomeSnapshot(
            jobs=list(self.jobs),
            passive_incomes=list(self.passive_incomes),
            non_recurring_incomes=list(self.non_recurring_incomes),
            job_overrides=self.job_overrides.to_list(),
            passive_overrides=self.passive_overrides.to_list(),
            non_recurring_overrides=self.non_recurring_overrides.to_list(),
        )

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def add_job(self, job: Job) -> Job:
        self._require_interval(job.interval_days)
        self.jobs.append(job)
        return job

    def update_job(self, job: Job) -> Job:
        """Replace the stored job that has the same id (pay type changes replace the payload)."""
        self._require_interval(job.interval_days)
        self.jobs[self._index(self.jobs, job.id, 'job')] = job
        return job

    def delete_job(self, job_id: str) -> Job:
        job = self.jobs.pop(self._index(self.jobs, job_id, 'job'))
        self.job_overrides.remove_entity(job_id)
        return job

    def get_job(self, job_id: str) -> Job:
        return self.jobs[self._index(self.jobs, job_id, 'job')]

    def add_passive_income(self, item: PassiveIncome) -> PassiveIncome:
        self._require_interval(item.interval_days)
        self.passive_incomes.append(item)
        return item

    def update_passive_income(self, item: PassiveIncome) -> PassiveIncome:
        self._require_interval(item.interval_days)
        self.passive_incomes[self._index(self.passive_incomes, item.id, 'passive income')] = item
        return item

    def delete_passive_income(self, item_id: str) -> PassiveIncome:
        item = self.passive_incomes.pop(self._index(self.passive_incomes, item_id, 'passive income'))
        self.passive_overrides.remove_entity(item_id)
        return item

    def get_passive_income(self, item_id: str) -> PassiveIncome:
        return self.passive_incomes[self._index(self.passive_incomes, item_id, 'passive income')]

    def add_non_recurring_income(self, item: NonRecurringIncome) -> NonRecurringIncome:
        self.non_recurring_incomes.append(item)
        return item

    def update_non_recurring_income(self, item: NonRecurringIncome) -> NonRecurringIncome:
        index = self._index(self.non_recurring_incomes, item.id, 'non-recurring income')
        self.non_recurring_incomes[index] = item
        return item

    def delete_non_recurring_income(self, item_id: str) -> NonRecurringIncome:
        index = self._index(self.non_recurring_incomes, item_id, 'non-recurring income')
        item = self.non_recurring_incomes.pop(index)
        self.non_recurring_overrides.remove_entity(item_id)
        return item

    def get_non_recurring_income(self, item_id: str) -> NonRecurringIncome:
        index = self._index(self.non_recurring_incomes, item_id, 'non-recurring income')
        return self.non_recurring_incomes[index]

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def set_job_override(self, job_id: str, day: DayLike,
                         amount: Optional[float] = None,
                         hours: Optional[float] = None) -> Optional[JobPayPeriodOverride]:
        """Upsert the override for one pay date; with neither amount nor hours it is cleared."""
        self.get_job(job_id)
        if amount is None and hours is None:
            self.job_overrides.clear(job_id, day)
            return None
        override = JobPayPeriodOverride(job_id, to_day(day), amount, hours)
        self.job_overrides.upsert(override)
        return override

    def clear_job_override(self, job_id: str, day: DayLike) -> bool:
        return self.job_overrides.clear(job_id, day)

    def set_passive_override(self, item_id: str, day: DayLike,
                             amount: Optional[float]) -> Optional[PassiveIncomeOverride]:
        self.get_passive_income(item_id)
        if amount is None:
            self.passive_overrides.clear(item_id, day)
            return None
        override = PassiveIncomeOverride(item_id, to_day(day), amount)
        self.passive_overrides.upsert(override)
        return override

    def clear_passive_override(self, item_id: str, day: DayLike) -> bool:
        return self.passive_overrides.clear(item_id, day)

    def set_non_recurring_override(self, item_id: str, day: DayLike,
                                   amount: Optional[float]) -> Optional[NonRecurringIncomeOverride]:
        self.get_non_recurring_income(item_id)
        if amount is None:
            self.non_recurring_overrides.clear(item_id, day)
            return None
        override = NonRecurringIncomeOverride(item_id, to_day(day), amount)
        self.non_recurring_overrides.upsert(override)
        return override

    def clear_non_recurring_override(self, item_id: str, day: DayLike) -> bool:
        return self.non_recurring_overrides.clear(item_id, day)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def job_amount(self, job_id: str, day: DayLike, use_net: bool = False) -> float:
        return effective_job_amount(self.get_job(job_id), day, self.job_overrides, use_net)

    def passive_amount(self, item_id: str, day: DayLike, use_net: bool = False) -> float:
        return effective_passive_amount(self.get_passive_income(item_id), day, self.passive_overrides, use_net)

    def non_recurring_amount(self, item_id: str, use_net: bool = False) -> float:
        item = self.get_non_recurring_income(item_id)
        return effective_non_recurring_amount(item, item.date, self.non_recurring_overrides, use_net)

    def summary(self) -> MonthlySummary:
        return monthly_summary(self.jobs, self.passive_incomes)

    def month_calendar(self, year: int, month: int, use_net: bool = False,
                       first_weekday: int = SUNDAY) -> MonthCalendar:
        return build_month_calendar(
            self.jobs, self.passive_incomes, self.non_recurring_incomes,
            self.job_overrides, self.passive_overrides, self.non_recurring_overrides,
            year, month, use_net, first_weekday,
        )

    @staticmethod
    def _index(items, item_id: str, kind: str) -> int:
        for i, item in enumerate(items):
            if item.id == item_id:
                return i
        raise KeyError(f"No {kind} with id '{item_id}'")

    @staticmethod
    def _require_interval(interval_days: int) -> None:
        if interval_days is None or interval_days < 1:
            raise ValueError(f"interval_days must be at least 1, got {interval_days}")
