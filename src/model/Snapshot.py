"""Plain-data snapshots of everything that gets persisted for a profile."""

from dataclasses import dataclass, field
from typing import List

from model.IncomeData import Job, PassiveIncome, NonRecurringIncome
from model.OverrideData import JobPayPeriodOverride, PassiveIncomeOverride, NonRecurringIncomeOverride
from model.SavingsData import SavingsGoal


@dataclass
class IncomeSnapshot:
    jobs: List[Job] = field(default_factory=list)
    passive_incomes: List[PassiveIncome] = field(default_factory=list)
    non_recurring_incomes: List[NonRecurringIncome] = field(default_factory=list)
    job_overrides: List[JobPayPeriodOverride] = field(default_factory=list)
    passive_overrides: List[PassiveIncomeOverride] = field(default_factory=list)
    non_recurring_overrides: List[NonRecurringIncomeOverride] = field(default_factory=list)


@dataclass
class SavingsSnapshot:
    goals: List[SavingsGoal] = field(default_factory=list)
