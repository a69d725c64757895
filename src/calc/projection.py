"""Projection facade and monthly income summary."""

from dataclasses import dataclass
from typing import List, Union

from model.IncomeData import Job, PassiveIncome, NonRecurringIncome


GROSS = 'gross'
NET = 'net'
PER_PERIOD = 'per_period'
PER_MONTH = 'per_month'

MODES = (GROSS, NET)
GRANULARITIES = (PER_PERIOD, PER_MONTH)

IncomeEntity = Union[Job, PassiveIncome, NonRecurringIncome]


def project(entity: IncomeEntity, mode: str = GROSS, granularity: str = PER_PERIOD) -> float:
    """Project an income entity's amount.

    Args:
        entity: A Job, PassiveIncome or NonRecurringIncome
        mode: 'gross' or 'net'
        granularity: 'per_period' or 'per_month' (ignored for one-time income)

    Returns:
        The projected amount

    Raises:
        ValueError: If mode or granularity is not recognized
    """
    if mode not in MODES:
        raise ValueError(f"Unknown projection mode '{mode}', expected one of {MODES}")
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity '{granularity}', expected one of {GRANULARITIES}")

    if isinstance(entity, NonRecurringIncome):
        return entity.projected_net() if mode == NET else entity.projected_gross()

    if granularity == PER_MONTH:
        return entity.projected_net_per_month() if mode == NET else entity.projected_gross_per_month()
    return entity.projected_net_per_period() if mode == NET else entity.projected_gross_per_period()


@dataclass
class MonthlySummary:
    """Approximate monthly income from recurring sources.

    One-time income is not part of the monthly summary.
    """
    jobs_gross: float = 0.0
    jobs_net: float = 0.0
    passive_gross: float = 0.0
    passive_net: float = 0.0

    @property
    def total_gross(self) -> float:
        return self.jobs_gross + self.passive_gross

    @property
    def total_net(self) -> float:
        return self.jobs_net + self.passive_net

    def total(self, use_net: bool) -> float:
        return self.total_net if use_net else self.total_gross


def monthly_summary(jobs: List[Job], passive_incomes: List[PassiveIncome]) -> MonthlySummary:
    summary = MonthlySummary()
    for job in jobs:
        summary.jobs_gross += job.projected_gross_per_month()
        summary.jobs_net += job.projected_net_per_month()
    for item in passive_incomes:
        summary.passive_gross += item.projected_gross_per_month()
        summary.passive_net += item.projected_net_per_month()
    return summary
