"""Resolve the effective income amount of an entity on a given day.

Resolution order, first match wins:

1. An override with an explicit amount (interpreted as gross).
2. For hourly jobs only, an override with hours worked; gross is recomputed
   from the job's rate and overtime rules.
3. The entity's standard projection.

Net amounts apply the entity's flat tax rate to whichever gross was chosen.
These functions never mutate their inputs.
"""

from typing import Iterable, Union

from model.IncomeData import Job, PassiveIncome, NonRecurringIncome, HourlyPay, apply_flat_tax
from model.OverrideData import (
    JobPayPeriodOverride,
    PassiveIncomeOverride,
    NonRecurringIncomeOverride,
    OverrideTable,
)
from calc.dates import DayLike, to_day


def effective_job_amount(job: Job,
                         day: DayLike,
                         overrides: Union[OverrideTable, Iterable[JobPayPeriodOverride]],
                         use_net: bool) -> float:
    """Return the gross or net pay for a job on one pay date.

    Args:
        job: The job to evaluate
        day: The pay date (any time of day is ignored)
        overrides: Job overrides, either a table or a plain list
        use_net: If True return net, otherwise gross

    Returns:
        The effective amount for that day
    """
    match = OverrideTable.coerce(overrides).get(job.id, to_day(day))
    if match is not None:
        if match.override_amount is not None:
            return _gross_or_net(match.override_amount, job.applies_tax, job.tax_rate, use_net)

        if match.override_hours_worked is not None and isinstance(job.pay, HourlyPay):
            gross = job.pay.gross_for_hours(match.override_hours_worked)
            return _gross_or_net(gross, job.applies_tax, job.tax_rate, use_net)

    return job.projected_net_per_period() if use_net else job.projected_gross_per_period()


def effective_passive_amount(item: PassiveIncome,
                             day: DayLike,
                             overrides: Union[OverrideTable, Iterable[PassiveIncomeOverride]],
                             use_net: bool) -> float:
    """Return the gross or net amount of a passive income on one day."""
    match = OverrideTable.coerce(overrides).get(item.id, to_day(day))
    if match is not None and match.override_amount is not None:
        return _gross_or_net(match.override_amount, item.applies_tax, item.tax_rate, use_net)

    return item.projected_net_per_period() if use_net else item.projected_gross_per_period()


def effective_non_recurring_amount(item: NonRecurringIncome,
                                   day: DayLike,
                                   overrides: Union[OverrideTable, Iterable[NonRecurringIncomeOverride]],
                                   use_net: bool) -> float:
    """Return the gross or net amount of a one-time income on one day."""
    match = OverrideTable.coerce(overrides).get(item.id, to_day(day))
    if match is not None and match.override_amount is not None:
        return _gross_or_net(match.override_amount, item.applies_tax, item.tax_rate, use_net)

    return item.projected_net() if use_net else item.projected_gross()


def _gross_or_net(gross: float, applies_tax: bool, tax_rate, use_net: bool) -> float:
    if use_net:
        return apply_flat_tax(gross, applies_tax, tax_rate)
    return gross
