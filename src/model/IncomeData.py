"""Income entities and their projection formulas.

Three kinds of income are tracked:

- Job: recurring pay whose per-period gross depends on the pay type
  (salary, hourly with optional overtime, or contract units).
- PassiveIncome: a flat recurring amount.
- NonRecurringIncome: a single payment on one day.

Recurring entities project per pay period and approximate a calendar month
as AVG_MONTH_DAYS / interval_days periods. Missing numeric inputs contribute
zero rather than raising.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union

from calc.dates import to_day


AVG_MONTH_DAYS = 30.44

# Multiplier assumed when hours are overridden on an hourly job that never
# recorded one.
DEFAULT_OVERTIME_MULTIPLIER = 1.5


def new_id() -> str:
    return str(uuid.uuid4())


def apply_flat_tax(gross: float, applies_tax: bool, tax_rate: Optional[float]) -> float:
    """Return the net amount after a single flat tax rate.

    Tax only applies when enabled and the rate is positive.
    """
    if not applies_tax or tax_rate is None or tax_rate <= 0:
        return gross
    return gross * (1.0 - tax_rate)


def overtime_gross(rate: float, hours: float, uses_overtime: bool,
                   threshold: float, multiplier: float) -> float:
    """Gross pay for hours worked, with hours above the threshold paid at rate * multiplier."""
    if uses_overtime and hours > threshold:
        base_pay = threshold * rate
        overtime_pay = (hours - threshold) * rate * multiplier
        return base_pay + overtime_pay
    return hours * rate


def occurrences_per_month(interval_days: int) -> float:
    if interval_days <= 0:
        return 0.0
    return AVG_MONTH_DAYS / interval_days


class JobType(Enum):
    SALARY = 'Salary'
    HOURLY = 'Hourly'
    CONTRACT = 'Contract'


@dataclass
class SalaryPay:
    salary_per_period: Optional[float] = None

    def gross_per_period(self) -> float:
        return self.salary_per_period or 0.0


@dataclass
class HourlyPay:
    hourly_rate: Optional[float] = None
    planned_hours_per_period: Optional[float] = None
    uses_overtime: bool = False
    overtime_threshold: Optional[float] = None
    overtime_multiplier: Optional[float] = None

    def gross_per_period(self) -> float:
        if self.hourly_rate is None or self.planned_hours_per_period is None:
            return 0.0
        # Overtime needs both a threshold and a multiplier to take effect
        overtime = (self.uses_overtime
                    and self.overtime_threshold is not None
                    and self.overtime_multiplier is not None)
        return overtime_gross(
            self.hourly_rate,
            self.planned_hours_per_period,
            overtime,
            self.overtime_threshold or 0.0,
            self.overtime_multiplier or 0.0,
        )

    def gross_for_hours(self, hours: float) -> float:
        """Gross for an explicit number of hours (used by hours overrides)."""
        rate = self.hourly_rate or 0.0
        if rate <= 0:
            return 0.0
        threshold = self.overtime_threshold if self.overtime_threshold is not None else 0.0
        multiplier = (self.overtime_multiplier if self.overtime_multiplier is not None
                      else DEFAULT_OVERTIME_MULTIPLIER)
        return overtime_gross(rate, hours, self.uses_overtime, threshold, multiplier)


@dataclass
class ContractPay:
    rate_per_unit: Optional[float] = None
    expected_units_per_period: Optional[float] = None

    def gross_per_period(self) -> float:
        if self.rate_per_unit is None or self.expected_units_per_period is None:
            return 0.0
        return self.rate_per_unit * self.expected_units_per_period


JobPay = Union[SalaryPay, HourlyPay, ContractPay]

PAY_TYPES = {
    SalaryPay: JobType.SALARY,
    HourlyPay: JobType.HOURLY,
    ContractPay: JobType.CONTRACT,
}


@dataclass
class Job:
    """A recurring job paid every `interval_days` starting on `start_date`."""
    name: str
    pay: JobPay
    interval_days: int
    start_date: date
    end_date: Optional[date] = None
    applies_tax: bool = False
    tax_rate: Optional[float] = None  # 0.20 means 20%
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.start_date = to_day(self.start_date)
        if self.end_date is not None:
            self.end_date = to_day(self.end_date)

    @property
    def type(self) -> JobType:
        return PAY_TYPES[type(self.pay)]

    def projected_gross_per_period(self) -> float:
        return self.pay.gross_per_period()

    def projected_net_per_period(self) -> float:
        return apply_flat_tax(self.projected_gross_per_period(), self.applies_tax, self.tax_rate)

    def occurrences_per_month_approx(self) -> float:
        return occurrences_per_month(self.interval_days)

    def projected_gross_per_month(self) -> float:
        return self.projected_gross_per_period() * self.occurrences_per_month_approx()

    def projected_net_per_month(self) -> float:
        return self.projected_net_per_period() * self.occurrences_per_month_approx()


@dataclass
class PassiveIncome:
    """A flat amount received every `interval_days`."""
    name: str
    amount_per_period: float
    interval_days: int
    start_date: date
    end_date: Optional[date] = None
    applies_tax: bool = False
    tax_rate: Optional[float] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.start_date = to_day(self.start_date)
        if self.end_date is not None:
            self.end_date = to_day(self.end_date)

    def projected_gross_per_period(self) -> float:
        return self.amount_per_period

    def projected_net_per_period(self) -> float:
        return apply_flat_tax(self.projected_gross_per_period(), self.applies_tax, self.tax_rate)

    def occurrences_per_month_approx(self) -> float:
        return occurrences_per_month(self.interval_days)

    def projected_gross_per_month(self) -> float:
        return self.projected_gross_per_period() * self.occurrences_per_month_approx()

    def projected_net_per_month(self) -> float:
        return self.projected_net_per_period() * self.occurrences_per_month_approx()


@dataclass
class NonRecurringIncome:
    """A one-time payment received on `date`."""
    name: str
    amount: float
    date: date
    applies_tax: bool = False
    tax_rate: Optional[float] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.date = to_day(self.date)

    def projected_gross(self) -> float:
        return self.amount

    def projected_net(self) -> float:
        return apply_flat_tax(self.projected_gross(), self.applies_tax, self.tax_rate)
