"""Tests for override tables and effective amount resolution."""

import os
import sys
import pytest
from datetime import date, datetime

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from model.IncomeData import Job, PassiveIncome, NonRecurringIncome, HourlyPay, SalaryPay
from model.OverrideData import (
    JobPayPeriodOverride,
    PassiveIncomeOverride,
    NonRecurringIncomeOverride,
    OverrideTable,
)
from calc.override_resolver import (
    effective_job_amount,
    effective_passive_amount,
    effective_non_recurring_amount,
)


PAY_DATE = date(2025, 1, 17)


@pytest.fixture
def hourly():
    return Job(
        id='job-1',
        name='Cafe',
        pay=HourlyPay(hourly_rate=20.0, planned_hours_per_period=40.0, uses_overtime=True,
                      overtime_threshold=40.0, overtime_multiplier=1.5),
        interval_days=14,
        start_date=date(2025, 1, 3),
        applies_tax=True,
        tax_rate=0.25,
    )


@pytest.fixture
def salary():
    return Job(id='job-2', name='Office', pay=SalaryPay(2000.0), interval_days=14,
               start_date=date(2025, 1, 3))


class TestOverrideTable:

    def test_upsert_replaces_same_key(self):
        table = OverrideTable()
        table.upsert(JobPayPeriodOverride('job-1', PAY_DATE, override_amount=100.0))
        table.upsert(JobPayPeriodOverride('job-1', PAY_DATE, override_amount=200.0))
        assert len(table) == 1
        assert table.get('job-1', PAY_DATE).override_amount == 200.0

    def test_lookup_ignores_time_of_day(self):
        table = OverrideTable([JobPayPeriodOverride('job-1', datetime(2025, 1, 17, 9, 0), 100.0)])
        assert table.get('job-1', datetime(2025, 1, 17, 22, 45)).override_amount == 100.0
        assert ('job-1', '2025-01-17') in table

    def test_clear(self):
        table = OverrideTable([PassiveIncomeOverride('p-1', PAY_DATE, 5.0)])
        assert table.clear('p-1', PAY_DATE) is True
        assert table.clear('p-1', PAY_DATE) is False
        assert len(table) == 0

    def test_remove_entity(self):
        table = OverrideTable([
            JobPayPeriodOverride('job-1', date(2025, 1, 3), 1.0),
            JobPayPeriodOverride('job-2', date(2025, 1, 3), 2.0),
            JobPayPeriodOverride('job-1', date(2025, 1, 17), 3.0),
        ])
        assert table.remove_entity('job-1') == 2
        assert [o.job_id for o in table] == ['job-2']

    def test_insertion_order_preserved(self):
        first = JobPayPeriodOverride('job-1', date(2025, 2, 1), 1.0)
        second = JobPayPeriodOverride('job-1', date(2025, 1, 1), 2.0)
        table = OverrideTable([first, second])
        table.upsert(JobPayPeriodOverride('job-1', date(2025, 2, 1), 9.0))
        assert [o.override_amount for o in table.to_list()] == [9.0, 2.0]

    def test_coerce_wraps_lists(self):
        table = OverrideTable.coerce([NonRecurringIncomeOverride('n-1', PAY_DATE, 1.0)])
        assert isinstance(table, OverrideTable)
        assert OverrideTable.coerce(table) is table
        assert len(OverrideTable.coerce(None)) == 0


class TestEffectiveJobAmount:

    def test_no_override_uses_formula(self, hourly):
        assert effective_job_amount(hourly, PAY_DATE, [], use_net=False) == pytest.approx(800.0)
        assert effective_job_amount(hourly, PAY_DATE, [], use_net=True) == pytest.approx(600.0)

    def test_amount_override(self, hourly):
        overrides = [JobPayPeriodOverride('job-1', PAY_DATE, override_amount=1000.0)]
        assert effective_job_amount(hourly, PAY_DATE, overrides, use_net=False) == 1000.0
        assert effective_job_amount(hourly, PAY_DATE, overrides, use_net=True) == pytest.approx(750.0)

    def test_amount_wins_over_hours(self, hourly):
        overrides = [JobPayPeriodOverride('job-1', PAY_DATE, override_amount=123.0, override_hours_worked=50.0)]
        assert effective_job_amount(hourly, PAY_DATE, overrides, use_net=False) == 123.0

    def test_hours_override_recomputes_overtime(self, hourly):
        overrides = [JobPayPeriodOverride('job-1', PAY_DATE, override_hours_worked=45.0)]
        assert effective_job_amount(hourly, PAY_DATE, overrides, use_net=False) == pytest.approx(950.0)

    def test_hours_override_ignored_for_salary(self, salary):
        overrides = [JobPayPeriodOverride('job-2', PAY_DATE, override_hours_worked=10.0)]
        assert effective_job_amount(salary, PAY_DATE, overrides, use_net=False) == 2000.0

    def test_zero_amount_override_is_kept(self, salary):
        overrides = [JobPayPeriodOverride('job-2', PAY_DATE, override_amount=0.0)]
        assert effective_job_amount(salary, PAY_DATE, overrides, use_net=False) == 0.0

    def test_override_on_other_day_does_not_apply(self, hourly):
        overrides = [JobPayPeriodOverride('job-1', date(2025, 1, 31), override_amount=1.0)]
        assert effective_job_amount(hourly, PAY_DATE, overrides, use_net=False) == pytest.approx(800.0)

    def test_empty_override_falls_back(self, hourly):
        overrides = [JobPayPeriodOverride('job-1', PAY_DATE)]
        assert effective_job_amount(hourly, PAY_DATE, overrides, use_net=False) == pytest.approx(800.0)

    def test_inputs_not_mutated(self, hourly):
        overrides = [JobPayPeriodOverride('job-1', PAY_DATE, override_hours_worked=45.0)]
        effective_job_amount(hourly, PAY_DATE, overrides, use_net=True)
        assert hourly.pay.planned_hours_per_period == 40.0
        assert len(overrides) == 1


class TestOtherEntities:

    def test_passive_override(self):
        rent = PassiveIncome(id='p-1', name='Rent', amount_per_period=300.0, interval_days=7,
                             start_date=date(2025, 1, 1), applies_tax=True, tax_rate=0.1)
        overrides = OverrideTable([PassiveIncomeOverride('p-1', date(2025, 1, 8), 250.0)])
        assert effective_passive_amount(rent, date(2025, 1, 8), overrides, False) == 250.0
        assert effective_passive_amount(rent, date(2025, 1, 8), overrides, True) == pytest.approx(225.0)
        assert effective_passive_amount(rent, date(2025, 1, 15), overrides, False) == 300.0

    def test_non_recurring_override(self):
        refund = NonRecurringIncome(id='n-1', name='Refund', amount=450.0, date=date(2025, 3, 20))
        overrides = [NonRecurringIncomeOverride('n-1', date(2025, 3, 20), 500.0)]
        assert effective_non_recurring_amount(refund, refund.date, overrides, False) == 500.0
        assert effective_non_recurring_amount(refund, refund.date, [], True) == 450.0
