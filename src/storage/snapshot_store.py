"""JSON persistence of income and savings snapshots for a profile.

A profile is a directory holding two files:

- income_data.json: jobs, passive and one-time income, and their overrides
- savings_goals.json: savings goals with their schedules and planned entries

Keys are camelCase, dates are ISO-8601 calendar days, absent optional fields
are omitted, and list order is preserved. A file that cannot be decoded is
reported and treated as missing; nothing from it is applied.
"""

import json
import logging
import os
import tempfile
from typing import Any, Callable, Dict, List, Optional

from model.IncomeData import (
    Job,
    JobType,
    PassiveIncome,
    NonRecurringIncome,
    SalaryPay,
    HourlyPay,
    ContractPay,
)
from model.OverrideData import JobPayPeriodOverride, PassiveIncomeOverride, NonRecurringIncomeOverride
from model.SavingsData import SavingsGoal, SavingsPlannedEntry
from model.Snapshot import IncomeSnapshot, SavingsSnapshot
from calc.dates import to_day


logger = logging.getLogger(__name__)

INCOME_FILE = 'income_data.json'
SAVINGS_FILE = 'savings_goals.json'


class SnapshotDecodeError(ValueError):
    """Raised when persisted data does not match the snapshot shape."""


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------

def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _day(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def encode_job(job: Job) -> Dict[str, Any]:
    data = {
        'id': job.id,
        'name': job.name,
        'type': job.type.value,
        'intervalDays': job.interval_days,
        'startDate': _day(job.start_date),
        'endDate': _day(job.end_date),
        'appliesTax': job.applies_tax,
        'taxRate': job.tax_rate,
    }
    pay = job.pay
    if isinstance(pay, SalaryPay):
        data['salaryPerPeriod'] = pay.salary_per_period
        data['usesOvertime'] = False
    elif isinstance(pay, HourlyPay):
        data['hourlyRate'] = pay.hourly_rate
        data['plannedHoursPerPeriod'] = pay.planned_hours_per_period
        data['usesOvertime'] = pay.uses_overtime
        data['overtimeThreshold'] = pay.overtime_threshold
        data['overtimeMultiplier'] = pay.overtime_multiplier
    else:
        data['contractRatePerUnit'] = pay.rate_per_unit
        data['expectedUnitsPerPeriod'] = pay.expected_units_per_period
        data['usesOvertime'] = False
    return _compact(data)


def encode_passive(item: PassiveIncome) -> Dict[str, Any]:
    return _compact({
        'id': item.id,
        'name': item.name,
        'amountPerPeriod': item.amount_per_period,
        'intervalDays': item.interval_days,
        'startDate': _day(item.start_date),
        'endDate': _day(item.end_date),
        'appliesTax': item.applies_tax,
        'taxRate': item.tax_rate,
    })


def encode_non_recurring(item: NonRecurringIncome) -> Dict[str, Any]:
    return _compact({
        'id': item.id,
        'name': item.name,
        'amount': item.amount,
        'date': _day(item.date),
        'appliesTax': item.applies_tax,
        'taxRate': item.tax_rate,
    })


def encode_income(snapshot: IncomeSnapshot) -> Dict[str, Any]:
    return {
        'jobs': [encode_job(j) for j in snapshot.jobs],
        'passiveIncomes': [encode_passive(p) for p in snapshot.passive_incomes],
        'nonRecurringIncomes': [encode_non_recurring(n) for n in snapshot.non_recurring_incomes],
        'jobOverrides': [_compact({
            'jobId': o.job_id,
            'payDate': _day(o.pay_date),
            'overrideAmount': o.override_amount,
            'overrideHoursWorked': o.override_hours_worked,
        }) for o in snapshot.job_overrides],
        'passiveOverrides': [_compact({
            'passiveIncomeId': o.passive_income_id,
            'date': _day(o.date),
            'overrideAmount': o.override_amount,
        }) for o in snapshot.passive_overrides],
        'nonRecurringOverrides': [_compact({
            'nonRecurringId': o.non_recurring_id,
            'date': _day(o.date),
            'overrideAmount': o.override_amount,
        }) for o in snapshot.non_recurring_overrides],
    }


def encode_goal(goal: SavingsGoal) -> Dict[str, Any]:
    entries = None
    if goal.planned_entries is not None:
        entries = [{'id': e.id, 'date': _day(e.date), 'amount': e.amount} for e in goal.planned_entries]
    return _compact({
        'id': goal.id,
        'name': goal.name,
        'targetAmount': goal.target_amount,
        'currentSaved': goal.current_saved,
        'useSchedule': goal.use_schedule,
        'intervalDays': goal.interval_days,
        'scheduleAmount': goal.schedule_amount,
        'startDate': _day(goal.start_date),
        'plannedEntries': entries,
    })


def encode_savings(snapshot: SavingsSnapshot) -> Dict[str, Any]:
    return {'goals': [encode_goal(g) for g in snapshot.goals]}


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------

def _require(data: Dict[str, Any], key: str):
    if key not in data or data[key] is None:
        raise SnapshotDecodeError(f"Missing required field '{key}'")
    return data[key]


def _number(data: Dict[str, Any], key: str, required: bool = False) -> Optional[float]:
    value = _require(data, key) if required else data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotDecodeError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def _integer(data: Dict[str, Any], key: str, required: bool = False) -> Optional[int]:
    value = _require(data, key) if required else data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotDecodeError(f"Field '{key}' must be an integer, got {value!r}")
    return value


def _string(data: Dict[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise SnapshotDecodeError(f"Field '{key}' must be a string, got {value!r}")
    return value


def _boolean(data: Dict[str, Any], key: str, required: bool = False) -> Optional[bool]:
    value = _require(data, key) if required else data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise SnapshotDecodeError(f"Field '{key}' must be true or false, got {value!r}")
    return value


def _date(data: Dict[str, Any], key: str, required: bool = False):
    value = _require(data, key) if required else data.get(key)
    if value is None:
        return None
    try:
        return to_day(value)
    except (TypeError, ValueError) as e:
        raise SnapshotDecodeError(f"Field '{key}' is not an ISO-8601 date: {value!r}") from e


def _list(data: Dict[str, Any], key: str, decode: Callable[[Dict[str, Any]], Any]) -> List[Any]:
    items = data.get(key, [])
    if items is None:
        return []
    if not isinstance(items, list):
        raise SnapshotDecodeError(f"Field '{key}' must be a list")
    result = []
    for item in items:
        if not isinstance(item, dict):
            raise SnapshotDecodeError(f"Entries of '{key}' must be objects")
        result.append(decode(item))
    return result


def decode_job(data: Dict[str, Any]) -> Job:
    type_name = _string(data, 'type')
    try:
        job_type = JobType(type_name)
    except ValueError as e:
        raise SnapshotDecodeError(f"Unknown job type '{type_name}'") from e

    if job_type is JobType.SALARY:
        pay = SalaryPay(salary_per_period=_number(data, 'salaryPerPeriod'))
    elif job_type is JobType.HOURLY:
        pay = HourlyPay(
            hourly_rate=_number(data, 'hourlyRate'),
            planned_hours_per_period=_number(data, 'plannedHoursPerPeriod'),
            uses_overtime=bool(_boolean(data, 'usesOvertime')),
            overtime_threshold=_number(data, 'overtimeThreshold'),
            overtime_multiplier=_number(data, 'overtimeMultiplier'),
        )
    else:
        pay = ContractPay(
            rate_per_unit=_number(data, 'contractRatePerUnit'),
            expected_units_per_period=_number(data, 'expectedUnitsPerPeriod'),
        )

    return Job(
        id=_string(data, 'id'),
        name=_string(data, 'name'),
        pay=pay,
        interval_days=_integer(data, 'intervalDays', required=True),
        start_date=_date(data, 'startDate', required=True),
        end_date=_date(data, 'endDate'),
        applies_tax=_boolean(data, 'appliesTax', required=True),
        tax_rate=_number(data, 'taxRate'),
    )


def decode_passive(data: Dict[str, Any]) -> PassiveIncome:
    return PassiveIncome(
        id=_string(data, 'id'),
        name=_string(data, 'name'),
        amount_per_period=_number(data, 'amountPerPeriod', required=True),
        interval_days=_integer(data, 'intervalDays', required=True),
        start_date=_date(data, 'startDate', required=True),
        end_date=_date(data, 'endDate'),
        applies_tax=_boolean(data, 'appliesTax', required=True),
        tax_rate=_number(data, 'taxRate'),
    )


def decode_non_recurring(data: Dict[str, Any]) -> NonRecurringIncome:
    return NonRecurringIncome(
        id=_string(data, 'id'),
        name=_string(data, 'name'),
        amount=_number(data, 'amount', required=True),
        date=_date(data, 'date', required=True),
        applies_tax=_boolean(data, 'appliesTax', required=True),
        tax_rate=_number(data, 'taxRate'),
    )


def decode_income(data: Any) -> IncomeSnapshot:
    if not isinstance(data, dict):
        raise SnapshotDecodeError("Income snapshot must be a JSON object")
    return IncomeSnapshot(
        jobs=_list(data, 'jobs', decode_job),
        passive_incomes=_list(data, 'passiveIncomes', decode_passive),
        non_recurring_incomes=_list(data, 'nonRecurringIncomes', decode_non_recurring),
        job_overrides=_list(data, 'jobOverrides', lambda o: JobPayPeriodOverride(
            job_id=_string(o, 'jobId'),
            pay_date=_date(o, 'payDate', required=True),
            override_amount=_number(o, 'overrideAmount'),
            override_hours_worked=_number(o, 'overrideHoursWorked'),
        )),
        passive_overrides=_list(data, 'passiveOverrides', lambda o: PassiveIncomeOverride(
            passive_income_id=_string(o, 'passiveIncomeId'),
            date=_date(o, 'date', required=True),
            override_amount=_number(o, 'overrideAmount'),
        )),
        non_recurring_overrides=_list(data, 'nonRecurringOverrides', lambda o: NonRecurringIncomeOverride(
            non_recurring_id=_string(o, 'nonRecurringId'),
            date=_date(o, 'date', required=True),
            override_amount=_number(o, 'overrideAmount'),
        )),
    )


def decode_goal(data: Dict[str, Any]) -> SavingsGoal:
    entries = None
    if data.get('plannedEntries') is not None:
        entries = _list(data, 'plannedEntries', lambda e: SavingsPlannedEntry(
            id=_string(e, 'id'),
            date=_date(e, 'date', required=True),
            amount=_number(e, 'amount', required=True),
        ))
    return SavingsGoal(
        id=_string(data, 'id'),
        name=_string(data, 'name'),
        target_amount=_number(data, 'targetAmount', required=True),
        current_saved=_number(data, 'currentSaved', required=True),
        use_schedule=_boolean(data, 'useSchedule'),
        interval_days=_integer(data, 'intervalDays'),
        schedule_amount=_number(data, 'scheduleAmount'),
        start_date=_date(data, 'startDate'),
        planned_entries=entries,
    )


def decode_savings(data: Any) -> SavingsSnapshot:
    # Older files hold a bare list of goals
    if isinstance(data, list):
        data = {'goals': data}
    if not isinstance(data, dict):
        raise SnapshotDecodeError("Savings snapshot must be a JSON object")
    return SavingsSnapshot(goals=_list(data, 'goals', decode_goal))


# ----------------------------------------------------------------------
# Store
# ----------------------------------------------------------------------

class SnapshotStore:
    """Reads and writes the snapshot files of one profile directory."""

    def __init__(self, profile_dir: str):
        self.profile_dir = profile_dir

    @property
    def income_path(self) -> str:
        return os.path.join(self.profile_dir, INCOME_FILE)

    @property
    def savings_path(self) -> str:
        return os.path.join(self.profile_dir, SAVINGS_FILE)

    def load_income(self) -> Optional[IncomeSnapshot]:
        """Load the income snapshot, or None if it is missing or unreadable."""
        return self._load(self.income_path, decode_income)

    def save_income(self, snapshot: IncomeSnapshot) -> None:
        self._write(self.income_path, encode_income(snapshot))

    def load_savings(self) -> Optional[SavingsSnapshot]:
        """Load the savings snapshot, or None if it is missing or unreadable."""
        return self._load(self.savings_path, decode_savings)

    def save_savings(self, snapshot: SavingsSnapshot) -> None:
        self._write(self.savings_path, encode_savings(snapshot))

    def _load(self, path: str, decode: Callable[[Any], Any]):
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return decode(json.load(f))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, SnapshotDecodeError) as e:
            logger.error("Could not load snapshot %s: %s", path, e)
            return None

    def _write(self, path: str, payload: Dict[str, Any]) -> None:
        os.makedirs(self.profile_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.profile_dir, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("Saved snapshot %s", path)
