"""Per-day override records for income entities.

An override replaces the formula-derived amount of one entity on one
calendar day. Overrides live in an OverrideTable keyed by
(entity_id, day), so there is at most one override per entity per day and
a later upsert replaces the earlier one.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from calc.dates import to_day


@dataclass(frozen=True)
class JobPayPeriodOverride:
    """Override for one job pay date.

    override_amount is interpreted as gross and wins over
    override_hours_worked, which only applies to hourly jobs.
    """
    job_id: str
    pay_date: date
    override_amount: Optional[float] = None
    override_hours_worked: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'pay_date', to_day(self.pay_date))

    @property
    def entity_id(self) -> str:
        return self.job_id

    @property
    def day(self) -> date:
        return self.pay_date


@dataclass(frozen=True)
class PassiveIncomeOverride:
    passive_income_id: str
    date: date
    override_amount: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'date', to_day(self.date))

    @property
    def entity_id(self) -> str:
        return self.passive_income_id

    @property
    def day(self) -> date:
        return self.date


@dataclass(frozen=True)
class NonRecurringIncomeOverride:
    non_recurring_id: str
    date: date
    override_amount: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'date', to_day(self.date))

    @property
    def entity_id(self) -> str:
        return self.non_recurring_id

    @property
    def day(self) -> date:
        return self.date


O = TypeVar('O', JobPayPeriodOverride, PassiveIncomeOverride, NonRecurringIncomeOverride)


class OverrideTable(Generic[O]):
    """Overrides of one kind, keyed by (entity_id, calendar day).

    Iteration yields overrides in first-insertion order; replacing an
    existing key keeps its position.
    """

    def __init__(self, overrides: Optional[List[O]] = None):
        self._items: Dict[Tuple[str, date], O] = {}
        for override in overrides or []:
            self.upsert(override)

    @classmethod
    def coerce(cls, overrides) -> "OverrideTable":
        """Return overrides as a table, wrapping a plain list (or None) if needed."""
        if isinstance(overrides, OverrideTable):
            return overrides
        return cls(list(overrides or []))

    def upsert(self, override: O) -> None:
        self._items[(override.entity_id, override.day)] = override

    def get(self, entity_id: str, day) -> Optional[O]:
        return self._items.get((entity_id, to_day(day)))

    def clear(self, entity_id: str, day) -> bool:
        """Remove the override for (entity_id, day). Returns True if one existed."""
        return self._items.pop((entity_id, to_day(day)), None) is not None

    def remove_entity(self, entity_id: str) -> int:
        """Remove every override that references entity_id. Returns the count removed."""
        keys = [key for key in self._items if key[0] == entity_id]
        for key in keys:
            del self._items[key]
        return len(keys)

    def for_entity(self, entity_id: str) -> List[O]:
        return [o for o in self._items.values() if o.entity_id == entity_id]

    def to_list(self) -> List[O]:
        return list(self._items.values())

    def __iter__(self) -> Iterator[O]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key) -> bool:
        entity_id, day = key
        return (entity_id, to_day(day)) in self._items

    def __eq__(self, other) -> bool:
        if not isinstance(other, OverrideTable):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __repr__(self) -> str:
        return f"OverrideTable({self.to_list()!r})"
