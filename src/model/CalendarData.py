"""Data classes for the month income calendar."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List


class EventKind(Enum):
    JOB = 'job'
    PASSIVE = 'passive'
    ONE_TIME = 'one_time'


@dataclass(frozen=True)
class EventSource:
    """The entity an event was generated from."""
    kind: EventKind
    entity_id: str


@dataclass(frozen=True)
class IncomeEvent:
    """One income payment shown on the calendar."""
    day: date
    name: str
    amount: float
    source: EventSource


@dataclass(frozen=True)
class WeekSpan:
    """A 7-day block clipped to the viewed month."""
    start: date
    end: date


@dataclass
class WeekBucket:
    span: WeekSpan
    events: List[IncomeEvent] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(e.amount for e in self.events)


@dataclass
class MonthCalendar:
    """All week buckets of a month that contain at least one event."""
    year: int
    month: int
    month_start: date
    month_end: date
    use_net: bool
    weeks: List[WeekBucket] = field(default_factory=list)

    @property
    def events(self) -> List[IncomeEvent]:
        return [e for week in self.weeks for e in week.events]

    @property
    def total(self) -> float:
        return sum(week.total for week in self.weeks)
