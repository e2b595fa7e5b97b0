"""Modelli per periodi e intervalli temporali."""

import datetime
from dataclasses import dataclass
from enum import Enum


class PeriodKind(Enum):
    """Tipi di periodo supportati."""
    TODAY = "today"
    YESTERDAY = "yesterday"
    HOURS = "h"
    DAYS = "d"
    WEEK = "week"


@dataclass(frozen=True)
class Period:
    """Periodo leggibile (today, yesterday, 24h, 7d, week), convertito in TimeRange su richiesta."""
    kind: PeriodKind
    amount: int = 0

    @classmethod
    def today(cls) -> 'Period':
        return cls(PeriodKind.TODAY)

    @classmethod
    def yesterday(cls) -> 'Period':
        return cls(PeriodKind.YESTERDAY)

    @classmethod
    def week(cls) -> 'Period':
        return cls(PeriodKind.WEEK)

    @classmethod
    def hours(cls, amount: int) -> 'Period':
        return cls(PeriodKind.HOURS, amount)

    @classmethod
    def days(cls, amount: int) -> 'Period':
        return cls(PeriodKind.DAYS, amount)

    def __str__(self) -> str:
        if self.kind in (PeriodKind.HOURS, PeriodKind.DAYS):
            return f"{self.amount}{self.kind.value}"
        return self.kind.value


@dataclass(frozen=True)
class TimeRange:
    """Intervallo semi-aperto [start, end) con datetime timezone-aware."""
    start: datetime.datetime
    end: datetime.datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"TimeRange start {self.start.isoformat()} is after end {self.end.isoformat()}")

    def contains(self, moment: datetime.datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def duration(self) -> datetime.timedelta:
        return self.end - self.start
