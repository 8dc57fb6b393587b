from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime


class Clock(ABC):
    """Source of "now" for every date-dependent calculation."""

    @abstractmethod
    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    def __init__(self, moment: datetime | date | str) -> None:
        if isinstance(moment, str):
            moment = datetime.fromisoformat(moment.strip())
        elif not isinstance(moment, datetime):
            moment = datetime(moment.year, moment.month, moment.day)
        self._moment = moment

    def now(self) -> datetime:
        return self._moment
