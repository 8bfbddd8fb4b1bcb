"""Wochen-Navigation: vor, zurück, aktuelle Woche."""

from datetime import date
from typing import Callable, Optional

from grid.week_range import WeekRange, week_start_for


class WeekNavigator:
    """Hält die angezeigte Woche und meldet jeden Wechsel an on_change.

    on_change bekommt den neuen Montag und lädt typischerweise die Slots
    dieser Woche neu.
    """

    def __init__(
        self,
        week_start: Optional[date] = None,
        on_change: Optional[Callable[[date], None]] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._today = today
        self.on_change = on_change
        self.week = WeekRange(week_start_for(week_start or today()))

    @property
    def week_start(self) -> date:
        return self.week.start

    @property
    def label(self) -> str:
        return self.week.label

    @property
    def is_current_week(self) -> bool:
        return self.week.is_current(self._today())

    def previous(self) -> date:
        return self._set(self.week.shifted(-1))

    def next(self) -> date:
        return self._set(self.week.shifted(1))

    def current(self) -> date:
        """Springt in die Woche, die heute enthält."""
        return self._set(WeekRange.containing(self._today()))

    def goto(self, d: date) -> date:
        """Springt in die Woche, die d enthält."""
        return self._set(WeekRange.containing(d))

    def _set(self, week: WeekRange) -> date:
        self.week = week
        if self.on_change is not None:
            self.on_change(week.start)
        return week.start
