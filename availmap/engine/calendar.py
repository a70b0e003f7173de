"""
Calendar grid generation.

Every month is laid out as a fixed 6x7 grid starting on the Sunday on or
before the 1st. Padding cells from the neighbouring months are visible but
never selectable.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

GRID_CELLS = 42

WEEKDAY_LABELS: Dict[str, Tuple[str, ...]] = {
    "en": ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    "ko": ("일", "월", "화", "수", "목", "금", "토"),
}

DateLike = Union[date, str]


@dataclass(frozen=True)
class DayCell:
    """One cell of a month grid."""
    date: date
    display_day: int
    weekday_index: int  # 0=Sunday, 6=Saturday
    belongs_to_target_month: bool
    in_selectable_range: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "display_day": self.display_day,
            "weekday_index": self.weekday_index,
            "belongs_to_target_month": self.belongs_to_target_month,
            "in_selectable_range": self.in_selectable_range,
        }


@dataclass(frozen=True)
class CalendarWindow:
    """The 42-cell grid for one target month."""
    year: int
    month: int
    cells: Tuple[DayCell, ...]

    @property
    def title(self) -> str:
        return f"{self.year}-{self.month:02d}"

    def selectable_dates(self) -> List[date]:
        return [c.date for c in self.cells if c.in_selectable_range]


def sunday_weekday(d: date) -> int:
    """Weekday index with Sunday as 0 (date.weekday() uses Monday as 0)."""
    return (d.weekday() + 1) % 7


def to_date(value: DateLike) -> Optional[date]:
    """Coerce a date or ISO string to a date; None when it cannot be parsed."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def build_month(year: int, month: int) -> CalendarWindow:
    """
    Build the fixed 42-cell grid for (year, month).

    Total over any month: months outside 1..12 roll over into the
    neighbouring years, so build_month(2025, 13) is January 2026.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1

    first = date(year, month, 1)
    start = first - timedelta(days=sunday_weekday(first))

    cells = []
    for offset in range(GRID_CELLS):
        current = start + timedelta(days=offset)
        in_month = current.year == year and current.month == month
        cells.append(DayCell(
            date=current,
            display_day=current.day,
            weekday_index=sunday_weekday(current),
            belongs_to_target_month=in_month,
            in_selectable_range=in_month,
        ))

    return CalendarWindow(year=year, month=month, cells=tuple(cells))


class CalendarUniverse:
    """
    The set of windows shown to users and the dates they may pick.

    Membership checks go through a precomputed frozenset.
    """

    def __init__(self, year_months: Iterable[Tuple[int, int]]):
        self.windows: Tuple[CalendarWindow, ...] = tuple(
            build_month(year, month) for year, month in year_months
        )
        valid = set()
        for window in self.windows:
            valid.update(window.selectable_dates())
        self._valid: FrozenSet[date] = frozenset(valid)
        self._ordered: Tuple[date, ...] = tuple(sorted(valid))

    @classmethod
    def from_config(cls, config: dict) -> "CalendarUniverse":
        from availmap.config.loader import get_window
        return cls(get_window(config))

    @property
    def dates(self) -> Tuple[date, ...]:
        """All valid dates in ascending order."""
        return self._ordered

    def __len__(self) -> int:
        return len(self._valid)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, (date, str)) and self.is_valid_date(value)

    def is_valid_date(self, value: DateLike) -> bool:
        d = to_date(value)
        return d is not None and d in self._valid

    def coerce(self, value: DateLike) -> Optional[date]:
        """Return the date if it is a member of the universe, else None."""
        d = to_date(value)
        if d is None or d not in self._valid:
            return None
        return d

    def dates_between(self, a: date, b: date) -> List[date]:
        """
        Valid dates in the inclusive span between a and b, in either order.

        Walks calendar days and keeps members only, so spans crossing
        unselectable days skip them instead of failing.
        """
        lo, hi = (a, b) if a <= b else (b, a)
        result = []
        current = lo
        while current <= hi:
            if current in self._valid:
                result.append(current)
            current += timedelta(days=1)
        return result
