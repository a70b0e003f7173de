"""Engine package - calendar grid, selection, aggregation and edit sessions."""

from .calendar import CalendarUniverse, CalendarWindow, DayCell, build_month
from .selector import Gesture, GestureState, RangeSelector
from .aggregation import aggregate, heat_level, HEAT_CEILING, LEGEND_LEVELS
from .session import EditSession, build_submission
from .board import ScheduleBoard

__all__ = [
    "CalendarUniverse",
    "CalendarWindow",
    "DayCell",
    "build_month",
    "Gesture",
    "GestureState",
    "RangeSelector",
    "aggregate",
    "heat_level",
    "HEAT_CEILING",
    "LEGEND_LEVELS",
    "EditSession",
    "build_submission",
    "ScheduleBoard",
]
