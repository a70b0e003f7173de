"""Pydantic models for the calendar API."""

from datetime import date
from typing import List

from pydantic import BaseModel


class DayCellModel(BaseModel):
    date: date
    display_day: int
    weekday_index: int  # 0=Sunday, 6=Saturday
    belongs_to_target_month: bool
    in_selectable_range: bool


class MonthWindow(BaseModel):
    year: int
    month: int
    title: str
    weekdays: List[str]
    cells: List[DayCellModel]


class CalendarResponse(BaseModel):
    months: List[MonthWindow]
    first_date: date
    last_date: date
