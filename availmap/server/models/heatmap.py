"""Pydantic models for heatmap API."""

from datetime import date
from typing import List

from pydantic import BaseModel


class HeatmapCell(BaseModel):
    date: date
    weekday: int  # 0=Sunday, 6=Saturday
    count: int
    level: int  # count saturated at 12


class HeatmapResponse(BaseModel):
    cells: List[HeatmapCell]
    max_count: int
    total_participants: int
    legend: List[int]
