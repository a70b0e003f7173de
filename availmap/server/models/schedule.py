"""Pydantic models for the schedule document and submissions."""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class ScheduleResponse(BaseModel):
    participants: Dict[str, List[date]] = Field(default_factory=dict)
    names: List[str] = Field(default_factory=list)
    count: int = 0
    version: int = 0
    updated_at: Optional[str] = None


class ScheduleReplaceRequest(BaseModel):
    """Whole-document replacement body."""
    participants: Dict[str, List[str]] = Field(default_factory=dict)


class ParticipantResponse(BaseModel):
    name: str
    exists: bool
    dates: List[date] = Field(default_factory=list)


class SubmissionRequest(BaseModel):
    name: str
    dates: List[str] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    name: str
    dates: List[date]
    status: Literal["created", "updated"]
    message: str
