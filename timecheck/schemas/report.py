"""
Report Schemas for daily and monthly totals
"""
from typing import List, Literal
from datetime import date, datetime
from pydantic import BaseModel

from timecheck.schemas.work_session import WorkSession


ProgressBand = Literal["low", "medium", "high", "complete"]


class DaySummary(BaseModel):
    """Totals for one calendar day"""
    day: date
    hours: float
    session_count: int
    is_weekend: bool


class DayBreakdown(DaySummary):
    """One calendar day with its sessions, newest check-in first"""
    sessions: List[WorkSession] = []


class HoursTotal(BaseModel):
    """Total hours over the half-open window [start, end)"""
    start: datetime
    end: datetime
    total_hours: float


class MonthSummary(BaseModel):
    """Monthly total, progress against the target and per-day totals"""
    month_start: date
    next_month_start: date
    total_hours: float
    target_hours: float
    progress_percent: float
    progress_band: ProgressBand
    days: List[DaySummary]
