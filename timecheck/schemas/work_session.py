"""
Work Session Schemas for sessions and check status
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from timecheck.utils.timeutil import as_utc, format_duration


class WorkSessionBase(BaseModel):
    ws_check_in: datetime
    ws_check_out: Optional[datetime] = None


class WorkSessionInDB(WorkSessionBase):
    model_config = ConfigDict(from_attributes=True)

    ws_id: int
    duration_seconds: Optional[float] = None
    is_open: bool = True

    @field_validator('ws_check_in', 'ws_check_out', mode='before')
    @classmethod
    def attach_utc(cls, v):
        """
        Stored timestamps are naive UTC; expose them with an explicit offset
        SQLite returns: 2024-01-05 09:00:00
        Response carries: 2024-01-05T09:00:00Z
        """
        if v == '' or v is None:
            return None
        if isinstance(v, datetime):
            return as_utc(v)
        return v


class WorkSession(WorkSessionInDB):
    @computed_field
    @property
    def formatted_duration(self) -> Optional[str]:
        return format_duration(self.duration_seconds)


class WorkSessionUpdate(BaseModel):
    """Request schema for editing a session; omitted fields stay unchanged"""
    ws_check_in: Optional[datetime] = None
    ws_check_out: Optional[datetime] = None


class CheckStatus(BaseModel):
    """Response schema for the current checked-in/out status"""
    checked_in: bool
    open_sessions: int = 0
    latest: Optional[WorkSession] = None
