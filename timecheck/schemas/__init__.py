from .work_session import (
    WorkSession,
    WorkSessionUpdate,
    CheckStatus
)
from .report import DaySummary, DayBreakdown, HoursTotal, MonthSummary
from .backup import ImportResult, BackupFile
from atams.schemas import DataResponse

__all__ = [
    # Work session schemas
    "WorkSession",
    "WorkSessionUpdate",
    "CheckStatus",
    # Report schemas
    "DaySummary",
    "DayBreakdown",
    "HoursTotal",
    "MonthSummary",
    # Backup schemas
    "ImportResult",
    "BackupFile",
    # Common schemas
    "DataResponse"
]
