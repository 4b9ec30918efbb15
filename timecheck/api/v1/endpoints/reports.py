"""
Report Endpoints - Monthly, range and per-day totals
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime

from timecheck.db.session import get_db
from timecheck.api.deps import get_settings
from timecheck.core.config import Settings
from timecheck.services.aggregation_service import AggregationService
from timecheck.services.work_session_service import WorkSessionService
from timecheck.schemas import DayBreakdown, HoursTotal, MonthSummary, DataResponse
from timecheck.utils.timeutil import as_utc, month_bounds

router = APIRouter()
aggregation_service = AggregationService()
work_session_service = WorkSessionService()


@router.get(
    "/monthly",
    response_model=DataResponse[MonthSummary],
    status_code=status.HTTP_200_OK
)
async def get_month_summary(
    day: Optional[date] = Query(None, alias="date", description="Any day of the month (default: today)"),
    target_hours: Optional[float] = Query(None, gt=0, description="Monthly target (default: MONTHLY_TARGET_HOURS)"),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """
    Monthly total with progress against the target

    **Response:**
    - total_hours: closed-session hours checked in during the month
    - progress_percent: total / target, capped at 100
    - days: one entry per calendar day with its hours
    """
    summary = aggregation_service.month_summary(
        db, day or date.today(), target_hours or app_settings.MONTHLY_TARGET_HOURS
    )

    return DataResponse(
        success=True,
        message="Monthly summary retrieved successfully",
        data=summary
    )


@router.get(
    "/monthly/hours",
    response_model=DataResponse[HoursTotal],
    status_code=status.HTTP_200_OK
)
async def get_month_hours(
    day: Optional[date] = Query(None, alias="date", description="Any day of the month (default: today)"),
    db: Session = Depends(get_db)
):
    day = day or date.today()
    start, end = month_bounds(day)
    total = work_session_service.total_hours_for_month(db, day)

    return DataResponse(
        success=True,
        message="Monthly hours retrieved successfully",
        data=HoursTotal(start=as_utc(start), end=as_utc(end), total_hours=total)
    )


@router.get(
    "/range",
    response_model=DataResponse[HoursTotal],
    status_code=status.HTTP_200_OK
)
async def get_range_hours(
    start: datetime = Query(..., description="Window start, inclusive (ISO-8601)"),
    end: datetime = Query(..., description="Window end, exclusive (ISO-8601)"),
    db: Session = Depends(get_db)
):
    total = aggregation_service.total_hours_for_range(db, start, end)

    return DataResponse(
        success=True,
        message="Hours retrieved successfully",
        data=HoursTotal(start=as_utc(start), end=as_utc(end), total_hours=total)
    )


@router.get(
    "/daily",
    response_model=DataResponse[List[DayBreakdown]],
    status_code=status.HTTP_200_OK
)
async def get_daily_breakdown(
    start: Optional[date] = Query(None, description="First day, inclusive (default: start of this month)"),
    end: Optional[date] = Query(None, description="Day after the last day, exclusive (default: start of next month)"),
    db: Session = Depends(get_db)
):
    """
    Sessions bucketed per calendar day, for calendar-style rendering

    Days without sessions are included with an empty list.
    """
    month_start, month_end = month_bounds(date.today())
    window_start = datetime.combine(start, datetime.min.time()) if start else month_start
    window_end = datetime.combine(end, datetime.min.time()) if end else month_end

    breakdown = aggregation_service.day_breakdowns(db, window_start, window_end)

    return DataResponse(
        success=True,
        message="Daily breakdown retrieved successfully",
        data=breakdown
    )
