"""
Aggregation Service - Durations and totals over calendar days and months
"""
from typing import Dict, Iterable, List, Optional
from datetime import date, datetime, timedelta
from sqlalchemy.orm import Session

from timecheck.repositories.work_session_repository import WorkSessionRepository
from timecheck.schemas.work_session import WorkSession
from timecheck.schemas.report import DaySummary, DayBreakdown, MonthSummary
from timecheck.utils.timeutil import month_bounds, to_utc_naive
from timecheck.core.config import settings
from atams.exceptions import BadRequestException

SECONDS_PER_HOUR = 3600.0


def sum_durations(sessions: Iterable) -> float:
    """Total seconds of the given sessions; open sessions count as zero"""
    return sum(s.duration_seconds or 0.0 for s in sessions)


def progress_band(percent: float) -> str:
    if percent < 50:
        return "low"
    if percent < 80:
        return "medium"
    if percent < 100:
        return "high"
    return "complete"


def _session_day(session) -> date:
    # Schemas carry aware UTC datetimes, ORM rows naive UTC
    return to_utc_naive(session.ws_check_in).date()


class AggregationService:
    def __init__(self) -> None:
        self.session_repo = WorkSessionRepository()

    def sum_durations(self, sessions: Iterable) -> float:
        return sum_durations(sessions)

    def _fetch(self, db: Session, start: datetime, end: datetime) -> List[WorkSession]:
        start, end = to_utc_naive(start), to_utc_naive(end)
        if end <= start:
            raise BadRequestException("end must be after start")
        return [
            WorkSession.model_validate(s)
            for s in self.session_repo.get_between(db, start, end)
        ]

    def total_hours_for_range(self, db: Session, start: datetime, end: datetime) -> float:
        """Hours of sessions checked in during [start, end)"""
        return self.sum_durations(self._fetch(db, start, end)) / SECONDS_PER_HOUR

    def per_day_breakdown(
        self,
        db: Session,
        month_start: datetime,
        month_end: datetime
    ) -> Dict[date, List[WorkSession]]:
        """
        Bucket sessions by check-in day

        Args:
            db: Database session
            month_start: First day of the window (inclusive)
            month_end: Start of the day after the window (exclusive)

        Returns:
            Dict[date, List[WorkSession]]: One entry per calendar day in
            [month_start, month_end), empty days map to an empty list
        """
        sessions = self._fetch(db, month_start, month_end)

        buckets: Dict[date, List[WorkSession]] = {}
        day = to_utc_naive(month_start).date()
        last = to_utc_naive(month_end)
        while datetime.combine(day, datetime.min.time()) < last:
            buckets[day] = []
            day += timedelta(days=1)

        # sessions arrive newest first, buckets keep that order
        for session in sessions:
            buckets.setdefault(_session_day(session), []).append(session)
        return buckets

    def day_breakdowns(self, db: Session, start: datetime, end: datetime) -> List[DayBreakdown]:
        buckets = self.per_day_breakdown(db, start, end)
        return [
            DayBreakdown(
                day=day,
                hours=self.sum_durations(sessions) / SECONDS_PER_HOUR,
                session_count=len(sessions),
                is_weekend=day.weekday() >= 5,
                sessions=sessions
            )
            for day, sessions in buckets.items()
        ]

    def day_totals(self, db: Session, start: datetime, end: datetime) -> List[DaySummary]:
        return [
            DaySummary(**b.model_dump(include={"day", "hours", "session_count", "is_weekend"}))
            for b in self.day_breakdowns(db, start, end)
        ]

    def month_summary(
        self,
        db: Session,
        day: date,
        target_hours: Optional[float] = None
    ) -> MonthSummary:
        """Total hours of the month containing day and progress against the target"""
        if target_hours is None:
            target_hours = settings.MONTHLY_TARGET_HOURS
        if target_hours <= 0:
            raise BadRequestException("target_hours must be positive")

        start, end = month_bounds(day)
        days = self.day_totals(db, start, end)
        total_hours = sum(d.hours for d in days)
        percent = min(total_hours / target_hours * 100, 100.0)

        return MonthSummary(
            month_start=start.date(),
            next_month_start=end.date(),
            total_hours=total_hours,
            target_hours=target_hours,
            progress_percent=percent,
            progress_band=progress_band(percent),
            days=days
        )
