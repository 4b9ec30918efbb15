"""
Work Session Service - Check-in/check-out and record maintenance
"""
from typing import List, Optional
from datetime import date, datetime
from sqlalchemy.orm import Session

from timecheck.repositories.work_session_repository import WorkSessionRepository
from timecheck.schemas.work_session import WorkSession, WorkSessionUpdate, CheckStatus
from timecheck.services.aggregation_service import AggregationService
from timecheck.utils.timeutil import day_bounds, month_bounds, to_stored_time, to_utc_naive, utcnow
from timecheck.core.config import settings
from atams.exceptions import (
    NotFoundException,
    BadRequestException,
    ConflictException
)
from atams.logging import get_logger

logger = get_logger(__name__)


class WorkSessionService:
    def __init__(self, allow_concurrent_open_sessions: Optional[bool] = None) -> None:
        self.session_repo = WorkSessionRepository()
        self.aggregator = AggregationService()
        if allow_concurrent_open_sessions is None:
            allow_concurrent_open_sessions = settings.ALLOW_CONCURRENT_OPEN_SESSIONS
        self.allow_concurrent_open_sessions = allow_concurrent_open_sessions

    def check_in(
        self,
        db: Session,
        now: Optional[datetime] = None,
        allow_concurrent: Optional[bool] = None
    ) -> WorkSession:
        """
        Start a new work session

        Args:
            db: Database session
            now: Check-in time (default: current UTC time)
            allow_concurrent: Override the service-wide open-session guard

        Returns:
            WorkSession: The new open session

        Raises:
            ConflictException: If a session is still open and concurrent
                open sessions are not allowed
        """
        now = to_stored_time(now) if now else utcnow()

        open_session = self.session_repo.get_latest_open(db)
        if open_session is not None:
            if allow_concurrent is None:
                allow_concurrent = self.allow_concurrent_open_sessions
            if not allow_concurrent:
                raise ConflictException(
                    "A work session is already open",
                    {"ws_id": open_session.ws_id}
                )
            logger.warning(f"Checking in while session {open_session.ws_id} is still open")

        db_session = self.session_repo.create(db, {
            "ws_check_in": now,
            "ws_check_out": None
        })
        logger.info(f"Checked in: session {db_session.ws_id} at {now.isoformat()}")
        return WorkSession.model_validate(db_session)

    def check_out(self, db: Session, now: Optional[datetime] = None) -> WorkSession:
        """
        Close the open session with the latest check-in

        Raises:
            NotFoundException: If there is no open session; nothing is changed
        """
        now = to_stored_time(now) if now else utcnow()

        open_session = self.session_repo.get_latest_open(db)
        if open_session is None:
            raise NotFoundException("No open work session to check out")

        db_session = self.session_repo.update(db, open_session, {"ws_check_out": now})
        logger.info(f"Checked out: session {db_session.ws_id} at {now.isoformat()}")
        return WorkSession.model_validate(db_session)

    def get_by_id(self, db: Session, ws_id: int) -> WorkSession:
        db_session = self.session_repo.get_by_id(db, ws_id)
        if not db_session:
            raise NotFoundException("Work session not found", {"ws_id": ws_id})
        return WorkSession.model_validate(db_session)

    def get_all(self, db: Session) -> List[WorkSession]:
        return [WorkSession.model_validate(s) for s in self.session_repo.get_all(db)]

    def get_between(self, db: Session, start: datetime, end: datetime) -> List[WorkSession]:
        """Sessions with check-in in [start, end), newest first"""
        start, end = to_utc_naive(start), to_utc_naive(end)
        if end <= start:
            raise BadRequestException("end must be after start")
        sessions = self.session_repo.get_between(db, start, end)
        return [WorkSession.model_validate(s) for s in sessions]

    def get_for_date(self, db: Session, day: date) -> List[WorkSession]:
        start, end = day_bounds(day)
        return self.get_between(db, start, end)

    def get_for_month(self, db: Session, day: date) -> List[WorkSession]:
        start, end = month_bounds(day)
        return self.get_between(db, start, end)

    def total_hours_for_month(self, db: Session, day: date) -> float:
        """Closed-session hours of the calendar month containing day"""
        start, end = month_bounds(day)
        return self.aggregator.total_hours_for_range(db, start, end)

    def latest(self, db: Session) -> Optional[WorkSession]:
        db_session = self.session_repo.get_latest(db)
        if db_session is None:
            return None
        return WorkSession.model_validate(db_session)

    def status(self, db: Session) -> CheckStatus:
        """Checked in means the most recent session is still open"""
        latest = self.latest(db)
        return CheckStatus(
            checked_in=latest is not None and latest.is_open,
            open_sessions=self.session_repo.count_open_sessions(db) or 0,
            latest=latest
        )

    def update(self, db: Session, ws_id: int, payload: WorkSessionUpdate) -> WorkSession:
        """
        Overwrite check-in and/or check-out of an existing session

        Raises:
            NotFoundException: If the session does not exist
            BadRequestException: If no field is given or check-out precedes check-in
        """
        update_data = {
            field: to_stored_time(value)
            for field, value in payload.model_dump(exclude_none=True).items()
        }
        if not update_data:
            raise BadRequestException("Nothing to update: give ws_check_in and/or ws_check_out")

        db_session = self.session_repo.get_by_id(db, ws_id)
        if not db_session:
            raise NotFoundException("Work session not found", {"ws_id": ws_id})

        check_in = update_data.get("ws_check_in", db_session.ws_check_in)
        check_out = update_data.get("ws_check_out", db_session.ws_check_out)
        if check_out is not None and check_out < check_in:
            raise BadRequestException("Check-out must not be before check-in", {"ws_id": ws_id})

        db_session = self.session_repo.update(db, db_session, update_data)
        logger.info(f"Updated session {ws_id}: {sorted(update_data)}")
        return WorkSession.model_validate(db_session)

    def delete(self, db: Session, ws_id: int) -> None:
        deleted = self.session_repo.delete_by_id(db, ws_id)
        if not deleted:
            raise NotFoundException("Work session not found", {"ws_id": ws_id})
        logger.info(f"Deleted session {ws_id}")
        return None

    def delete_all(self, db: Session) -> int:
        deleted = self.session_repo.delete_all(db)
        logger.info(f"Deleted all sessions ({deleted})")
        return deleted
