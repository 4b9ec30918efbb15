"""
Work Session Repository - Data access layer for work sessions
"""
from typing import Optional, List
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_

from atams.db import BaseRepository
from timecheck.models.work_session import WorkSession


class WorkSessionRepository(BaseRepository[WorkSession]):
    def __init__(self):
        super().__init__(WorkSession)

    def _newest_first(self, query):
        return query.order_by(WorkSession.ws_check_in.desc(), WorkSession.ws_id.desc())

    def get_by_id(self, db: Session, session_id: int) -> Optional[WorkSession]:
        """Get work session by ID using ORM"""
        return db.query(WorkSession).filter(WorkSession.ws_id == session_id).first()

    def get_all(self, db: Session) -> List[WorkSession]:
        """Get every work session, newest check-in first"""
        return self._newest_first(db.query(WorkSession)).all()

    def get_all_by_id(self, db: Session) -> List[WorkSession]:
        """Get every work session in id order (full dump)"""
        return db.query(WorkSession).order_by(WorkSession.ws_id.asc()).all()

    def get_between(self, db: Session, start: datetime, end: datetime) -> List[WorkSession]:
        """Get sessions whose check-in lies in [start, end), newest first"""
        query = db.query(WorkSession).filter(
            and_(
                WorkSession.ws_check_in >= start,
                WorkSession.ws_check_in < end
            )
        )
        return self._newest_first(query).all()

    def get_latest(self, db: Session) -> Optional[WorkSession]:
        """Get most recent session by check-in"""
        return self._newest_first(db.query(WorkSession)).first()

    def get_latest_open(self, db: Session) -> Optional[WorkSession]:
        """Get open session with the latest check-in"""
        query = db.query(WorkSession).filter(WorkSession.ws_check_out.is_(None))
        return self._newest_first(query).first()

    def count_open_sessions(self, db: Session) -> int:
        """Count open sessions using native SQL"""
        query = """
            SELECT COUNT(*)
            FROM work_time
            WHERE ws_check_out IS NULL
        """
        return self.execute_raw_sql_scalar(db, query)

    def delete_by_id(self, db: Session, session_id: int) -> bool:
        """Delete work session by ID and return success status"""
        work_session = self.get_by_id(db, session_id)
        if work_session:
            db.delete(work_session)
            db.commit()
            return True
        return False

    def delete_all(self, db: Session, commit: bool = True) -> int:
        """Delete every work session and return the count"""
        deleted = db.query(WorkSession).delete(synchronize_session=False)
        if commit:
            db.commit()
        return deleted

    def add_many(self, db: Session, rows: List[dict]) -> List[WorkSession]:
        """Stage new sessions without committing; ids are assigned on flush"""
        objects = [WorkSession(**row) for row in rows]
        db.add_all(objects)
        db.flush()
        return objects
