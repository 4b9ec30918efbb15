"""
Work Session Model - One check-in to check-out record
"""
from sqlalchemy import Column, Integer, DateTime
from atams.db import Base


class WorkSession(Base):
    """Work Session model - Table: work_time"""
    __tablename__ = "work_time"
    # AUTOINCREMENT keeps ids monotonic, also across delete-all
    __table_args__ = {"sqlite_autoincrement": True}

    ws_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    ws_check_in = Column(DateTime, nullable=False, index=True)  # naive UTC
    ws_check_out = Column(DateTime, nullable=True)  # NULL while the session is open

    @property
    def is_open(self) -> bool:
        return self.ws_check_out is None

    @property
    def duration_seconds(self):
        if self.ws_check_out is None:
            return None
        return (self.ws_check_out - self.ws_check_in).total_seconds()
