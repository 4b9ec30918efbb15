from .work_session_repository import WorkSessionRepository

__all__ = [
    "WorkSessionRepository"
]
