from .work_session import WorkSession

__all__ = [
    "WorkSession"
]
