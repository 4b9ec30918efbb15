"""
Database Session Management
"""
from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from timecheck.db.store import WorkTimeStore


def get_store(request: Request) -> WorkTimeStore:
    """Store opened by the application lifespan"""
    return request.app.state.store


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency

    Usage:
        @router.get("/")
        async def endpoint(db: Session = Depends(get_db)):
            # Use db here
            pass
    """
    db = get_store(request).new_session()
    try:
        yield db
    finally:
        db.close()
