"""
Work Session Endpoints - Check-in/check-out, history and edits
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime

from timecheck.db.session import get_db
from timecheck.api.deps import get_settings
from timecheck.core.config import Settings
from timecheck.services.work_session_service import WorkSessionService
from timecheck.schemas import (
    WorkSession,
    WorkSessionUpdate,
    CheckStatus,
    DataResponse
)

router = APIRouter()
work_session_service = WorkSessionService()


@router.post(
    "/check-in",
    response_model=DataResponse[WorkSession],
    status_code=status.HTTP_201_CREATED
)
async def check_in(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """
    Start a work session now

    **Errors:**
    - 409: A session is already open
    """
    work_session = work_session_service.check_in(
        db, allow_concurrent=app_settings.ALLOW_CONCURRENT_OPEN_SESSIONS
    )

    return DataResponse(
        success=True,
        message="Checked in successfully",
        data=work_session
    )


@router.post(
    "/check-out",
    response_model=DataResponse[WorkSession],
    status_code=status.HTTP_200_OK
)
async def check_out(db: Session = Depends(get_db)):
    """
    Close the most recent open work session now

    **Errors:**
    - 404: No open session (nothing is changed)
    """
    work_session = work_session_service.check_out(db)

    return DataResponse(
        success=True,
        message="Checked out successfully",
        data=work_session
    )


@router.get(
    "",
    response_model=DataResponse[List[WorkSession]],
    status_code=status.HTTP_200_OK
)
async def list_sessions(db: Session = Depends(get_db)):
    """Get every work session, newest check-in first"""
    sessions = work_session_service.get_all(db)

    return DataResponse(
        success=True,
        message="Sessions retrieved successfully",
        data=sessions
    )


@router.get(
    "/latest",
    response_model=DataResponse[WorkSession],
    status_code=status.HTTP_200_OK
)
async def get_latest(db: Session = Depends(get_db)):
    """Get the most recent session; data is null when there are none"""
    work_session = work_session_service.latest(db)

    return DataResponse(
        success=True,
        message="Latest session retrieved successfully" if work_session else "No sessions recorded",
        data=work_session
    )


@router.get(
    "/status",
    response_model=DataResponse[CheckStatus],
    status_code=status.HTTP_200_OK
)
async def get_status(db: Session = Depends(get_db)):
    """Checked in / checked out, derived from the latest session"""
    check_status = work_session_service.status(db)

    return DataResponse(
        success=True,
        message="Checked in" if check_status.checked_in else "Checked out",
        data=check_status
    )


@router.get(
    "/date/{day}",
    response_model=DataResponse[List[WorkSession]],
    status_code=status.HTTP_200_OK
)
async def get_for_date(day: date, db: Session = Depends(get_db)):
    """
    Get sessions checked in on one calendar day (UTC)

    **Path Parameters:**
    - day: YYYY-MM-DD
    """
    sessions = work_session_service.get_for_date(db, day)

    return DataResponse(
        success=True,
        message="Sessions retrieved successfully",
        data=sessions
    )


@router.get(
    "/between",
    response_model=DataResponse[List[WorkSession]],
    status_code=status.HTTP_200_OK
)
async def get_between(
    start: datetime = Query(..., description="Window start, inclusive (ISO-8601)"),
    end: datetime = Query(..., description="Window end, exclusive (ISO-8601)"),
    db: Session = Depends(get_db)
):
    """
    Get sessions checked in during [start, end)

    **Errors:**
    - 400: end is not after start
    """
    sessions = work_session_service.get_between(db, start, end)

    return DataResponse(
        success=True,
        message="Sessions retrieved successfully",
        data=sessions
    )


@router.get(
    "/month",
    response_model=DataResponse[List[WorkSession]],
    status_code=status.HTTP_200_OK
)
async def get_for_month(
    day: Optional[date] = Query(None, alias="date", description="Any day of the month (default: today)"),
    db: Session = Depends(get_db)
):
    """Get sessions checked in during the calendar month containing date"""
    sessions = work_session_service.get_for_month(db, day or date.today())

    return DataResponse(
        success=True,
        message="Sessions retrieved successfully",
        data=sessions
    )


@router.get(
    "/{ws_id}",
    response_model=DataResponse[WorkSession],
    status_code=status.HTTP_200_OK
)
async def get_session(ws_id: int, db: Session = Depends(get_db)):
    work_session = work_session_service.get_by_id(db, ws_id)

    return DataResponse(
        success=True,
        message="Session retrieved successfully",
        data=work_session
    )


@router.patch(
    "/{ws_id}",
    response_model=DataResponse[WorkSession],
    status_code=status.HTTP_200_OK
)
async def update_session(
    ws_id: int,
    payload: WorkSessionUpdate,
    db: Session = Depends(get_db)
):
    """
    Edit check-in and/or check-out of a session

    **Errors:**
    - 400: Empty payload or check-out before check-in
    - 404: Session not found
    """
    work_session = work_session_service.update(db, ws_id, payload)

    return DataResponse(
        success=True,
        message="Session updated successfully",
        data=work_session
    )


@router.delete(
    "/{ws_id}",
    response_model=DataResponse[None],
    status_code=status.HTTP_200_OK
)
async def delete_session(ws_id: int, db: Session = Depends(get_db)):
    work_session_service.delete(db, ws_id)

    return DataResponse(
        success=True,
        message="Session deleted successfully",
        data=None
    )


@router.delete(
    "",
    response_model=DataResponse[int],
    status_code=status.HTTP_200_OK
)
async def delete_all_sessions(db: Session = Depends(get_db)):
    """Delete every session; data is the number of deleted records"""
    deleted = work_session_service.delete_all(db)

    return DataResponse(
        success=True,
        message=f"Deleted {deleted} sessions",
        data=deleted
    )
