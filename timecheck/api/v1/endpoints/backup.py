"""
Backup Endpoints - CSV export, destructive import and saved backups
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from timecheck.db.session import get_db
from timecheck.api.deps import get_settings
from timecheck.core.config import Settings
from timecheck.services.csv_service import CsvService
from timecheck.schemas import ImportResult, BackupFile, DataResponse
from atams.exceptions import BadRequestException

router = APIRouter()
csv_service = CsvService()


@router.get(
    "/export",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK
)
async def export_csv(db: Session = Depends(get_db)):
    """Full dump of all sessions as CSV (ID,CheckIn,CheckOut)"""
    content = csv_service.export(db)
    return PlainTextResponse(content, media_type="text/csv; charset=utf-8")


@router.post(
    "/import",
    response_model=DataResponse[ImportResult],
    status_code=status.HTTP_200_OK
)
async def import_csv(
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Replace ALL sessions with the rows of a CSV backup

    **Process:**
    1. Parse every row (bad rows are skipped and counted)
    2. Delete existing sessions and insert the parsed ones in one transaction

    **Errors:**
    - 400: No header row (nothing is deleted)
    """
    try:
        content = (await request.body()).decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BadRequestException("CSV must be UTF-8 text")

    result = csv_service.import_csv(db, content)

    return DataResponse(
        success=True,
        message=f"Imported {result.imported} sessions",
        data=result
    )


@router.post(
    "/save",
    response_model=DataResponse[BackupFile],
    status_code=status.HTTP_201_CREATED
)
async def save_backup(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
):
    """Write worktime_backup_YYYYMMDD_HHMMSS.csv to BACKUP_DIR"""
    backup = csv_service.save_backup(db, app_settings.BACKUP_DIR)

    return DataResponse(
        success=True,
        message="Backup saved successfully",
        data=backup
    )
