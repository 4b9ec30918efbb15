"""
CSV Service - Full backup and destructive restore of work sessions

Format:
    ID,CheckIn,CheckOut
    1,2024-01-05T09:00:00Z,2024-01-05T17:30:00Z
    2,2024-01-06T09:00:00Z,

Timestamps are ISO-8601 UTC; an empty CheckOut is an open session.
"""
import csv
import io
from typing import List, Optional, Tuple
from datetime import datetime
from pathlib import Path
from sqlalchemy.orm import Session

from timecheck.repositories.work_session_repository import WorkSessionRepository
from timecheck.schemas.backup import ImportResult, BackupFile
from timecheck.utils.timeutil import format_timestamp, parse_timestamp, to_stored_time
from timecheck.core.config import settings
from atams.exceptions import BadRequestException, ServiceUnavailableException
from atams.transaction import transaction
from atams.logging import get_logger

logger = get_logger(__name__)

CSV_HEADER = ["ID", "CheckIn", "CheckOut"]
BACKUP_FILE_PATTERN = "worktime_backup_{timestamp}.csv"


def _is_header(row: Optional[List[str]]) -> bool:
    if not row or len(row) < len(CSV_HEADER):
        return False
    cells = [cell.strip().lstrip("\ufeff").lower() for cell in row[:len(CSV_HEADER)]]
    return cells == [name.lower() for name in CSV_HEADER]


class CsvService:
    def __init__(self) -> None:
        self.session_repo = WorkSessionRepository()

    def export(self, db: Session) -> str:
        """Dump every session, in id order, as CSV text"""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for s in self.session_repo.get_all_by_id(db):
            writer.writerow([
                s.ws_id,
                format_timestamp(s.ws_check_in),
                format_timestamp(s.ws_check_out) if s.ws_check_out else "",
            ])
        return buffer.getvalue()

    def _parse_rows(self, text: str) -> Tuple[List[dict], int]:
        """Return (parsed rows, skipped count); the first row is the header"""
        reader = csv.reader(io.StringIO(text))
        header = next(reader, None)
        if not _is_header(header):
            raise BadRequestException(
                "CSV has no header row",
                {"expected": ",".join(CSV_HEADER)}
            )

        rows: List[dict] = []
        skipped = 0
        for line_no, columns in enumerate(reader, start=2):
            if not columns or not any(cell.strip() for cell in columns):
                continue
            if len(columns) < 3:
                logger.warning(f"CSV line {line_no}: expected 3 columns, got {len(columns)}; skipped")
                skipped += 1
                continue
            try:
                check_in = to_stored_time(parse_timestamp(columns[1]))
                check_out_text = columns[2].strip()
                check_out = to_stored_time(parse_timestamp(check_out_text)) if check_out_text else None
            except BadRequestException as e:
                logger.warning(f"CSV line {line_no}: {e.message}; skipped")
                skipped += 1
                continue
            if check_out is not None and check_out < check_in:
                logger.warning(f"CSV line {line_no}: check-out before check-in; skipped")
                skipped += 1
                continue
            rows.append({"ws_check_in": check_in, "ws_check_out": check_out})
        return rows, skipped

    def import_csv(self, db: Session, text: str) -> ImportResult:
        """
        Replace all sessions with the rows of a CSV backup

        Rows are parsed before anything is deleted, then the delete and the
        inserts run in one transaction. Source ids are ignored; the store
        assigns fresh ones.

        Raises:
            BadRequestException: If the text has no header row (store untouched)
        """
        rows, skipped = self._parse_rows(text)

        with transaction(db):
            deleted = self.session_repo.delete_all(db, commit=False)
            self.session_repo.add_many(db, rows)

        logger.info(f"Imported {len(rows)} sessions from CSV (replaced {deleted}, skipped {skipped})")
        return ImportResult(deleted=deleted, imported=len(rows), skipped=skipped)

    def save_backup(self, db: Session, directory: Optional[str] = None) -> BackupFile:
        """
        Write the CSV export to worktime_backup_YYYYMMDD_HHMMSS.csv

        Raises:
            ServiceUnavailableException: If the file cannot be written
        """
        target_dir = Path(directory or settings.BACKUP_DIR)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = target_dir / BACKUP_FILE_PATTERN.format(timestamp=timestamp)

        content = self.export(db)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot write backup {path}: {e}")
            raise ServiceUnavailableException("Backup could not be written", {"path": str(path)})

        records = content.count("\n") - 1
        logger.info(f"Saved backup with {records} sessions to {path}")
        return BackupFile(path=str(path), records=records)
