"""
Backup Schemas for CSV import and saved backup files
"""
from pydantic import BaseModel


class ImportResult(BaseModel):
    """Outcome of a destructive CSV import"""
    deleted: int
    imported: int
    skipped: int


class BackupFile(BaseModel):
    """A CSV backup written to disk"""
    path: str
    records: int
