from fastapi import APIRouter
from timecheck.api.v1.endpoints import work_sessions, reports, backup

api_router = APIRouter()

# Register routes
api_router.include_router(work_sessions.router, prefix="/work-sessions", tags=["Work Sessions"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(backup.router, prefix="/backup", tags=["Backup"])
