"""
TimeCheck - Work Time Tracker
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from atams.logging import setup_logging_from_settings, get_logger
from atams.middleware import RequestIDMiddleware
from atams.exceptions import setup_exception_handlers

from timecheck.core.config import Settings, settings
from timecheck.db.store import WorkTimeStore
from timecheck.api.v1.api import api_router

logger = get_logger(__name__)


async def storage_exception_handler(request: Request, exc: OperationalError):
    """Database file locked, missing or unreadable (503)"""
    logger.error(f"Storage unavailable on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": False,
            "message": "Storage unavailable",
            "details": {"error": str(exc.orig) if exc.orig is not None else str(exc)}
        }
    )


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Build the API application

    The work time store is opened when the application starts and closed
    when it shuts down.
    """
    setup_logging_from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = WorkTimeStore(app_settings.DATABASE_URL, app_settings.DEBUG).open()
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        description="Check-in/check-out work time tracking with monthly totals and CSV backup",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=app_settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=app_settings.cors_methods_list,
        allow_headers=app_settings.cors_headers_list,
    )

    # Request ID middleware
    app.add_middleware(RequestIDMiddleware)

    # Exception handlers
    setup_exception_handlers(app)
    app.add_exception_handler(OperationalError, storage_exception_handler)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", tags=["Root"])
    async def root():
        """API Root - Basic information"""
        return {"name": app_settings.APP_NAME, "version": app_settings.APP_VERSION}

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(
        "timecheck.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
