from atams import AtamsBaseSettings


class Settings(AtamsBaseSettings):
    """
    Application Settings

    Inherits from AtamsBaseSettings which includes:
    - DATABASE_URL (required, defaulted here to a local SQLite file)
    - LOGGING_ENABLED, LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH
    - CORS_ORIGINS, CORS_ALLOW_CREDENTIALS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
    - DEBUG

    All settings can be overridden via .env file or by redefining them here.
    """
    APP_NAME: str = "TimeCheck"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Local store
    DATABASE_URL: str = "sqlite:///./WorkTime.sqlite"

    # Required by the base settings; SSO is not used by this app
    ATLAS_APP_CODE: str = "TIMECHECK"

    # Check-in guard
    ALLOW_CONCURRENT_OPEN_SESSIONS: bool = False

    # Monthly progress target
    MONTHLY_TARGET_HOURS: float = 160.0

    # CSV backups
    BACKUP_DIR: str = "backups"


settings = Settings()
