# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared engine for the dashboard database.
This service only reads the synced sessions table, so connections are
tagged with the service name and opened read-only unless DB_READ_ONLY=false.
"""
from sqlalchemy import create_engine
from app.core.config import settings


def _connect_args() -> dict[str, str]:
    args = {"application_name": settings.SERVICE_NAME}
    if settings.DB_READ_ONLY:
        args["options"] = "-c default_transaction_read_only=on"
    return args


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    pool_size=settings.POOL_SIZE,
    max_overflow=settings.MAX_OVERFLOW,
    pool_recycle=settings.POOL_RECYCLE,
    connect_args=_connect_args(),
)
