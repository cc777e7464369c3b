"""Health Router - GET /api/health and /api/health/db"""
import sqlite3

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies.dependency_injection import get_db_connection
from infrastructure.persistence.database.database_connection import DatabaseConnection

router = APIRouter()

SERVICE_NAME = "skillpath-api"
SERVICE_VERSION = "1.0.0"


@router.get("/health", summary="API health check")
async def health():
    """Liveness probe; touches nothing but the process."""
    return {"status": "healthy", "version": SERVICE_VERSION, "service": SERVICE_NAME}


@router.get("/health/db", summary="Database connectivity check")
def health_db(db: DatabaseConnection = Depends(get_db_connection)):
    """Round-trips the database and returns table statistics."""
    try:
        db.ping()
        stats = db.get_database_stats()
    except sqlite3.Error as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable", "error": str(exc)},
        )
    return {"status": "healthy", "database": "connected", "stats": stats}
