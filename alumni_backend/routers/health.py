"""Health check endpoint."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from alumni_backend.config import get_settings
from alumni_backend.database import engine
from alumni_backend.version import APP_VERSION

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"success": False, "error": "database_unavailable", "message": "Database connection failed"},
        )

    return {
        "success": True,
        "data": {
            "status": "ok",
            "database": "connected",
            "version": APP_VERSION,
            "environment": get_settings().environment,
        },
    }
