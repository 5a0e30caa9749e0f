import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from student_records.core.database import engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meta")


@router.get("/health")
def health_meta():
    db_ok = False
    db_error = None
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as exc:
        logger.warning("Health check database check failed: %s", exc)
        db_error = "unavailable"
    return {
        "ok": db_ok,
        "database": {"ok": db_ok, "error": db_error},
    }
