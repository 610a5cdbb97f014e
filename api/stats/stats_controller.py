import logging
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.stats.stats_service import get_stats
from api.stats.stats_schema import StatsResponse

logger = logging.getLogger(__name__)


def assemble_stats(db: Session) -> StatsResponse:
    try:
        stats = get_stats(db)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("GET /api/stats failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching stats.",
        )
    return StatsResponse(**stats)
