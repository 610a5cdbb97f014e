from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from api.stats.stats_controller import assemble_stats
from api.stats.stats_schema import StatsResponse

router = APIRouter(tags=["Stats"])


@router.get("/stats", response_model=StatsResponse, summary="Dashboard statistics")
def stats(db: Session = Depends(get_db)):
    """
    Returns, in one call:
      - kpis: total, cleaned, average hours from report to cleanup
      - overTime: reports per day over the trailing window
      - byCategory: report counts per category
      - locations: every report's coordinates, for the hotspot map
    """
    return assemble_stats(db)
