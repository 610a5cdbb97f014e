import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from api.reports.reports_model import Report, ReportStatus
from config.settings import settings
from utils.geoutils import distance_km

logger = logging.getLogger(__name__)


def nearest_pending_report(
    db: Session,
    lat: float,
    lng: float,
) -> Tuple[Optional[Report], Optional[float]]:
    """
    Return the pending report closest to (lat, lng) with its distance in km,
    or (None, None) when there are no pending reports.
    Ties resolve to the lowest id.
    """
    candidates = (
        db.query(Report)
          .filter(Report.status == ReportStatus.pending)
          .order_by(Report.id.asc())
          .all()
    )

    best: Optional[Report] = None
    best_dist: Optional[float] = None
    for r in candidates:
        dist = distance_km(lat, lng, r.lat, r.lng)
        # strict comparison keeps the earlier (lower id) report on a tie
        if best_dist is None or dist < best_dist:
            best, best_dist = r, dist
    return best, best_dist


def find_merge_target(
    db: Session,
    lat: float,
    lng: float,
    radius_km: Optional[float] = None,
) -> Optional[Report]:
    """
    Pending report a new submission at (lat, lng) should be merged into, if
    one lies strictly closer than radius_km. In-progress and cleaned reports
    never absorb duplicates.
    """
    radius = settings.DEDUP_RADIUS_KM if radius_km is None else radius_km
    report, dist = nearest_pending_report(db, lat, lng)
    if report is None or dist >= radius:
        return None

    logger.debug("Submission at (%s, %s) is %.1f m from report %s", lat, lng, dist * 1000, report.id)
    return report
