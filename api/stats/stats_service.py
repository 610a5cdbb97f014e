from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from api.reports.reports_model import Report, ReportStatus
from config.settings import settings
from utils.cache_utils import STATS_CACHE_KEY, cache_result

# ─── KPIs ───────────────────────────────────────────────────────────────────


def get_total_reports(db: Session) -> int:
    return int(db.query(func.count(Report.id)).scalar() or 0)


def get_cleaned_reports(db: Session) -> int:
    return int(
        db.query(func.count(Report.id))
          .filter(Report.status == ReportStatus.cleaned)
          .scalar()
        or 0
    )


def get_avg_cleanup_time_hours(db: Session) -> float:
    """
    Mean hours between creation and cleanup over cleaned reports, rounded
    to one decimal. 0 when nothing has been cleaned.
    """
    rows = (
        db.query(Report.created_at, Report.cleaned_at)
          .filter(
              Report.status == ReportStatus.cleaned,
              Report.cleaned_at.isnot(None),
          )
          .all()
    )
    if not rows:
        return 0.0
    hours = [(cleaned_at - created_at).total_seconds() / 3600 for created_at, cleaned_at in rows]
    return round(sum(hours) / len(hours), 1)


def get_kpis(db: Session) -> Dict[str, Any]:
    return {
        "total": get_total_reports(db),
        "cleaned": get_cleaned_reports(db),
        "avg_cleanup_time_hours": get_avg_cleanup_time_hours(db),
    }

# ─── Charts ─────────────────────────────────────────────────────────────────


def get_reports_over_time(
    db: Session,
    days: Optional[int] = None,
    today: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Reports created per calendar day over the trailing window, oldest first."""
    window = days or settings.STATS_WINDOW_DAYS
    today = today or datetime.utcnow()
    since = datetime.combine(today.date() - timedelta(days=window), time.min)

    day = func.date(Report.created_at).label("day")
    rows = (
        db.query(day, func.count(Report.id))
          .filter(Report.created_at >= since)
          .group_by(day)
          .order_by(day.asc())
          .all()
    )
    # postgres hands back a date, sqlite a 'YYYY-MM-DD' string
    return [
        {"date": d.isoformat() if hasattr(d, "isoformat") else str(d), "count": int(c)}
        for d, c in rows
    ]


def get_category_breakdown(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(Report.category, func.count(Report.id))
          .group_by(Report.category)
          .order_by(Report.category.asc())
          .all()
    )
    return [{"category": category, "count": int(count)} for category, count in rows]


def get_locations(db: Session) -> List[Dict[str, float]]:
    return [{"lat": lat, "lng": lng} for lat, lng in db.query(Report.lat, Report.lng).all()]


@cache_result(STATS_CACHE_KEY, expiry_seconds=settings.CACHE_STATS_TTL)
def get_stats(db: Session) -> Dict[str, Any]:
    return {
        "kpis": get_kpis(db),
        "overTime": get_reports_over_time(db),
        "byCategory": get_category_breakdown(db),
        "locations": get_locations(db),
    }
