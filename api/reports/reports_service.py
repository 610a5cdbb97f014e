import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.reports.reports_dedup import find_merge_target
from api.reports.reports_model import Report, ReportStatus
from helpers.image_upload_helper import ImageHost
from helpers.triage_helper import GeminiClassifier
from utils.cache_utils import invalidate_stats_cache
from utils.exceptions import NotFoundError, StoreFailure, ValidationError
from utils.geoutils import validate_coordinates

logger = logging.getLogger(__name__)

STATUS_VALUES = [s.value for s in ReportStatus]


@contextmanager
def _store_errors(db: Session, action: str):
    """Roll back and wrap any persistence error raised inside the block."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store failure while %s: %s", action, exc)
        raise StoreFailure(f"Store failure while {action}") from exc


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def get_report(db: Session, report_id: int) -> Report:
    with _store_errors(db, "loading report"):
        report = db.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found.")
    return report


def submit_report(
    db: Session,
    *,
    lat,
    lng,
    citizen_device_id: Optional[str],
    photo_bytes: Optional[bytes],
    mime_type: Optional[str],
    description: Optional[str],
    api_key: Optional[str],
    image_host: ImageHost,
    classifier: GeminiClassifier,
) -> Tuple[Report, bool]:
    """
    Create a report, or upvote the pending report closer than the dedup
    radius. Returns (report, upvoted).

    The dedup lookup and the insert are separate statements, so two
    simultaneous submissions at the same spot can both create reports.
    """
    if not photo_bytes:
        raise ValidationError("Photo is required.")
    if _is_blank(lat) or _is_blank(lng) or _is_blank(citizen_device_id):
        raise ValidationError("Missing required fields.")
    lat_f, lng_f = validate_coordinates(lat, lng)

    # 1) Clustering
    with _store_errors(db, "checking for duplicates"):
        match = find_merge_target(db, lat_f, lng_f)

    if match is not None:
        with _store_errors(db, "upvoting report"):
            db.query(Report).filter(Report.id == match.id).update(
                {Report.upvotes: Report.upvotes + 1},
                synchronize_session=False,
            )
            db.commit()
            db.refresh(match)
        invalidate_stats_cache()
        logger.info("Submission from %s merged into report %s (upvotes=%s)",
                    citizen_device_id, match.id, match.upvotes)
        return match, True

    # 2) New report: upload failures propagate, triage never fails
    initial_photo_url = image_host.upload(photo_bytes, mime_type)
    triage = classifier.classify(photo_bytes, mime_type, api_key)

    report = Report(
        citizen_device_id=citizen_device_id.strip(),
        lat=lat_f,
        lng=lng_f,
        description=description or None,
        initial_photo_url=initial_photo_url,
        category=triage.category,
        severity=triage.severity,
        status=ReportStatus.pending,
        upvotes=0,
    )
    with _store_errors(db, "creating report"):
        db.add(report)
        db.commit()
        db.refresh(report)
    invalidate_stats_cache()
    logger.info("Created report %s (%s / %s%s)", report.id, report.category,
                report.severity, ", fallback triage" if triage.is_fallback else "")
    return report, False


def list_reports(db: Session) -> List[Report]:
    with _store_errors(db, "listing reports"):
        return (
            db.query(Report)
              .order_by(desc(Report.created_at), desc(Report.id))
              .all()
        )


def list_reports_by_device(db: Session, citizen_device_id: str) -> List[Report]:
    with _store_errors(db, "listing citizen reports"):
        return (
            db.query(Report)
              .filter(Report.citizen_device_id == citizen_device_id)
              .order_by(desc(Report.created_at), desc(Report.id))
              .all()
        )


def set_report_status(db: Session, report_id: int, new_status: Any) -> Report:
    """
    Unguarded setter: any status may follow any other. cleaned_at follows
    the status so it is set exactly when the report is cleaned.
    """
    if new_status not in STATUS_VALUES:
        raise ValidationError("Invalid status.")

    report = get_report(db, report_id)
    status = ReportStatus(new_status)
    with _store_errors(db, "updating status"):
        report.status = status
        if status == ReportStatus.cleaned:
            if report.cleaned_at is None:
                report.cleaned_at = datetime.utcnow()
        else:
            report.cleaned_at = None
        db.commit()
        db.refresh(report)
    invalidate_stats_cache()
    logger.info("Report %s status set to %s", report_id, status.value)
    return report


def cleanup_report(
    db: Session,
    report_id: int,
    photo_bytes: Optional[bytes],
    content_type: Optional[str],
    image_host: ImageHost,
) -> Report:
    if not photo_bytes:
        raise ValidationError("Cleanup photo is required.")

    report = get_report(db, report_id)
    cleanup_photo_url = image_host.upload(photo_bytes, content_type)

    with _store_errors(db, "processing cleanup"):
        report.status = ReportStatus.cleaned
        report.cleanup_photo_url = cleanup_photo_url
        report.cleaned_at = datetime.utcnow()
        db.commit()
        db.refresh(report)
    invalidate_stats_cache()
    logger.info("Report %s marked as cleaned", report_id)
    return report


def delete_report(db: Session, report_id: int) -> None:
    with _store_errors(db, "deleting report"):
        deleted = db.query(Report).filter(Report.id == report_id).delete()
        db.commit()
    if deleted == 0:
        raise NotFoundError("Report not found.")
    invalidate_stats_cache()
    logger.info("Report %s deleted", report_id)
