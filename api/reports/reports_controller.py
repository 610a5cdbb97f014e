import logging
from typing import Any, List, NoReturn, Optional, Tuple
from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from api.reports.reports_service import (
    submit_report,
    list_reports,
    list_reports_by_device,
    set_report_status,
    cleanup_report,
    delete_report,
)
from api.reports.reports_schema import ReportResponse, ReportActionResponse
from config.settings import settings
from helpers.image_upload_helper import ImageHost
from helpers.triage_helper import GeminiClassifier
from utils.exceptions import CleanSweepError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _raise_http(exc: CleanSweepError, server_message: str) -> NoReturn:
    """
    Client errors keep their message; everything else becomes a generic
    500 so upstream and store details never reach the client.
    """
    if isinstance(exc, (ValidationError, NotFoundError)):
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    logger.error("%s (%s: %s)", server_message, exc.__class__.__name__, exc.message)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=server_message)


def _read_photo(photo: Optional[UploadFile]) -> Tuple[Optional[bytes], Optional[str]]:
    if photo is None:
        return None, None
    data = photo.file.read()
    if len(data) > settings.MAX_FILE_SIZE:
        raise ValidationError("Photo is too large.")
    return data, photo.content_type


def submit_report_controller(
    db: Session,
    lat: Optional[str],
    lng: Optional[str],
    citizen_device_id: Optional[str],
    description: Optional[str],
    photo: Optional[UploadFile],
    api_key: Optional[str],
    image_host: ImageHost,
    classifier: GeminiClassifier,
) -> Tuple[ReportResponse, bool]:
    try:
        photo_bytes, mime_type = _read_photo(photo)
        report, upvoted = submit_report(
            db,
            lat=lat,
            lng=lng,
            citizen_device_id=citizen_device_id,
            photo_bytes=photo_bytes,
            mime_type=mime_type,
            description=description,
            # per-request header wins over the server default key
            api_key=api_key or settings.GEMINI_API_KEY,
            image_host=image_host,
            classifier=classifier,
        )
    except CleanSweepError as exc:
        _raise_http(exc, "Server error while creating report.")

    payload = ReportResponse.model_validate(report)
    if upvoted:
        payload.upvoted = True
    return payload, upvoted


def list_reports_controller(db: Session) -> List[ReportResponse]:
    try:
        return list_reports(db)
    except CleanSweepError as exc:
        _raise_http(exc, "Server error while fetching reports.")


def list_citizen_reports_controller(db: Session, device_id: str) -> List[ReportResponse]:
    try:
        return list_reports_by_device(db, device_id)
    except CleanSweepError as exc:
        _raise_http(exc, "Server error while fetching citizen reports.")


def update_status_controller(db: Session, report_id: int, new_status: Any) -> ReportActionResponse:
    try:
        set_report_status(db, report_id, new_status)
    except CleanSweepError as exc:
        _raise_http(exc, "Server error while updating status.")
    return ReportActionResponse(message="Status updated.")


def cleanup_report_controller(
    db: Session,
    report_id: int,
    photo: Optional[UploadFile],
    image_host: ImageHost,
) -> ReportActionResponse:
    try:
        photo_bytes, content_type = _read_photo(photo)
        cleanup_report(db, report_id, photo_bytes, content_type, image_host)
    except CleanSweepError as exc:
        _raise_http(exc, "Server error while processing cleanup.")
    return ReportActionResponse(message="Report marked as cleaned.")


def delete_report_controller(db: Session, report_id: int) -> ReportActionResponse:
    try:
        delete_report(db, report_id)
    except CleanSweepError as exc:
        _raise_http(exc, "Server error while deleting report.")
    return ReportActionResponse(message="Report deleted successfully.")
