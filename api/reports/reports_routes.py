from typing import List, Optional
from fastapi import APIRouter, Body, Depends, File, Form, Header, Response, UploadFile, status
from sqlalchemy.orm import Session

from config.database import get_db
from api.reports.reports_controller import (
    submit_report_controller,
    list_reports_controller,
    list_citizen_reports_controller,
    update_status_controller,
    cleanup_report_controller,
    delete_report_controller,
)
from api.reports.reports_schema import (
    ReportResponse,
    ReportStatusUpdate,
    ReportActionResponse,
)
from helpers.image_upload_helper import ImageHost, get_image_host
from helpers.triage_helper import GeminiClassifier, get_classifier

router = APIRouter(tags=["Reports"])


@router.post(
    "/report",
    response_model=ReportResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a dump report (or upvote a nearby pending one)",
)
def submit_report_endpoint(
    response: Response,
    photo: Optional[UploadFile] = File(None),
    lat: Optional[str] = Form(None),
    lng: Optional[str] = Form(None),
    citizen_device_id: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    x_gemini_key: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    image_host: ImageHost = Depends(get_image_host),
    classifier: GeminiClassifier = Depends(get_classifier),
):
    """
    Creates a new report (201), or, when a pending report lies within the
    clustering radius, upvotes it instead and returns it with `upvoted: true` (200).
    """
    report, upvoted = submit_report_controller(
        db=db,
        lat=lat,
        lng=lng,
        citizen_device_id=citizen_device_id,
        description=description,
        photo=photo,
        api_key=x_gemini_key,
        image_host=image_host,
        classifier=classifier,
    )
    if upvoted:
        response.status_code = status.HTTP_200_OK
    return report


@router.get(
    "/reports",
    response_model=List[ReportResponse],
    response_model_exclude_unset=True,
    summary="List all reports, newest first",
)
def list_reports_endpoint(db: Session = Depends(get_db)):
    return list_reports_controller(db)


@router.get(
    "/reports/citizen/{device_id}",
    response_model=List[ReportResponse],
    response_model_exclude_unset=True,
    summary="List reports submitted from one device",
)
def list_citizen_reports_endpoint(device_id: str, db: Session = Depends(get_db)):
    return list_citizen_reports_controller(db, device_id)


@router.put("/report/{report_id}/status", response_model=ReportActionResponse, summary="Set a report's status")
def update_status_endpoint(
    report_id: int,
    body: Optional[ReportStatusUpdate] = Body(None),
    db: Session = Depends(get_db),
):
    new_status = body.status if body is not None else None
    return update_status_controller(db, report_id, new_status)


@router.put(
    "/report/{report_id}/cleanup",
    response_model=ReportActionResponse,
    summary="Mark a report as cleaned with a proof photo",
)
def cleanup_report_endpoint(
    report_id: int,
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    image_host: ImageHost = Depends(get_image_host),
):
    return cleanup_report_controller(db, report_id, photo, image_host)


@router.delete("/report/{report_id}", response_model=ReportActionResponse, summary="Delete a report")
def delete_report_endpoint(report_id: int, db: Session = Depends(get_db)):
    return delete_report_controller(db, report_id)
