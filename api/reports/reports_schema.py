from pydantic import BaseModel
from typing import Any, Optional
from datetime import datetime

from api.reports.reports_model import ReportStatus


class ReportBase(BaseModel):
    citizen_device_id: str
    lat: float
    lng: float
    description: Optional[str] = None
    initial_photo_url: str
    category: str
    severity: str


class ReportResponse(ReportBase):
    id: int
    status: ReportStatus
    upvotes: int
    cleanup_photo_url: Optional[str] = None
    created_at: datetime
    cleaned_at: Optional[datetime] = None
    # only present on a merged submission
    upvoted: Optional[bool] = None

    class Config:
        from_attributes = True


class ReportStatusUpdate(BaseModel):
    # any JSON value reaches the service, which rejects it with a 400
    status: Optional[Any] = None


class ReportActionResponse(BaseModel):
    success: bool = True
    message: str
