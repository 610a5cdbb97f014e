import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, Enum, text
from config.database import Base


class ReportStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    cleaned = "cleaned"


class ReportCategory(str, enum.Enum):
    household_waste = "Household Waste"
    construction_debris = "Construction Debris"
    hazardous_chemical = "Hazardous/Chemical"
    e_waste = "E-Waste"
    organic_green_waste = "Organic/Green Waste"
    other = "Other"


class ReportSeverity(str, enum.Enum):
    small = "Small"
    medium = "Medium"
    large = "Large"


class Report(Base):
    __tablename__ = "reports"

    id                = Column(Integer, primary_key=True, index=True)
    citizen_device_id = Column(String(255), nullable=False, index=True)

    lat               = Column(Float, nullable=False)
    lng               = Column(Float, nullable=False)
    description       = Column(Text, nullable=True)
    initial_photo_url = Column(String, nullable=False)

    category          = Column(String(64), nullable=False, default=ReportCategory.other.value)
    severity          = Column(String(16), nullable=False, default=ReportSeverity.medium.value)
    status            = Column(
        Enum(
            ReportStatus,
            name="report_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ReportStatus.pending,
        index=True,
    )
    upvotes           = Column(Integer, nullable=False, default=0, server_default=text("0"))

    cleanup_photo_url = Column(String, nullable=True)
    created_at        = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    cleaned_at        = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Report(id={self.id}, status='{self.status}', lat={self.lat}, lng={self.lng})>"
