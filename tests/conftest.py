"""
Pytest configuration and fixtures
"""
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

# Settings are read at import time: point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IMAGE_HOST"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="cleansweep-uploads-")
os.environ["GEMINI_API_KEY"] = ""
os.environ.pop("REDIS_URL", None)

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, get_db
from api.reports.reports_model import Report, ReportStatus
from helpers.image_upload_helper import ImageHost, get_image_host
from helpers.triage_helper import TriageResult, get_classifier
from utils.exceptions import ImageUploadError


class FakeImageHost(ImageHost):
    """Records uploads and hands out predictable URLs."""

    def __init__(self):
        self.uploads = []
        self.fail = False

    def upload(self, image_bytes, content_type=None):
        if self.fail:
            raise ImageUploadError("image host unreachable")
        self.uploads.append((image_bytes, content_type))
        return f"https://img.example.test/{len(self.uploads)}.jpg"


class FakeClassifier:
    """Stands in for GeminiClassifier and records every call."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result or TriageResult("E-Waste", "Large")

    def classify(self, image_bytes, mime_type, api_key):
        self.calls.append((image_bytes, mime_type, api_key))
        return self.result


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def classifier():
    return FakeClassifier()


@pytest.fixture
def client(db, image_host, classifier):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_host] = lambda: image_host
    app.dependency_overrides[get_classifier] = lambda: classifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_report(db):
    """Insert a report directly, bypassing the submission flow."""
    def _make(lat=12.9716, lng=77.5946, status=ReportStatus.pending, device="device-a",
              category="Other", severity="Medium", created_at=None, cleaned_at=None, upvotes=0):
        report = Report(
            citizen_device_id=device,
            lat=lat,
            lng=lng,
            initial_photo_url="https://img.example.test/seed.jpg",
            category=category,
            severity=severity,
            status=status,
            upvotes=upvotes,
            created_at=created_at or datetime.utcnow(),
            cleaned_at=cleaned_at,
        )
        db.add(report)
        db.commit()
        db.refresh(report)
        return report
    return _make
