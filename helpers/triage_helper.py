# helpers/triage_helper.py
"""
AI triage of report photos through the Gemini generateContent REST API.

The classifier never raises: a missing key, a transport error, a non-2xx
response or an unparseable answer all collapse to the fallback label, and
the returned TriageResult says whether that happened.
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from api.reports.reports_model import ReportCategory, ReportSeverity
from config.settings import settings
from utils.exceptions import ClassificationFailure

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = ReportCategory.other.value
FALLBACK_SEVERITY = ReportSeverity.medium.value

CATEGORIES = [c.value for c in ReportCategory]
SEVERITIES = [s.value for s in ReportSeverity]

TRIAGE_PROMPT = """
Analyze this image of a dump site.
Respond ONLY with a valid JSON object with two keys: "category" and "severity".

"category" options: "Household Waste", "Construction Debris", "Hazardous/Chemical", "E-Waste", "Organic/Green Waste", "Other".
"severity" options: "Small" (e.g., a few bags), "Medium" (e.g., a small pile, mattress), "Large" (e.g., truckload, construction site).

Example response:
{"category": "Construction Debris", "severity": "Large"}
""".strip()


@dataclass(frozen=True)
class TriageResult:
    category: str
    severity: str
    is_fallback: bool = False


FALLBACK = TriageResult(FALLBACK_CATEGORY, FALLBACK_SEVERITY, is_fallback=True)


def _strip_markdown_fence(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def parse_triage_text(text: str) -> TriageResult:
    """
    Turn the model's text answer into a TriageResult. Fields that are
    missing or outside the accepted values fall back individually.
    Raises ClassificationFailure when the text is not a JSON object.
    """
    try:
        data = json.loads(_strip_markdown_fence(text))
    except (TypeError, ValueError) as exc:
        raise ClassificationFailure(f"unparseable triage answer: {exc}")
    if not isinstance(data, dict):
        raise ClassificationFailure("triage answer is not a JSON object")

    category = data.get("category")
    severity = data.get("severity")
    return TriageResult(
        category=category if category in CATEGORIES else FALLBACK_CATEGORY,
        severity=severity if severity in SEVERITIES else FALLBACK_SEVERITY,
    )


def _extract_text(body: Any) -> str:
    try:
        return body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise ClassificationFailure("unexpected response structure from Gemini")


class GeminiClassifier:
    """Wraps one generateContent call per classification."""

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_API_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def build_payload(self, image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": TRIAGE_PROMPT},
                        {
                            "inlineData": {
                                "mimeType": mime_type,
                                "data": base64.b64encode(image_bytes).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
        }

    def _request(self, image_bytes: bytes, mime_type: str, api_key: str) -> TriageResult:
        try:
            resp = self.session.post(
                self.endpoint,
                json=self.build_payload(image_bytes, mime_type),
                headers={"x-goog-api-key": api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ClassificationFailure(f"Gemini request failed: {exc.__class__.__name__}")

        if not resp.ok:
            raise ClassificationFailure(f"Gemini API returned HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError:
            raise ClassificationFailure("Gemini API returned a non-JSON body")

        return parse_triage_text(_extract_text(body))

    def classify(
        self,
        image_bytes: bytes,
        mime_type: Optional[str],
        api_key: Optional[str],
    ) -> TriageResult:
        if not api_key:
            logger.warning("No Gemini key provided. Skipping AI triage.")
            return FALLBACK

        try:
            return self._request(image_bytes, mime_type or "image/jpeg", api_key)
        except ClassificationFailure as exc:
            logger.warning("AI triage failed, using fallback label: %s", exc.message)
            return FALLBACK


_classifier: Optional[GeminiClassifier] = None


def get_classifier() -> GeminiClassifier:
    """FastAPI dependency returning the shared classifier."""
    global _classifier
    if _classifier is None:
        _classifier = GeminiClassifier()
    return _classifier
