"""
Domain errors raised by the services.

Controllers translate them into HTTP responses; the status code each one
maps to lives on the class.
"""
from fastapi import status


class CleanSweepError(Exception):
    """Base class for all domain errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(CleanSweepError):
    """Missing or invalid request fields"""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CleanSweepError):
    """No report with the requested id"""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamFailure(CleanSweepError):
    """An external dependency failed and the request cannot complete"""


class ImageUploadError(UpstreamFailure):
    """The image host did not return a durable URL"""


class ClassificationFailure(CleanSweepError):
    """
    The AI triage call failed. Never leaves the classifier: it is always
    downgraded to the fallback label.
    """


class StoreFailure(CleanSweepError):
    """Any persistence error"""
