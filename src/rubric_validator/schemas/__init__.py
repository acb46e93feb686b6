"""
Schemas for the Rubric Validator API.
"""

from .request import AnalyzeRequest
from .response import ErrorBody, HealthResponse, SubmissionRecord, Usage
from .verdict import Verdict, Violation

__all__ = [
    "AnalyzeRequest",
    "ErrorBody",
    "HealthResponse",
    "SubmissionRecord",
    "Usage",
    "Verdict",
    "Violation",
]
