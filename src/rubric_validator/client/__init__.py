"""
Client side of the Rubric Validator: HTTP wrapper and run orchestrator.
"""

from .api_client import CriterionRequestError, RubricApiClient
from .orchestrator import (
    AnalysisOrchestrator,
    AnalysisRun,
    CriterionRecord,
    RunState,
    split_criteria,
)

__all__ = [
    "AnalysisOrchestrator",
    "AnalysisRun",
    "CriterionRecord",
    "CriterionRequestError",
    "RubricApiClient",
    "RunState",
    "split_criteria",
]
