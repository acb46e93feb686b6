"""
Schemas for analyze-rubric requests.
"""

from pydantic import BaseModel


class AnalyzeRequest(BaseModel):
    # Both optional so a missing field surfaces as a 400 from the service,
    # not a 422 from request validation.
    prompt: str | None = None
    criterion: str | None = None
