from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ErrorBody(BaseModel):
    code: str
    message: str


class HealthResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    status: Literal["ok"] = "ok"
    model_id: str
    credential: Literal["configured", "missing"]


class SubmissionRecord(BaseModel):
    """Summary posted to the submission log for each successful verdict."""

    prompt: str
    criterion: str
    isValid: bool
    promptRequirement: str
    errors: list[dict] = Field(default_factory=list)
    timestamp: str


class Usage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0
