"""
Verdict schema shared by the service and the client.

Python attribute names are snake_case; the wire format uses the field names
the model is instructed to produce (isValid, promptRequirement, errors,
rule). Serialize with ``by_alias=True`` to get the wire shape back.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Violation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rule_name: str = Field(alias="rule")
    explanation: str = ""

    @field_validator("explanation", mode="before")
    @classmethod
    def _null_explanation(cls, v):
        return "" if v is None else v


class Verdict(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    prompt_requirement: str = Field(default="", alias="promptRequirement")
    violations: tuple[Violation, ...] = Field(default=(), alias="errors")
    suggestion: str = ""
    reasoning: str = ""

    # The model sends null as often as it omits a field.
    @field_validator("prompt_requirement", "suggestion", "reasoning", mode="before")
    @classmethod
    def _null_text(cls, v):
        return "" if v is None else v

    @field_validator("violations", mode="before")
    @classmethod
    def _null_violations(cls, v):
        return () if v is None else v

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
