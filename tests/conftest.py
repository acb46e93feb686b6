import json

import pytest
from fastapi.testclient import TestClient

from src.rubric_validator.engine.credentials import StaticCredentialProvider
from src.rubric_validator.engine.evaluator import EvaluationService
from src.rubric_validator.main import app
from src.rubric_validator.schemas.response import Usage
from src.rubric_validator.schemas.verdict import Verdict, Violation

MOVIE_PROMPT = "List movies by genre, bold each category."


@pytest.fixture
def sample_verdict_data() -> dict:
    return {
        "isValid": False,
        "promptRequirement": "bold each category",
        "errors": [
            {
                "rule": "objectivity",
                "explanation": "'clear' is subjective and cannot be verified",
            },
            {
                "rule": "verification_specificity",
                "explanation": "Criterion doesn't say how clarity is checked",
            },
        ],
        "suggestion": "The response must show each genre name in bold using **Genre**",
        "reasoning": "Targets the prompt's bold-category requirement with a checkable format",
    }


@pytest.fixture
def sample_verdict(sample_verdict_data) -> Verdict:
    return Verdict.model_validate(sample_verdict_data)


@pytest.fixture
def valid_verdict() -> Verdict:
    return Verdict(
        is_valid=True,
        prompt_requirement="List movies by genre",
        violations=(),
        suggestion="",
        reasoning="",
    )


@pytest.fixture
def mock_model_response(sample_verdict_data) -> str:
    return json.dumps(sample_verdict_data)


class MockModelClient:
    model_id = "test-model"

    def __init__(self, output: str):
        self.output = output
        self.calls: list[tuple[str, str, str]] = []

    async def generate(self, system_prompt, user_prompt, api_key):
        self.calls.append((system_prompt, user_prompt, api_key))
        return self.output, Usage(input_tokens=100, output_tokens=50)


class RecordingSubmissionLogger:
    def __init__(self):
        self.records = []

    def dispatch(self, record):
        self.records.append(record)


@pytest.fixture
def model_client(mock_model_response) -> MockModelClient:
    return MockModelClient(mock_model_response)


@pytest.fixture
def submission_logger() -> RecordingSubmissionLogger:
    return RecordingSubmissionLogger()


@pytest.fixture
def service(model_client, submission_logger) -> EvaluationService:
    return EvaluationService(
        model_client=model_client,
        credentials=StaticCredentialProvider("test-key"),
        submission_logger=submission_logger,
    )


@pytest.fixture
def client(service):
    app.state.evaluation_service = service
    return TestClient(app)


def verdict_with(**overrides) -> Verdict:
    data = {
        "is_valid": False,
        "prompt_requirement": "bold each category",
        "violations": (Violation(rule_name="objectivity", explanation="subjective"),),
        "suggestion": "Use **Genre** headers",
        "reasoning": "Checkable",
    }
    data.update(overrides)
    return Verdict(**data)
