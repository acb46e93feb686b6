import json

import httpx
import pytest

from src.rubric_validator.client.api_client import CriterionRequestError, RubricApiClient
from src.rubric_validator.client.orchestrator import AnalysisOrchestrator, RunState
from tests.conftest import MOVIE_PROMPT


def _api(handler) -> RubricApiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RubricApiClient(base_url="http://rubric.test/", http_client=http_client)


class TestRubricApiClient:
    async def test_posts_pair_and_parses_verdict(self, sample_verdict_data, sample_verdict):
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(request)
            return httpx.Response(200, json=sample_verdict_data)

        async with _api(handler) as api:
            verdict = await api.evaluate("p", "c")

        assert verdict == sample_verdict
        assert str(received[0].url) == "http://rubric.test/analyze-rubric"
        assert json.loads(received[0].content) == {"prompt": "p", "criterion": "c"}

    async def test_error_detail_message_surfaced(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                429,
                json={"detail": {"code": "UPSTREAM_ERROR", "message": "Error from provider: slow down"}},
            )

        async with _api(handler) as api:
            with pytest.raises(CriterionRequestError) as exc_info:
                await api.evaluate("p", "c")

        assert exc_info.value.status_code == 429
        assert "slow down" in exc_info.value.message
        assert exc_info.value.message.startswith("Failed to analyze criterion")

    async def test_non_json_error_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        async with _api(handler) as api:
            with pytest.raises(CriterionRequestError) as exc_info:
                await api.evaluate("p", "c")
        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.message

    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _api(handler) as api:
            with pytest.raises(CriterionRequestError) as exc_info:
                await api.evaluate("p", "c")
        assert exc_info.value.status_code is None

    async def test_malformed_success_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"unexpected": True})

        async with _api(handler) as api:
            with pytest.raises(CriterionRequestError, match="malformed reply"):
                await api.evaluate("p", "c")

    async def test_non_json_success_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        async with _api(handler) as api:
            with pytest.raises(CriterionRequestError):
                await api.evaluate("p", "c")


class TestOrchestratorOverHttp:
    async def test_rate_limited_item_marked_and_run_continues(self, sample_verdict_data):
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            criterion = json.loads(request.content)["criterion"]
            sent.append(criterion)
            if criterion == "second":
                return httpx.Response(
                    429,
                    json={"detail": {"code": "UPSTREAM_ERROR", "message": "Error from provider: rate_limit_error"}},
                )
            return httpx.Response(200, json=sample_verdict_data)

        async with _api(handler) as api:
            orch = AnalysisOrchestrator(api)
            await orch.analyze(MOVIE_PROMPT, "first\nsecond\nthird")

        assert sent == ["first", "second", "third"]
        first, second, third = orch.records
        assert first.verdict is not None
        assert second.verdict is None
        assert "rate_limit_error" in second.error_message
        assert third.verdict is not None
        assert orch.run.state == RunState.DONE
