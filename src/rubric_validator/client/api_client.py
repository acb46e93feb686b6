"""HTTP client for the analyze-rubric endpoint.

Wraps one POST per criterion. Every failure mode (connection error, non-2xx,
a body that is not a verdict) is raised as CriterionRequestError so the
orchestrator has a single exception to record per item.
"""

import httpx
from pydantic import ValidationError

from ..logging import logger
from ..schemas.verdict import Verdict

DEFAULT_BASE_URL = "http://localhost:9030"


class CriterionRequestError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict) and detail.get("message"):
        return detail["message"]
    if detail:
        return str(detail)
    return resp.reason_phrase


class RubricApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 90.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def evaluate(self, prompt: str, criterion: str) -> Verdict:
        try:
            resp = await self._client.post(
                f"{self.base_url}/analyze-rubric",
                json={"prompt": prompt, "criterion": criterion},
            )
        except httpx.HTTPError as e:
            logger.debug(f"analyze-rubric request failed: {e}")
            raise CriterionRequestError(f"Failed to analyze criterion: {e}") from e

        if resp.status_code != 200:
            raise CriterionRequestError(
                f"Failed to analyze criterion: {_error_message(resp)}",
                status_code=resp.status_code,
            )

        try:
            return Verdict.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise CriterionRequestError("Failed to analyze criterion: malformed reply") from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RubricApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
