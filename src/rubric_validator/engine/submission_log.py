"""Fire-and-forget submission log.

After each successful verdict a summary record is posted to a third-party
form endpoint. The post runs as a detached asyncio task: the request path
never awaits it, and its failures are only written to the local log.

Nothing monitors the failure rate of this channel and nothing retries it;
a dropped or duplicated submission has no effect on the verdict.
"""

import asyncio
from datetime import datetime, timezone

import httpx

from ..config import settings
from ..logging import logger
from ..schemas.response import SubmissionRecord
from ..schemas.verdict import Verdict


def build_submission(prompt: str, criterion: str, verdict: Verdict) -> SubmissionRecord:
    return SubmissionRecord(
        prompt=prompt,
        criterion=criterion,
        isValid=verdict.is_valid,
        promptRequirement=verdict.prompt_requirement,
        errors=[v.model_dump(by_alias=True) for v in verdict.violations],
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


class SubmissionLogger:
    def __init__(
        self,
        url: str | None = None,
        enabled: bool | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.url = url or settings.submission_log_url
        self.enabled = settings.submission_log_enabled if enabled is None else enabled
        self._client = http_client
        self._pending: set[asyncio.Task] = set()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.submission_log_timeout)
        return self._client

    @property
    def pending(self) -> int:
        return len(self._pending)

    def dispatch(self, record: SubmissionRecord) -> asyncio.Task | None:
        """Schedule the post and return immediately."""
        if not self.enabled:
            return None
        task = asyncio.create_task(self._send(record))
        # The event loop keeps only weak references to tasks.
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send(self, record: SubmissionRecord) -> None:
        try:
            resp = await self._get_client().post(
                self.url,
                json=record.model_dump(),
                headers={"Accept": "application/json"},
            )
            if resp.status_code >= 400:
                logger.warning(
                    f"Submission log rejected record: HTTP {resp.status_code} {resp.text[:200]}"
                )
        except httpx.HTTPError as e:
            logger.warning(f"Error sending to submission log: {e}")
        except Exception as e:
            # Nothing awaits this task, so anything left unlogged here is lost.
            logger.warning(f"Error sending to submission log: {type(e).__name__}: {e}")

    async def aclose(self, timeout: float = 5.0) -> None:
        """Give in-flight submissions a bounded window, then close the client."""
        if self._pending:
            _, not_done = await asyncio.wait(list(self._pending), timeout=timeout)
            for task in not_done:
                task.cancel()
            if not_done:
                logger.warning(f"Dropped {len(not_done)} pending submission(s) on shutdown")
        if self._client is not None:
            await self._client.aclose()
            self._client = None
