"""Single-criterion evaluation.

Coordinates one analyze-rubric call:
1. Check inputs (BadRequestError)
2. Read the API key from the credential provider (MisconfiguredError)
3. Build system + user prompts
4. Call the model (UpstreamError / UpstreamFormatError)
5. Parse the reply into a Verdict (ParseError)
6. Hand a summary to the submission log without waiting on it

The service holds no per-request state, so one instance serves concurrent
requests.
"""

import time

from ..config import settings
from ..logging import logger
from ..schemas.verdict import Verdict
from .credentials import CredentialProvider, EnvCredentialProvider
from .errors import BadRequestError, MisconfiguredError
from .model_client import ModelClient
from .parser import parse_verdict
from .prompt import build_user_prompt, get_system_prompt
from .submission_log import SubmissionLogger, build_submission


class EvaluationService:
    def __init__(
        self,
        model_client: ModelClient,
        credentials: CredentialProvider | None = None,
        submission_logger: SubmissionLogger | None = None,
    ):
        self.model_client = model_client
        self.credentials = credentials or EnvCredentialProvider()
        self.submission_logger = submission_logger

    def _check_inputs(self, prompt: str | None, criterion: str | None) -> tuple[str, str]:
        if not prompt or not prompt.strip() or not criterion or not criterion.strip():
            raise BadRequestError("Both prompt and criterion are required")
        if len(prompt) > settings.max_field_length or len(criterion) > settings.max_field_length:
            raise BadRequestError(
                f"Prompt and criterion must each be at most {settings.max_field_length} characters"
            )
        return prompt, criterion

    async def evaluate(self, prompt: str | None, criterion: str | None) -> Verdict:
        prompt, criterion = self._check_inputs(prompt, criterion)

        api_key = self.credentials.get_api_key()
        if not api_key:
            logger.error("Model API key is not configured")
            raise MisconfiguredError()

        start_time = time.time()
        raw_output, usage = await self.model_client.generate(
            get_system_prompt(), build_user_prompt(prompt, criterion), api_key
        )
        verdict = parse_verdict(raw_output)
        latency_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Evaluation complete: valid={verdict.is_valid} violations={len(verdict.violations)} "
            f"input_tokens={usage.input_tokens} output_tokens={usage.output_tokens} "
            f"latency_ms={latency_ms}"
        )

        if self.submission_logger is not None:
            self.submission_logger.dispatch(build_submission(prompt, criterion, verdict))

        return verdict
