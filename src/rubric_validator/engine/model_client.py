"""
Async LLM client wrapper using the OpenAI SDK.

Talks to Anthropic's OpenAI-compatible endpoint (or any other
OpenAI-compatible base URL). The API key is passed in per call because it
is read from the environment on every request; the underlying SDK client is
rebuilt only when the key changes. SDK-level retries are disabled.

Provider failures are translated into the service error taxonomy here so
callers never see SDK exception types.
"""

import openai
from openai import AsyncOpenAI

from ..config import settings
from ..logging import logger
from ..schemas.response import Usage
from .errors import UpstreamError, UpstreamFormatError


class ModelClient:
    def __init__(self):
        self.model_id = settings.model_id
        self._client: AsyncOpenAI | None = None
        self._api_key: str | None = None

    def _get_client(self, api_key: str) -> AsyncOpenAI:
        if self._client is None or api_key != self._api_key:
            self._client = AsyncOpenAI(
                base_url=settings.model_base_url,
                api_key=api_key,
                timeout=settings.model_timeout,
                max_retries=0,
            )
            self._api_key = api_key
        return self._client

    async def generate(self, system_prompt: str, user_prompt: str, api_key: str) -> tuple[str, Usage]:
        client = self._get_client(api_key)
        kwargs: dict = {
            "model": self.model_id,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": settings.model_max_tokens,
            "temperature": settings.model_temperature,
        }
        if settings.model_json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            body = e.response.text if e.response is not None else str(e)
            logger.error(f"Provider returned HTTP {e.status_code}: {body}")
            raise UpstreamError(e.status_code, body) from e
        except openai.APITimeoutError as e:
            logger.error(f"Provider request timed out: {e}")
            raise UpstreamError(504, "Request to provider timed out") from e
        except openai.APIConnectionError as e:
            logger.error(f"Provider connection failed: {e}")
            raise UpstreamError(502, "Could not reach provider") from e

        if not response.choices or not response.choices[0].message.content:
            logger.error(f"Unexpected provider response format: {response!r}")
            raise UpstreamFormatError()

        content = response.choices[0].message.content
        usage = Usage()
        if response.usage:
            usage = Usage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
            )
        return content, usage
